from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from confirmaai.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from confirmaai.models.user import User

DEFAULT_CONFIRMATION_HOURS_BEFORE = 48
DEFAULT_REMINDER_HOURS_BEFORE = 24
DEFAULT_CONFIRMATION_MESSAGE = (
    "Olá {nome}! Você tem consulta agendada em {clinica} no dia {data} às {hora}. "
    "Confirma sua presença? Responda SIM ou NÃO."
)
DEFAULT_REMINDER_MESSAGE = (
    "Oi {nome}! Ainda não recebemos sua confirmação para a consulta de amanhã "
    "({data} às {hora}). Confirma sua presença? Responda SIM ou NÃO."
)


class ClinicSettings(Base, TimestampMixin):
    """Per-clinic messaging windows and templates."""

    __tablename__ = "settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True
    )
    confirmation_hours_before: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_CONFIRMATION_HOURS_BEFORE, nullable=False
    )
    reminder_hours_before: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_REMINDER_HOURS_BEFORE, nullable=False
    )
    confirmation_message: Mapped[str] = mapped_column(
        Text, default=DEFAULT_CONFIRMATION_MESSAGE, nullable=False
    )
    reminder_message: Mapped[str] = mapped_column(
        Text, default=DEFAULT_REMINDER_MESSAGE, nullable=False
    )

    user: Mapped[User] = relationship(back_populates="clinic_settings")
