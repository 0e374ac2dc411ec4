from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from confirmaai.core.config import settings
from confirmaai.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from confirmaai.models.clinic_settings import ClinicSettings


class User(Base, TimestampMixin):
    """Clinic account; every tenant-scoped row hangs off a user."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    clinic_name: Mapped[str] = mapped_column(String(255), nullable=False)
    avg_appointment_value: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0"), nullable=False
    )
    timezone: Mapped[str] = mapped_column(String(64), default=lambda: settings.timezone)

    clinic_settings: Mapped[ClinicSettings | None] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
