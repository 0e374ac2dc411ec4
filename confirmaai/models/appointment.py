from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from confirmaai.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from confirmaai.models.message_log import MessageLog
    from confirmaai.models.patient import Patient
    from confirmaai.models.user import User


class AppointmentStatus(str, enum.Enum):
    """Possible statuses for an appointment lifecycle."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    NOT_CONFIRMED = "NOT_CONFIRMED"
    CANCELED = "CANCELED"
    NO_SHOW = "NO_SHOW"


# Statuses that free the time slot for another booking.
INACTIVE_STATUSES = (AppointmentStatus.CANCELED, AppointmentStatus.NO_SHOW)


class Appointment(Base, TimestampMixin):
    """Appointment between a patient and the clinic."""

    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_status_date_time", "status", "date_time"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("patients.id", ondelete="CASCADE"), index=True
    )
    date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(AppointmentStatus, name="appointment_status"),
        default=AppointmentStatus.PENDING,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    confirmation_sent_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    reminder_sent_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    patient: Mapped[Patient] = relationship(back_populates="appointments")
    user: Mapped[User] = relationship()
    message_logs: Mapped[list[MessageLog]] = relationship(
        back_populates="appointment",
        cascade="all, delete-orphan",
        order_by="MessageLog.sent_at.desc()",
    )
