"""SQLAlchemy models for the ConfirmaAí API."""

from confirmaai.models.appointment import (
    INACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
)
from confirmaai.models.clinic_settings import ClinicSettings
from confirmaai.models.message_log import MessageLog, MessageStatus, MessageType
from confirmaai.models.patient import Patient
from confirmaai.models.user import User

__all__ = [
    "INACTIVE_STATUSES",
    "Appointment",
    "AppointmentStatus",
    "ClinicSettings",
    "MessageLog",
    "MessageStatus",
    "MessageType",
    "Patient",
    "User",
]
