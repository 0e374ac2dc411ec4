"""Import SQLAlchemy models for Alembic's autogenerate feature."""

from confirmaai.models.base import Base
from confirmaai.models import (  # noqa: F401
    Appointment,
    ClinicSettings,
    MessageLog,
    Patient,
    User,
)

__all__ = [
    "Base",
    "Appointment",
    "ClinicSettings",
    "MessageLog",
    "Patient",
    "User",
]
