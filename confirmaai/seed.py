from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select

from confirmaai.core.config import settings
from confirmaai.db.session import SessionLocal
from confirmaai.logging_utils import configure_logging, set_tenant_context
from confirmaai.models import (
    Appointment,
    AppointmentStatus,
    ClinicSettings,
    MessageLog,
    MessageStatus,
    MessageType,
    Patient,
    User,
)
from confirmaai.models.base import utcnow
from confirmaai.services.security import hash_password
from confirmaai.services.timezones import tenant_timezone, to_local, to_storage

logger = logging.getLogger(__name__)

DEMO_EMAIL = "admin@teste.com"
DEMO_PASSWORD = "123456"  # pragma: allowlist secret

PATIENTS: list[tuple[str, str, str | None]] = [
    ("Maria Santos", "+5511999990001", "maria.santos@email.com"),
    ("José Oliveira", "+5511999990002", "jose.oliveira@email.com"),
    ("Ana Costa", "+5511999990003", None),
    ("Pedro Souza", "+5511999990004", "pedro.souza@email.com"),
    ("Carla Lima", "+5511999990005", None),
]

# (patient index, day offset, local hour, status, confirmation sent hours ago,
#  confirmed hours ago, reminder sent hours ago)
APPOINTMENTS: list[tuple[int, int, int, AppointmentStatus, int | None, int | None, int | None]] = [
    (0, 0, 14, AppointmentStatus.PENDING, None, None, None),
    (1, 1, 10, AppointmentStatus.CONFIRMED, 26, 25, None),
    (2, 1, 15, AppointmentStatus.PENDING, 2, None, None),
    (3, 2, 9, AppointmentStatus.CANCELED, None, None, None),
    (4, 3, 11, AppointmentStatus.PENDING, None, None, None),
    (0, 3, 16, AppointmentStatus.CONFIRMED, 2, 1, None),
    (1, -1, 14, AppointmentStatus.NO_SHOW, 48, None, None),
    (2, 5, 10, AppointmentStatus.PENDING, None, None, None),
    (3, 6, 13, AppointmentStatus.CONFIRMED, 24, 12, None),
    (4, 7, 15, AppointmentStatus.NOT_CONFIRMED, 3, None, 1),
]

NOTES = {
    (0, 0): "Consulta de rotina",
    (3, 2): "Paciente cancelou",
}


def ensure_user(session) -> User:
    user = session.execute(select(User).where(User.email == DEMO_EMAIL)).scalar_one_or_none()
    if user:
        set_tenant_context(user.id)
        logger.info("user already present", extra={"user_id": str(user.id)})
        return user

    user = User(
        name="Dr. João Silva",
        email=DEMO_EMAIL,
        password_hash=hash_password(DEMO_PASSWORD),
        clinic_name="Clínica Saúde Total",
        avg_appointment_value=Decimal("150.00"),
        timezone=settings.timezone,
    )
    session.add(user)
    session.flush()
    set_tenant_context(user.id)
    logger.info("created user", extra={"user_id": str(user.id)})
    return user


def ensure_settings(session, user: User) -> ClinicSettings:
    clinic_settings = session.execute(
        select(ClinicSettings).where(ClinicSettings.user_id == user.id)
    ).scalar_one_or_none()
    if clinic_settings:
        return clinic_settings

    clinic_settings = ClinicSettings(
        user_id=user.id,
        confirmation_hours_before=24,
        reminder_hours_before=6,
    )
    session.add(clinic_settings)
    session.flush()
    logger.info("created settings", extra={"user_id": str(user.id)})
    return clinic_settings


def ensure_patients(session, user: User) -> list[Patient]:
    created = 0
    patients: list[Patient] = []
    for name, phone, email in PATIENTS:
        patient = session.execute(
            select(Patient).where(Patient.user_id == user.id, Patient.phone == phone)
        ).scalar_one_or_none()
        if not patient:
            patient = Patient(user_id=user.id, name=name, phone=phone, email=email)
            session.add(patient)
            session.flush()
            created += 1
        patients.append(patient)

    logger.info(
        "ensured patients",
        extra={"user_id": str(user.id), "created": created, "total": len(patients)},
    )
    return patients


def _hours_ago(now: datetime, hours: int | None) -> datetime | None:
    return None if hours is None else now - timedelta(hours=hours)


def ensure_appointments(session, user: User, patients: Iterable[Patient]) -> None:
    """Create demo appointments around today, with logs for contacted ones."""

    existing = session.execute(
        select(Appointment.id).where(Appointment.user_id == user.id).limit(1)
    ).first()
    if existing:
        logger.info("appointments already present", extra={"user_id": str(user.id)})
        return

    patients = list(patients)
    tz = tenant_timezone(user)
    now = utcnow()
    today = to_local(now, tz).date()
    created = 0

    for index, offset, hour, status, confirmation_ago, confirmed_ago, reminder_ago in APPOINTMENTS:
        local_start = datetime.combine(today + timedelta(days=offset), time(hour=hour))
        appointment = Appointment(
            user_id=user.id,
            patient_id=patients[index].id,
            date_time=to_storage(local_start, tz),
            status=status,
            notes=NOTES.get((index, offset)),
            confirmation_sent_at=_hours_ago(now, confirmation_ago),
            confirmed_at=_hours_ago(now, confirmed_ago),
            reminder_sent_at=_hours_ago(now, reminder_ago),
        )
        session.add(appointment)
        session.flush()
        created += 1

        if appointment.confirmation_sent_at is None:
            continue

        confirmed = status == AppointmentStatus.CONFIRMED
        session.add(
            MessageLog(
                appointment_id=appointment.id,
                type=MessageType.CONFIRMATION,
                status=MessageStatus.DELIVERED,
                sent_at=appointment.confirmation_sent_at,
                response="1" if confirmed else None,
                responded_at=appointment.confirmed_at,
            )
        )
        if appointment.reminder_sent_at is not None:
            session.add(
                MessageLog(
                    appointment_id=appointment.id,
                    type=MessageType.REMINDER,
                    status=MessageStatus.DELIVERED,
                    sent_at=appointment.reminder_sent_at,
                )
            )

    logger.info(
        "ensured appointments",
        extra={"user_id": str(user.id), "created": created},
    )


def seed() -> None:
    configure_logging()
    logger.info("starting seed process")

    session = SessionLocal()
    try:
        user = ensure_user(session)
        ensure_settings(session, user)
        patients = ensure_patients(session, user)
        ensure_appointments(session, user, patients)
        session.commit()
        logger.info("seed complete", extra={"user_id": str(user.id)})
    except Exception:
        session.rollback()
        logger.exception("seed failed")
        raise
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    seed()
