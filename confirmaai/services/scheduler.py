"""Periodic confirmation, reminder and no-show processing.

``run_scheduler_jobs`` is invoked by the Celery beat schedule (see
``confirmaai.jobs.tasks``). Each run is one sequential batch:

1. send the confirmation message to PENDING appointments that entered
   their clinic's confirmation window;
2. send the reminder to PENDING appointments that were already asked to
   confirm and entered the reminder window;
3. flag PENDING appointments whose time has passed as NO_SHOW.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Literal

from prometheus_client import Counter
from sqlalchemy import select, update
from sqlalchemy.orm import Session, joinedload

from confirmaai.logging_utils import tenant_context
from confirmaai.models import (
    Appointment,
    AppointmentStatus,
    ClinicSettings,
    MessageLog,
    MessageStatus,
    MessageType,
    User,
)
from confirmaai.models.base import utcnow
from confirmaai.services.message_template import (
    format_appointment_date,
    format_appointment_time,
    format_message,
)
from confirmaai.services.timezones import tenant_timezone, to_local
from confirmaai.services.whatsapp_client import WhatsAppError, send_text

logger = logging.getLogger(__name__)

MESSAGES_COUNTER = Counter(
    "confirmaai_scheduler_messages_total",
    "WhatsApp messages dispatched by the scheduler.",
    ["type", "status"],
)
NO_SHOW_COUNTER = Counter(
    "confirmaai_scheduler_no_shows_total",
    "Appointments flagged as no-show by the scheduler.",
)

Phase = Literal["confirmation", "reminder"]


def render_message(appointment: Appointment, template: str) -> str:
    """Render a clinic template for the given appointment in the clinic's timezone."""

    user = appointment.user
    local_start = to_local(appointment.date_time, tenant_timezone(user))
    return format_message(
        template,
        nome=appointment.patient.name,
        data=format_appointment_date(local_start),
        hora=format_appointment_time(local_start),
        clinica=user.clinic_name,
    )


def within_send_window(appointment_time: datetime, hours_before: int, now: datetime) -> bool:
    """Return whether ``now`` lies in ``[appointment_time - hours_before, appointment_time]``."""

    send_from = appointment_time - timedelta(hours=hours_before)
    return send_from <= now <= appointment_time


def _candidates(db: Session, phase: Phase) -> list[Appointment]:
    stmt = (
        select(Appointment)
        .join(ClinicSettings, ClinicSettings.user_id == Appointment.user_id)
        .where(Appointment.status == AppointmentStatus.PENDING)
        .options(
            joinedload(Appointment.patient),
            joinedload(Appointment.user).joinedload(User.clinic_settings),
        )
        .order_by(Appointment.date_time)
    )
    if phase == "confirmation":
        stmt = stmt.where(Appointment.confirmation_sent_at.is_(None))
    else:
        stmt = stmt.where(
            Appointment.confirmation_sent_at.is_not(None),
            Appointment.reminder_sent_at.is_(None),
        )
    return list(db.execute(stmt).unique().scalars().all())


def _dispatch(
    db: Session,
    appointment: Appointment,
    *,
    message_type: MessageType,
    body: str,
    now: datetime,
) -> bool:
    """Send one message and record the outcome. Returns ``True`` on success."""

    try:
        message_id, _response, _request = send_text(appointment.patient.phone, body)
    except WhatsAppError as exc:
        logger.warning(
            "whatsapp send failed",
            extra={
                "appointment_id": str(appointment.id),
                "message_type": message_type.value,
                "error": str(exc),
            },
        )
        db.add(
            MessageLog(
                appointment_id=appointment.id,
                type=message_type,
                status=MessageStatus.FAILED,
                sent_at=now,
                error=str(exc),
            )
        )
        MESSAGES_COUNTER.labels(type=message_type.value, status="failed").inc()
        return False

    db.add(
        MessageLog(
            appointment_id=appointment.id,
            type=message_type,
            status=MessageStatus.SENT,
            sent_at=now,
            wa_message_id=message_id,
        )
    )
    MESSAGES_COUNTER.labels(type=message_type.value, status="sent").inc()
    logger.info(
        "whatsapp message sent",
        extra={
            "appointment_id": str(appointment.id),
            "message_type": message_type.value,
            "wa_message_id": message_id,
        },
    )
    return True


def _process(
    db: Session, appointment: Appointment, phase: Phase, now: datetime
) -> bool | None:
    """Send the phase's message if due. ``None`` means nothing was due."""

    clinic_settings = appointment.user.clinic_settings
    if clinic_settings is None:
        return None

    if phase == "confirmation":
        hours_before = clinic_settings.confirmation_hours_before
        template = clinic_settings.confirmation_message
        message_type = MessageType.CONFIRMATION
    else:
        hours_before = clinic_settings.reminder_hours_before
        template = clinic_settings.reminder_message
        message_type = MessageType.REMINDER

    if not within_send_window(appointment.date_time, hours_before, now):
        return None

    with tenant_context(appointment.user_id):
        body = render_message(appointment, template)
        if not _dispatch(db, appointment, message_type=message_type, body=body, now=now):
            return False
        if phase == "confirmation":
            appointment.confirmation_sent_at = now
        else:
            appointment.reminder_sent_at = now
    return True


def _send_phase(db: Session, phase: Phase, now: datetime) -> tuple[int, int]:
    """Process each candidate in its own transaction.

    A message handed to the gateway is committed before the next
    appointment is processed.
    """

    sent = 0
    failed = 0
    for appointment in _candidates(db, phase):
        appointment_id = appointment.id
        try:
            outcome = _process(db, appointment, phase, now)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(
                "scheduler failed to process appointment",
                extra={"appointment_id": str(appointment_id), "phase": phase},
            )
            failed += 1
            continue

        if outcome is True:
            sent += 1
        elif outcome is False:
            failed += 1
    return sent, failed


def send_confirmations(db: Session, now: datetime) -> tuple[int, int]:
    """Send confirmation requests. Returns ``(sent, failed)``."""

    return _send_phase(db, "confirmation", now)


def send_reminders(db: Session, now: datetime) -> tuple[int, int]:
    """Send reminders to patients who have not answered yet. Returns ``(sent, failed)``."""

    return _send_phase(db, "reminder", now)


def mark_no_shows(db: Session, now: datetime) -> int:
    """Flag every PENDING appointment in the past as NO_SHOW."""

    stmt = (
        update(Appointment)
        .where(
            Appointment.date_time < now,
            Appointment.status == AppointmentStatus.PENDING,
        )
        .values(status=AppointmentStatus.NO_SHOW, updated_at=now)
        .execution_options(synchronize_session="fetch")
    )
    result = db.execute(stmt)
    marked = int(result.rowcount or 0)
    NO_SHOW_COUNTER.inc(marked)
    return marked


@contextmanager
def _phase(db: Session, name: str) -> Iterator[None]:
    try:
        yield
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("scheduler phase failed", extra={"phase": name})


def run_scheduler_jobs(db: Session, *, now: datetime | None = None) -> dict[str, int]:
    """Run confirmations, reminders and no-show marking.

    Sends are committed per appointment and no-show marking as one batch. A
    failure in one phase is logged and rolled back; the remaining phases
    still run.
    """

    now = now or utcnow()
    summary = {
        "confirmations_sent": 0,
        "reminders_sent": 0,
        "no_shows_marked": 0,
        "failures": 0,
    }

    logger.info("scheduler run started", extra={"run_at": now.isoformat()})

    with _phase(db, "send_confirmations"):
        sent, failed = send_confirmations(db, now)
        summary["confirmations_sent"] = sent
        summary["failures"] += failed

    with _phase(db, "send_reminders"):
        sent, failed = send_reminders(db, now)
        summary["reminders_sent"] = sent
        summary["failures"] += failed

    with _phase(db, "mark_no_shows"):
        summary["no_shows_marked"] = mark_no_shows(db, now)

    logger.info("scheduler run finished", extra=summary)
    return summary
