"""Monthly confirmation and no-show metrics for the clinic dashboard."""

from __future__ import annotations

import calendar
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from confirmaai.models import Appointment, AppointmentStatus, User
from confirmaai.models.base import utcnow
from confirmaai.services.timezones import local_day_bounds, tenant_timezone, to_local


@dataclass
class WeekStats:
    week: str
    total: int = 0
    no_show: int = 0
    confirmed: int = 0


@dataclass
class DashboardStats:
    total_appointments: int = 0
    confirmed: int = 0
    not_confirmed: int = 0
    no_show: int = 0
    canceled: int = 0
    confirmation_rate: int = 0
    no_show_rate: int = 0
    estimated_loss: float = 0.0
    weekly_data: list[WeekStats] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def percentage(part: int, total: int) -> int:
    """Integer percentage rounded half-up; 0 when ``total`` is 0."""

    if total <= 0:
        return 0
    ratio = Decimal(part) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def estimated_loss(no_show: int, avg_appointment_value: Decimal | float | int) -> float:
    value = Decimal(no_show) * Decimal(str(avg_appointment_value or 0))
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def month_bounds(reference: date) -> tuple[date, date]:
    """Return the first and last day of the month containing ``reference``."""

    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return reference.replace(day=1), reference.replace(day=last_day)


def week_starts(first_day: date, last_day: date) -> list[date]:
    """Sundays starting each week that intersects ``[first_day, last_day]``.

    The first entry is the Sunday on or before ``first_day``.
    """

    # date.weekday(): Monday == 0 ... Sunday == 6
    start = first_day - timedelta(days=(first_day.weekday() + 1) % 7)
    starts: list[date] = []
    while start <= last_day:
        starts.append(start)
        start += timedelta(days=7)
    return starts


def week_label(week_start: date) -> str:
    return f"Sem {week_start.day}/{week_start.month:02d}"


def compute_stats(
    appointments: Iterable[tuple[AppointmentStatus, date]],
    *,
    first_day: date,
    last_day: date,
    avg_appointment_value: Decimal | float | int,
) -> DashboardStats:
    """Aggregate ``(status, local_date)`` pairs of one month into dashboard stats."""

    rows = list(appointments)
    stats = DashboardStats()
    stats.total_appointments = len(rows)

    for appointment_status, _local_date in rows:
        if appointment_status == AppointmentStatus.CONFIRMED:
            stats.confirmed += 1
        elif appointment_status in (
            AppointmentStatus.NOT_CONFIRMED,
            AppointmentStatus.PENDING,
        ):
            stats.not_confirmed += 1
        elif appointment_status == AppointmentStatus.NO_SHOW:
            stats.no_show += 1
        elif appointment_status == AppointmentStatus.CANCELED:
            stats.canceled += 1

    stats.confirmation_rate = percentage(stats.confirmed, stats.total_appointments)
    stats.no_show_rate = percentage(stats.no_show, stats.total_appointments)
    stats.estimated_loss = estimated_loss(stats.no_show, avg_appointment_value)

    for start in week_starts(first_day, last_day):
        end = start + timedelta(days=6)
        week = WeekStats(week=week_label(start))
        for appointment_status, local_date in rows:
            if not start <= local_date <= end:
                continue
            week.total += 1
            if appointment_status == AppointmentStatus.NO_SHOW:
                week.no_show += 1
            elif appointment_status == AppointmentStatus.CONFIRMED:
                week.confirmed += 1
        stats.weekly_data.append(week)

    return stats


def dashboard_for_user(
    db: Session, user: User, *, now: datetime | None = None
) -> DashboardStats:
    """Build the dashboard of the current month, in the clinic's timezone."""

    tz = tenant_timezone(user)
    today = to_local(now or utcnow(), tz).date()
    first_day, last_day = month_bounds(today)
    range_start, _ = local_day_bounds(first_day, tz)
    _, range_end = local_day_bounds(last_day, tz)

    stmt = select(Appointment.status, Appointment.date_time).where(
        Appointment.user_id == user.id,
        Appointment.date_time >= range_start,
        Appointment.date_time < range_end,
    )
    rows = [
        (appointment_status, to_local(date_time, tz).date())
        for appointment_status, date_time in db.execute(stmt).all()
    ]
    return compute_stats(
        rows,
        first_day=first_day,
        last_day=last_day,
        avg_appointment_value=user.avg_appointment_value,
    )
