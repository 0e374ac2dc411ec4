from datetime import date, datetime
from decimal import Decimal

from confirmaai.models import Appointment, AppointmentStatus, Patient, User
from confirmaai.services.dashboard import (
    compute_stats,
    dashboard_for_user,
    estimated_loss,
    month_bounds,
    percentage,
    week_starts,
)


def test_percentage_rounds_half_up():
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(1, 8) == 13
    assert percentage(0, 0) == 0


def test_estimated_loss():
    assert estimated_loss(3, Decimal("150.00")) == 450.0
    assert estimated_loss(1, Decimal("99.995")) == 100.0
    assert estimated_loss(0, Decimal("150.00")) == 0.0


def test_month_bounds():
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(date(2025, 12, 31)) == (date(2025, 12, 1), date(2025, 12, 31))


def test_week_starts_begin_on_sunday_before_the_first():
    assert week_starts(date(2025, 2, 1), date(2025, 2, 28)) == [
        date(2025, 1, 26),
        date(2025, 2, 2),
        date(2025, 2, 9),
        date(2025, 2, 16),
        date(2025, 2, 23),
    ]
    # June 2025 starts on a Sunday.
    assert week_starts(date(2025, 6, 1), date(2025, 6, 30))[0] == date(2025, 6, 1)


def test_compute_stats():
    rows = [
        (AppointmentStatus.CONFIRMED, date(2025, 2, 3)),
        (AppointmentStatus.CONFIRMED, date(2025, 2, 4)),
        (AppointmentStatus.PENDING, date(2025, 2, 10)),
        (AppointmentStatus.NOT_CONFIRMED, date(2025, 2, 11)),
        (AppointmentStatus.NO_SHOW, date(2025, 2, 12)),
        (AppointmentStatus.CANCELED, date(2025, 2, 20)),
    ]
    stats = compute_stats(
        rows,
        first_day=date(2025, 2, 1),
        last_day=date(2025, 2, 28),
        avg_appointment_value=Decimal("150.00"),
    ).as_dict()

    assert stats["total_appointments"] == 6
    assert stats["confirmed"] == 2
    assert stats["not_confirmed"] == 2
    assert stats["no_show"] == 1
    assert stats["canceled"] == 1
    assert stats["confirmation_rate"] == 33
    assert stats["no_show_rate"] == 17
    assert stats["estimated_loss"] == 150.0
    assert stats["weekly_data"] == [
        {"week": "Sem 26/01", "total": 0, "no_show": 0, "confirmed": 0},
        {"week": "Sem 2/02", "total": 2, "no_show": 0, "confirmed": 2},
        {"week": "Sem 9/02", "total": 3, "no_show": 1, "confirmed": 0},
        {"week": "Sem 16/02", "total": 1, "no_show": 0, "confirmed": 0},
        {"week": "Sem 23/02", "total": 0, "no_show": 0, "confirmed": 0},
    ]


def test_compute_stats_empty_month():
    stats = compute_stats(
        [],
        first_day=date(2025, 6, 1),
        last_day=date(2025, 6, 30),
        avg_appointment_value=0,
    )
    assert stats.total_appointments == 0
    assert stats.confirmation_rate == 0
    assert stats.no_show_rate == 0
    assert stats.estimated_loss == 0.0
    assert len(stats.weekly_data) == 5


def test_dashboard_for_user_uses_clinic_local_month(db_session):
    user = User(
        name="Dra. Ana",
        email="ana@teste.com",
        password_hash="x",
        clinic_name="Clínica",
        avg_appointment_value=Decimal("200.00"),
        timezone="America/Sao_Paulo",
    )
    db_session.add(user)
    db_session.flush()
    patient = Patient(user_id=user.id, name="Maria Santos", phone="+5511999990001")
    db_session.add(patient)
    db_session.flush()

    def add(moment: datetime, appointment_status: AppointmentStatus) -> None:
        db_session.add(
            Appointment(
                user_id=user.id,
                patient_id=patient.id,
                date_time=moment,
                status=appointment_status,
            )
        )

    # Stored as naive UTC; São Paulo is UTC-3.
    add(datetime(2025, 2, 10, 13, 0), AppointmentStatus.CONFIRMED)
    add(datetime(2025, 2, 12, 13, 0), AppointmentStatus.NO_SHOW)
    # 28 Feb 22:00 local, still February for the clinic.
    add(datetime(2025, 3, 1, 1, 0), AppointmentStatus.PENDING)
    # 31 Jan 23:00 local, outside the month.
    add(datetime(2025, 2, 1, 2, 0), AppointmentStatus.CONFIRMED)
    db_session.commit()

    stats = dashboard_for_user(db_session, user, now=datetime(2025, 2, 15, 12, 0))

    assert stats.total_appointments == 3
    assert stats.confirmed == 1
    assert stats.no_show == 1
    assert stats.not_confirmed == 1
    assert stats.estimated_loss == 200.0
    assert [week.week for week in stats.weekly_data][-1] == "Sem 23/02"
    assert stats.weekly_data[-1].total == 1
