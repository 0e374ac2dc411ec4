"""Initial ConfirmaAí schema."""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "20250210001"
down_revision = None
branch_labels = None
depends_on = None

# Naive timestamps are stored in UTC regardless of the session timezone.
UTC_NOW = sa.text("timezone('utc', now())")

appointment_status = postgresql.ENUM(
    "PENDING",
    "CONFIRMED",
    "NOT_CONFIRMED",
    "CANCELED",
    "NO_SHOW",
    name="appointment_status",
    create_type=False,
)
message_type = postgresql.ENUM(
    "CONFIRMATION", "REMINDER", name="message_type", create_type=False
)
message_status = postgresql.ENUM(
    "SENT", "DELIVERED", "READ", "FAILED", name="message_status", create_type=False
)


def upgrade() -> None:
    bind = op.get_bind()
    appointment_status.create(bind, checkfirst=True)
    message_type.create(bind, checkfirst=True)
    message_status.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("clinic_name", sa.String(length=255), nullable=False),
        sa.Column(
            "avg_appointment_value",
            sa.Numeric(precision=10, scale=2),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column(
            "timezone",
            sa.String(length=64),
            nullable=False,
            server_default=sa.text("'America/Sao_Paulo'"),
        ),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "settings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "confirmation_hours_before",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("48"),
        ),
        sa.Column(
            "reminder_hours_before", sa.Integer(), nullable=False, server_default=sa.text("24")
        ),
        sa.Column("confirmation_message", sa.Text(), nullable=False),
        sa.Column("reminder_message", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", name="uq_settings_user_id"),
    )

    op.create_table(
        "patients",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_patients_user_id", "patients", ["user_id"], unique=False)
    op.create_index("ix_patients_phone", "patients", ["phone"], unique=False)

    op.create_table(
        "appointments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("patient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("date_time", sa.DateTime(), nullable=False),
        sa.Column(
            "status",
            appointment_status,
            nullable=False,
            server_default=sa.text("'PENDING'"),
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("confirmation_sent_at", sa.DateTime(), nullable=True),
        sa.Column("reminder_sent_at", sa.DateTime(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_appointments_user_id", "appointments", ["user_id"], unique=False)
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"], unique=False)
    op.create_index("ix_appointments_date_time", "appointments", ["date_time"], unique=False)
    op.create_index(
        "ix_appointments_status_date_time", "appointments", ["status", "date_time"], unique=False
    )

    op.create_table(
        "message_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("appointment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("type", message_type, nullable=False),
        sa.Column("status", message_status, nullable=False, server_default=sa.text("'SENT'")),
        sa.Column("sent_at", sa.DateTime(), server_default=UTC_NOW, nullable=False),
        sa.Column("wa_message_id", sa.String(length=255), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("response", sa.Text(), nullable=True),
        sa.Column("responded_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["appointment_id"], ["appointments.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_message_logs_appointment_id", "message_logs", ["appointment_id"], unique=False
    )
    op.create_index(
        "ix_message_logs_wa_message_id", "message_logs", ["wa_message_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_message_logs_wa_message_id", table_name="message_logs")
    op.drop_index("ix_message_logs_appointment_id", table_name="message_logs")
    op.drop_table("message_logs")
    op.drop_index("ix_appointments_status_date_time", table_name="appointments")
    op.drop_index("ix_appointments_date_time", table_name="appointments")
    op.drop_index("ix_appointments_patient_id", table_name="appointments")
    op.drop_index("ix_appointments_user_id", table_name="appointments")
    op.drop_table("appointments")
    op.drop_index("ix_patients_phone", table_name="patients")
    op.drop_index("ix_patients_user_id", table_name="patients")
    op.drop_table("patients")
    op.drop_table("settings")
    op.drop_table("users")

    bind = op.get_bind()
    message_status.drop(bind, checkfirst=True)
    message_type.drop(bind, checkfirst=True)
    appointment_status.drop(bind, checkfirst=True)
