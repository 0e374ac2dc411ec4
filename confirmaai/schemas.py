"""Request validation models and response serializers for the HTTP API."""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID
from zoneinfo import ZoneInfo

from pydantic import BaseModel, EmailStr, Field, field_validator

from confirmaai.models import (
    Appointment,
    AppointmentStatus,
    ClinicSettings,
    MessageLog,
    Patient,
    User,
)
from confirmaai.services.timezones import isoformat_utc, to_local

PHONE_PATTERN = re.compile(r"^\+55\d{10,11}$")
PHONE_ERROR = "Telefone inválido. Use formato +55XXXXXXXXXXX"


def _validate_phone(value: str | None) -> str | None:
    if value is not None and not PHONE_PATTERN.match(value):
        raise ValueError(PHONE_ERROR)
    return value


class PartialUpdate(BaseModel):
    """Base for PUT payloads where omitted fields are left untouched."""

    # Columns that cannot be cleared; an explicit null is ignored for them.
    non_nullable: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in data.items()
            if value is not None or key not in self.non_nullable
        }


# Auth


class RegisterIn(BaseModel):
    name: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=6)
    clinic_name: str = Field(min_length=3)
    avg_appointment_value: Decimal = Field(default=Decimal("0"), ge=0)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


# Patients


class PatientCreate(BaseModel):
    name: str = Field(min_length=3)
    phone: str
    email: EmailStr | None = None
    notes: str | None = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        return _validate_phone(value)


class PatientUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"name", "phone"})

    name: str | None = Field(default=None, min_length=3)
    phone: str | None = None
    email: EmailStr | None = None
    notes: str | None = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str | None) -> str | None:
        return _validate_phone(value)


# Appointments


class AppointmentCreate(BaseModel):
    patient_id: UUID
    date_time: datetime
    notes: str | None = None


class AppointmentUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"patient_id", "date_time", "status"})

    patient_id: UUID | None = None
    date_time: datetime | None = None
    status: AppointmentStatus | None = None
    notes: str | None = None


# Settings


class SettingsUpdate(PartialUpdate):
    non_nullable: ClassVar[frozenset[str]] = frozenset(
        {
            "confirmation_hours_before",
            "reminder_hours_before",
            "confirmation_message",
            "reminder_message",
        }
    )

    confirmation_hours_before: int | None = Field(default=None, ge=1, le=72)
    reminder_hours_before: int | None = Field(default=None, ge=1, le=24)
    confirmation_message: str | None = Field(default=None, min_length=10, max_length=1000)
    reminder_message: str | None = Field(default=None, min_length=10, max_length=1000)


# Serializers


def serialize_user(user: User) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "clinic_name": user.clinic_name,
        "avg_appointment_value": float(user.avg_appointment_value or 0),
        "timezone": user.timezone,
        "created_at": isoformat_utc(user.created_at),
    }


def serialize_patient(patient: Patient, *, appointment_count: int | None = None) -> dict[str, Any]:
    data = {
        "id": str(patient.id),
        "name": patient.name,
        "phone": patient.phone,
        "email": patient.email,
        "notes": patient.notes,
        "created_at": isoformat_utc(patient.created_at),
        "updated_at": isoformat_utc(patient.updated_at),
    }
    if appointment_count is not None:
        data["appointment_count"] = appointment_count
    return data


def serialize_message_log(log: MessageLog) -> dict[str, Any]:
    return {
        "id": str(log.id),
        "type": log.type.value,
        "status": log.status.value,
        "sent_at": isoformat_utc(log.sent_at),
        "wa_message_id": log.wa_message_id,
        "error": log.error,
        "response": log.response,
        "responded_at": isoformat_utc(log.responded_at),
    }


def serialize_appointment(appointment: Appointment, *, tz: ZoneInfo) -> dict[str, Any]:
    """Return a JSON-friendly representation of an appointment."""

    patient = appointment.patient
    return {
        "id": str(appointment.id),
        "patient_id": str(appointment.patient_id),
        "date_time": isoformat_utc(appointment.date_time),
        "date_time_local": to_local(appointment.date_time, tz).isoformat(),
        "status": appointment.status.value,
        "notes": appointment.notes,
        "confirmation_sent_at": isoformat_utc(appointment.confirmation_sent_at),
        "reminder_sent_at": isoformat_utc(appointment.reminder_sent_at),
        "confirmed_at": isoformat_utc(appointment.confirmed_at),
        "created_at": isoformat_utc(appointment.created_at),
        "updated_at": isoformat_utc(appointment.updated_at),
        "patient": {
            "id": str(patient.id),
            "name": patient.name,
            "phone": patient.phone,
        },
        "message_logs": [serialize_message_log(log) for log in appointment.message_logs],
    }


def serialize_settings(clinic_settings: ClinicSettings) -> dict[str, Any]:
    return {
        "id": str(clinic_settings.id),
        "confirmation_hours_before": clinic_settings.confirmation_hours_before,
        "reminder_hours_before": clinic_settings.reminder_hours_before,
        "confirmation_message": clinic_settings.confirmation_message,
        "reminder_message": clinic_settings.reminder_message,
    }
