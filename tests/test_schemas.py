import pytest
from pydantic import ValidationError

from confirmaai.schemas import (
    AppointmentUpdate,
    PatientCreate,
    PatientUpdate,
    RegisterIn,
    SettingsUpdate,
)


def test_patient_phone_must_be_brazilian_e164():
    assert PatientCreate(name="Maria", phone="+5511999990001").phone == "+5511999990001"
    assert PatientCreate(name="Maria", phone="+551133334444").phone == "+551133334444"

    for phone in ("11999990001", "+1555123456", "+55119999900012", "+55 11 99999 0001"):
        with pytest.raises(ValidationError) as excinfo:
            PatientCreate(name="Maria", phone=phone)
        assert "Telefone inválido" in str(excinfo.value)


def test_patient_name_minimum_length():
    with pytest.raises(ValidationError):
        PatientCreate(name="Al", phone="+5511999990001")


def test_partial_update_drops_null_for_required_columns():
    update = PatientUpdate.model_validate({"name": None, "email": None, "notes": "Alergia"})
    assert update.changes() == {"email": None, "notes": "Alergia"}


def test_partial_update_ignores_omitted_fields():
    assert AppointmentUpdate.model_validate({"status": "CONFIRMED"}).changes() == {
        "status": "CONFIRMED"
    }


def test_appointment_update_rejects_unknown_status():
    with pytest.raises(ValidationError):
        AppointmentUpdate.model_validate({"status": "LATE"})


@pytest.mark.parametrize(
    "payload",
    [
        {"confirmation_hours_before": 0},
        {"confirmation_hours_before": 73},
        {"reminder_hours_before": 25},
        {"confirmation_message": "curta"},
        {"reminder_message": "x" * 1001},
    ],
)
def test_settings_update_ranges(payload):
    with pytest.raises(ValidationError):
        SettingsUpdate.model_validate(payload)


def test_settings_update_accepts_bounds():
    update = SettingsUpdate(confirmation_hours_before=72, reminder_hours_before=1)
    assert update.changes() == {"confirmation_hours_before": 72, "reminder_hours_before": 1}


def test_register_requires_valid_email_and_password():
    with pytest.raises(ValidationError):
        RegisterIn(name="Dra. Ana", email="invalido", password="123456", clinic_name="Clínica")
    with pytest.raises(ValidationError):
        RegisterIn(name="Dra. Ana", email="ana@teste.com", password="123", clinic_name="Clínica")
