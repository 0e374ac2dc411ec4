from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from confirmaai.models import Appointment
from confirmaai.models.base import utcnow
from confirmaai.services.scheduler import run_scheduler_jobs

WEBHOOK_KEY = "test-evolution-key"  # pragma: allowlist secret
WEBHOOK_URL = "/api/webhook/whatsapp"


def reply_payload(text: str, phone: str = "5511999990001", from_me: bool = False) -> dict:
    return {
        "event": "messages.upsert",
        "instance": "clinica",
        "data": {
            "key": {
                "remoteJid": f"{phone}@s.whatsapp.net",
                "fromMe": from_me,
                "id": "3EB0C767D26A1D5A6F0B",
            },
            "message": {"conversation": text},
        },
    }


@pytest.fixture
def contacted_appointment(client, auth_headers, create_patient, db_session):
    """An appointment 30 hours ahead whose confirmation request was sent."""

    patient = create_patient(auth_headers)
    when = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(hours=30)
    created = client.post(
        "/api/appointments",
        json={"patient_id": patient["id"], "date_time": when.isoformat()},
        headers=auth_headers,
    )
    assert created.status_code == 201

    summary = run_scheduler_jobs(db_session, now=utcnow())
    assert summary["confirmations_sent"] == 1

    return created.json()["data"]["id"]


def fetch(client, headers, appointment_id):
    return client.get(f"/api/appointments/{appointment_id}", headers=headers).json()["data"]


def test_webhook_requires_api_key(client):
    assert client.post(WEBHOOK_URL, json=reply_payload("sim")).status_code == 401
    assert (
        client.post(WEBHOOK_URL, json=reply_payload("sim"), headers={"apikey": "wrong"}).status_code
        == 401
    )


def test_webhook_accepts_x_api_key_header(client):
    response = client.post(
        WEBHOOK_URL, json=reply_payload("sim"), headers={"x-api-key": WEBHOOK_KEY}
    )
    assert response.status_code == 200
    assert response.json() == {"received": True}


def test_confirmation_reply(client, auth_headers, contacted_appointment):
    response = client.post(
        WEBHOOK_URL, json=reply_payload("SIM"), headers={"apikey": WEBHOOK_KEY}
    )
    assert response.json() == {"received": True}

    data = fetch(client, auth_headers, contacted_appointment)
    assert data["status"] == "CONFIRMED"
    assert data["confirmed_at"] is not None
    (log,) = data["message_logs"]
    assert log["response"] == "SIM"
    assert log["responded_at"] is not None


def test_cancellation_reply(client, auth_headers, contacted_appointment):
    client.post(WEBHOOK_URL, json=reply_payload("2"), headers={"apikey": WEBHOOK_KEY})

    data = fetch(client, auth_headers, contacted_appointment)
    assert data["status"] == "CANCELED"
    assert data["confirmed_at"] is None
    assert data["message_logs"][0]["response"] == "2"


@pytest.mark.parametrize(
    "payload",
    [
        reply_payload("talvez"),
        reply_payload("sim", from_me=True),
        reply_payload("sim", phone="5511988887777"),
        {"event": "connection.update", "data": {"state": "open"}},
        {"event": "messages.upsert", "data": {"key": {}, "message": {}}},
    ],
)
def test_ignored_messages_leave_appointment_pending(
    client, auth_headers, contacted_appointment, payload
):
    response = client.post(WEBHOOK_URL, json=payload, headers={"apikey": WEBHOOK_KEY})
    assert response.status_code == 200
    assert response.json() == {"received": True}

    data = fetch(client, auth_headers, contacted_appointment)
    assert data["status"] == "PENDING"
    assert data["message_logs"][0]["response"] is None


def test_reply_without_confirmation_request_is_ignored(client, auth_headers, create_patient):
    patient = create_patient(auth_headers)
    when = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=5)
    created = client.post(
        "/api/appointments",
        json={"patient_id": patient["id"], "date_time": when.isoformat()},
        headers=auth_headers,
    ).json()["data"]

    client.post(WEBHOOK_URL, json=reply_payload("sim"), headers={"apikey": WEBHOOK_KEY})

    assert fetch(client, auth_headers, created["id"])["status"] == "PENDING"


def test_delivery_status_update(client, auth_headers, contacted_appointment):
    log = fetch(client, auth_headers, contacted_appointment)["message_logs"][0]
    assert log["status"] == "SENT"

    payload = {
        "event": "messages.update",
        "data": {"keyId": log["wa_message_id"], "status": "READ"},
    }
    response = client.post(WEBHOOK_URL, json=payload, headers={"apikey": WEBHOOK_KEY})
    assert response.json() == {"received": True}

    updated = fetch(client, auth_headers, contacted_appointment)["message_logs"][0]
    assert updated["status"] == "READ"


def test_late_acknowledgements_do_not_downgrade_read(client, auth_headers, contacted_appointment):
    log = fetch(client, auth_headers, contacted_appointment)["message_logs"][0]

    for raw_status in ("READ", "DELIVERY_ACK", "SERVER_ACK", "ERROR"):
        payload = {
            "event": "messages.update",
            "data": {"keyId": log["wa_message_id"], "status": raw_status},
        }
        client.post(WEBHOOK_URL, json=payload, headers={"apikey": WEBHOOK_KEY})

    updated = fetch(client, auth_headers, contacted_appointment)["message_logs"][0]
    assert updated["status"] == "READ"


def book(client, headers, patient_id, when):
    response = client.post(
        "/api/appointments",
        json={"patient_id": patient_id, "date_time": when.isoformat()},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


def mark_contacted(db_session, appointment_id, sent_at):
    appointment = db_session.get(Appointment, UUID(appointment_id))
    appointment.confirmation_sent_at = sent_at
    db_session.commit()


def test_reply_goes_to_most_recently_contacted_appointment(
    client, auth_headers, create_patient, db_session
):
    patient = create_patient(auth_headers)
    base = datetime.now(timezone.utc).replace(microsecond=0)
    earlier_contact = book(client, auth_headers, patient["id"], base + timedelta(days=2))
    latest_contact = book(client, auth_headers, patient["id"], base + timedelta(days=3))
    now = utcnow()
    mark_contacted(db_session, earlier_contact, now - timedelta(hours=5))
    mark_contacted(db_session, latest_contact, now - timedelta(hours=1))

    client.post(WEBHOOK_URL, json=reply_payload("sim"), headers={"apikey": WEBHOOK_KEY})

    assert fetch(client, auth_headers, latest_contact)["status"] == "CONFIRMED"
    assert fetch(client, auth_headers, earlier_contact)["status"] == "PENDING"


def test_reply_ignores_past_contacted_appointment(
    client, auth_headers, create_patient, db_session
):
    patient = create_patient(auth_headers)
    past = book(
        client,
        auth_headers,
        patient["id"],
        datetime.now(timezone.utc).replace(microsecond=0) - timedelta(hours=2),
    )
    mark_contacted(db_session, past, utcnow() - timedelta(hours=26))

    client.post(WEBHOOK_URL, json=reply_payload("sim"), headers={"apikey": WEBHOOK_KEY})

    data = fetch(client, auth_headers, past)
    assert data["status"] == "PENDING"
    assert data["confirmed_at"] is None
