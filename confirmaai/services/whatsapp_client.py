"""Thin wrapper around the Evolution WhatsApp API."""

from __future__ import annotations

import logging
import re
import uuid
from typing import Any
from urllib.parse import quote

import httpx

from confirmaai.core.config import settings

logger = logging.getLogger(__name__)

_TIMEOUT = httpx.Timeout(connect=5.0, read=15.0, write=15.0, pool=5.0)


class WhatsAppError(RuntimeError):
    """Raised when a message could not be handed over to the gateway."""


def _build_evolution_url(action: str) -> str:
    base_url = settings.evolution_api_base_url.rstrip("/")
    instance_name = settings.evolution_instance_name
    if not base_url:
        raise WhatsAppError("EVOLUTION_API_BASE_URL is not configured")
    if not instance_name:
        raise WhatsAppError("EVOLUTION_INSTANCE_NAME is not configured")
    return f"{base_url}/message/{action}/{quote(instance_name)}"


def _mock_send(action: str, payload: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    message_id = f"mocked-{uuid.uuid4()}"
    logger.debug("Mocking Evolution send (%s) with payload: %s", action, payload)
    normalized_phone = re.sub(r"\D", "", payload.get("number") or "")
    mock_response = {
        "key": {
            "id": message_id,
            "remoteJid": f"{normalized_phone or '00000000000'}@s.whatsapp.net",
            "fromMe": True,
        },
        "messageType": action,
        "status": "PENDING",
        "mocked": True,
    }
    return message_id, mock_response


def extract_message_id(data: Any) -> str | None:
    """Return the gateway message id from a send response, if present."""

    if not isinstance(data, dict):
        return None
    return (
        (data.get("key") or {}).get("id")
        or data.get("id")
        or ((data.get("message") or {}).get("key") or {}).get("id")
    )


def _dispatch(action: str, payload: dict[str, Any]) -> tuple[str | None, dict[str, Any]]:
    if settings.whatsapp_mock_mode:
        return _mock_send(action, payload)

    api_key = settings.evolution_api_key
    if not api_key:
        raise WhatsAppError("EVOLUTION_API_KEY is not configured")

    url = _build_evolution_url(action)
    headers = {
        "apikey": api_key,
        "Content-Type": "application/json",
    }

    try:
        with httpx.Client(timeout=_TIMEOUT) as client:
            response = client.post(url, headers=headers, json=payload)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise WhatsAppError(
            f"Evolution API answered {exc.response.status_code} for {action}"
        ) from exc
    except httpx.HTTPError as exc:
        raise WhatsAppError(f"Evolution API request failed: {exc}") from exc

    try:
        data = response.json()
    except ValueError:
        data = {}

    logger.debug("Evolution API responded with %s", data)
    return extract_message_id(data), data


def send_text(to: str, body: str) -> tuple[str | None, dict[str, Any], dict[str, Any]]:
    """Send a plain text WhatsApp message.

    Returns the gateway message id (when the gateway reports one), the raw
    response and the request payload.
    """

    if not to:
        raise WhatsAppError("Recipient phone number is empty")

    payload = {
        "number": to,
        "text": body,
    }
    message_id, response = _dispatch("sendText", payload)
    return message_id, response, payload


__all__ = ["WhatsAppError", "extract_message_id", "send_text"]
