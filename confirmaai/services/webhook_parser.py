"""Interpretation of inbound Evolution webhook payloads."""

from __future__ import annotations

import re
from typing import Any, Literal

from confirmaai.models import MessageStatus

ReplyType = Literal["CONFIRMED", "CANCELED"]

CONFIRM_PATTERNS = frozenset({"1", "sim", "confirmo", "ok", "yes", "s"})
CANCEL_PATTERNS = frozenset({"2", "não", "nao", "cancelo", "cancelar", "cancel", "n"})

# Evolution ``messages.update`` status names mapped to our delivery states.
DELIVERY_STATUS_MAP: dict[str, MessageStatus] = {
    "SERVER_ACK": MessageStatus.SENT,
    "DELIVERY_ACK": MessageStatus.DELIVERED,
    "READ": MessageStatus.READ,
    "PLAYED": MessageStatus.READ,
    "ERROR": MessageStatus.FAILED,
}

# Delivery progress; a status only ever replaces a lower-ranked one.
DELIVERY_STATUS_RANK: dict[MessageStatus, int] = {
    MessageStatus.SENT: 0,
    MessageStatus.FAILED: 1,
    MessageStatus.DELIVERED: 2,
    MessageStatus.READ: 3,
}


def advances_delivery(current: MessageStatus, new: MessageStatus) -> bool:
    """Return whether ``new`` moves a message forward from ``current``.

    Late or duplicated acknowledgements never move a log backwards, and a
    failure report cannot override an acknowledged delivery.
    """

    return DELIVERY_STATUS_RANK[new] > DELIVERY_STATUS_RANK[current]


def parse_response(text: str) -> ReplyType | None:
    """Classify a patient's reply as a confirmation, a cancellation or neither."""

    normalized = text.strip().lower()
    if normalized in CONFIRM_PATTERNS:
        return "CONFIRMED"
    if normalized in CANCEL_PATTERNS:
        return "CANCELED"
    return None


def jid_to_phone(jid: str | None) -> str | None:
    """Turn ``5511999990001@s.whatsapp.net`` into ``+5511999990001``."""

    if not jid:
        return None
    digits = re.sub(r"\D", "", jid.split("@", 1)[0])
    if not digits:
        return None
    return f"+{digits}"


def _event_items(payload: dict[str, Any]) -> list[dict[str, Any]]:
    data = payload.get("data")
    items = data if isinstance(data, list) else [data]
    return [item for item in items if isinstance(item, dict)]


def extract_message_text(message_data: dict[str, Any]) -> str | None:
    """Return the text body of a ``messages.upsert`` item."""

    message = message_data.get("message") or {}
    text = message.get("conversation") or (
        message.get("extendedTextMessage") or {}
    ).get("text")
    if isinstance(text, str) and text.strip():
        return text
    return None


def extract_inbound_replies(payload: dict[str, Any]) -> list[tuple[str, str]]:
    """Return ``(phone, text)`` pairs for inbound text messages in the payload.

    Messages sent by the clinic itself (``fromMe``), and items without a
    remote JID or text, are skipped.
    """

    replies: list[tuple[str, str]] = []
    for item in _event_items(payload):
        key = item.get("key") or {}
        if key.get("fromMe"):
            continue
        phone = jid_to_phone(key.get("remoteJid"))
        text = extract_message_text(item)
        if phone and text:
            replies.append((phone, text))
    return replies


def extract_status_updates(payload: dict[str, Any]) -> list[tuple[str, MessageStatus]]:
    """Return ``(message_id, status)`` pairs from a ``messages.update`` payload."""

    updates: list[tuple[str, MessageStatus]] = []
    for item in _event_items(payload):
        message_id = (
            item.get("keyId")
            or (item.get("key") or {}).get("id")
            or item.get("messageId")
            or item.get("id")
        )
        raw_status = item.get("status")
        if not message_id or not isinstance(raw_status, str):
            continue
        status = DELIVERY_STATUS_MAP.get(raw_status.upper())
        if status is not None:
            updates.append((str(message_id), status))
    return updates


def event_name(payload: dict[str, Any]) -> str:
    """Normalize ``messages.upsert`` / ``MESSAGES_UPSERT`` to ``MESSAGES_UPSERT``."""

    return str(payload.get("event") or "").replace(".", "_").upper()


__all__ = [
    "DELIVERY_STATUS_MAP",
    "DELIVERY_STATUS_RANK",
    "advances_delivery",
    "event_name",
    "extract_inbound_replies",
    "extract_message_text",
    "extract_status_updates",
    "jid_to_phone",
    "parse_response",
]
