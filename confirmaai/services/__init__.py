"""Service layer utilities for the ConfirmaAí API."""

from confirmaai.services.message_template import (
    format_appointment_date,
    format_appointment_time,
    format_message,
)
from confirmaai.services.scheduler import run_scheduler_jobs
from confirmaai.services.webhook_parser import parse_response
from confirmaai.services.whatsapp_client import WhatsAppError, send_text

__all__ = [
    "WhatsAppError",
    "format_appointment_date",
    "format_appointment_time",
    "format_message",
    "parse_response",
    "run_scheduler_jobs",
    "send_text",
]
