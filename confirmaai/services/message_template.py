"""Rendering of the clinic's WhatsApp message templates."""

from __future__ import annotations

from datetime import datetime

WEEKDAYS_PT = [
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
]
MONTHS_PT = [
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
]

PLACEHOLDERS = ("nome", "data", "hora", "clinica")


def format_message(
    template: str,
    *,
    nome: str,
    data: str,
    hora: str,
    clinica: str,
) -> str:
    """Replace every ``{nome}``, ``{data}``, ``{hora}`` and ``{clinica}`` occurrence.

    Any other braces in the template are left untouched.
    """

    values = {"nome": nome, "data": data, "hora": hora, "clinica": clinica}
    rendered = template
    for key in PLACEHOLDERS:
        rendered = rendered.replace("{" + key + "}", values[key] or "")
    return rendered


def format_appointment_date(value: datetime) -> str:
    """Format a local datetime like ``"terça-feira, 17 de fevereiro"``."""

    return f"{WEEKDAYS_PT[value.weekday()]}, {value.day} de {MONTHS_PT[value.month - 1]}"


def format_appointment_time(value: datetime) -> str:
    return value.strftime("%H:%M")


__all__ = [
    "format_appointment_date",
    "format_appointment_time",
    "format_message",
]
