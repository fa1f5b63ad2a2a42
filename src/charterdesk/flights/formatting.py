"""
Display formatting for flight fields.
"""

from datetime import datetime
from typing import Optional

from .models import STATUS_LABELS, FlightStatus


def format_date(value: Optional[str], fmt: str = "%Y-%m-%d") -> str:
    """
    Format an API date for display.

    Args:
        value: ISO 8601 date or datetime string
        fmt: strftime format

    Returns:
        Formatted date, the raw value if it can't be parsed, or "" if empty
    """
    if not value:
        return ""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).strftime(fmt)
    except ValueError:
        return value


def format_status(status: str) -> str:
    try:
        return STATUS_LABELS[FlightStatus(status)]
    except ValueError:
        return status


def format_schedule(date: Optional[str], time: Optional[str]) -> str:
    """Date and time joined for a schedule cell, e.g. "2024-05-01 09:30"."""
    parts = [format_date(date), time or ""]
    return " ".join(p for p in parts if p)
