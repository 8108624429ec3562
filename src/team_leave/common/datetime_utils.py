from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Any, field_name: str = "Date") -> date:
    """Accept date/datetime objects (from drivers) or ISO strings (from forms/JSON)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            # Tolerate full timestamps, keep the calendar date only.
            return parse_iso_date(value.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def today_local() -> date:
    """Current local date.

    Injected into the mediator as its clock so tests can pin the date.
    """
    return datetime.now().date()
