from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError

_FRACTION = re.compile(r"\.(\d+)")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Fecha no válida (YYYY-MM-DD): {value!r}")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp returned by the store, keeping it naive."""
    if not value:
        return None
    # Postgres trims trailing zeros from the fraction; fromisoformat wants 3 or 6 digits.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value.replace("Z", "+00:00"), count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Marca de tiempo no válida: {value!r}")
    return parsed.replace(tzinfo=None)


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current local wall-clock time, naive.

    Note: Wrapped so tests can patch/mock easier. When ``tz_name`` is given the
    wall clock of that zone is used instead of the host's.
    """
    if tz_name:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    return datetime.now()
