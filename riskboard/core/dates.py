# riskboard/core/dates.py
"""
Calendar-date helpers shared by the risk and compliance engines.

Dates cross every boundary as ISO ``YYYY-MM-DD`` strings without a time zone.
"now" is always handed in by the caller as a naive local datetime; a plain
``date`` is read as local midnight of that day.
"""
from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from riskboard.core.errors import InvalidInput

DateLike = Union[date, datetime, str, None]

SECONDS_PER_DAY = 86400
END_OF_DAY = time(23, 59, 59, 999000)

# Spreadsheet serial day 25569 == 1970-01-01 (1900 date system)
_SERIAL_EPOCH = date(1970, 1, 1)
_SERIAL_EPOCH_OFFSET = 25569


def _parse_iso(raw: str) -> date:
    # the whole string must parse; a time part may follow a T or space
    if len(raw) > 10 and raw[10] in "T ":
        return datetime.fromisoformat(raw).date()
    return date.fromisoformat(raw)


def parse_calendar_date(value: DateLike, *, field: Optional[str] = None) -> Optional[date]:
    """
    ``None`` / blank -> ``None``; ``date``/``datetime``/ISO string -> ``date``.
    Anything else raises ``InvalidInput``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return _parse_iso(raw)
        except ValueError:
            raise InvalidInput(
                f"Not a calendar date (expected YYYY-MM-DD): {value!r}",
                field=field,
                value=value,
            ) from None
    raise InvalidInput(f"Unsupported date value: {value!r}", field=field, value=value)


def as_moment(now: Union[date, datetime]) -> datetime:
    if isinstance(now, datetime):
        return now
    return datetime.combine(now, time.min)


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, END_OF_DAY)


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def add_years(d: date, years: int) -> date:
    """Calendar-year addition; Feb 29 lands on Mar 1 when the target year has no leap day."""
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        return date(d.year + years, 3, 1)


def days_until(target: datetime, now: Union[date, datetime]) -> int:
    """Whole days from ``now`` to ``target``, rounded up (negative once passed)."""
    delta = target - as_moment(now)
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def format_calendar_date(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d is not None else None


def normalize_calendar_date(value) -> Optional[date]:
    """
    Lenient date reader for imported sheets:
      - ISO ``YYYY-MM-DD``
      - Turkish ``DD.MM.YYYY``
      - spreadsheet serial day numbers (int/float)
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidInput(f"Unsupported date value: {value!r}", value=value)
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidInput(f"Not a spreadsheet date serial: {value!r}", value=value)
        try:
            return _SERIAL_EPOCH + timedelta(days=math.floor(value - _SERIAL_EPOCH_OFFSET))
        except OverflowError:
            raise InvalidInput(f"Spreadsheet date serial out of range: {value!r}", value=value) from None
    if isinstance(value, str) and "." in value and "-" not in value:
        parts = value.strip().split(".")
        if len(parts) == 3:
            day, month, year = parts
            try:
                return date(int(year), int(month), int(day))
            except ValueError:
                raise InvalidInput(f"Not a calendar date: {value!r}", value=value) from None
    return parse_calendar_date(value)
