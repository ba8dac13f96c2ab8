"""
Local Date Service

All streak math runs on local calendar dates rendered as YYYY-MM-DD.

CRITICAL: Dates are taken from local wall-clock components, never from a
UTC conversion. An entry written at 23:30 local time belongs to that
local day even if UTC has already rolled over.

Timestamps with an offset are converted into `tz` (or the system local
zone when `tz` is None) before the calendar components are read.
Naive timestamps are already local and are read as-is.
"""

import re
from datetime import date, datetime, tzinfo
from typing import Optional, Union

from dateutil.parser import isoparse

from journal_progress.engine.errors import DateParseError


DATE_ONLY_LENGTH = 10

_DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateInput = Union[str, date, datetime]


def to_local_date_string(
    value: Optional[Union[date, datetime]] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """
    Render a date or datetime as a local YYYY-MM-DD string.

    With no value, renders the current local date.
    """
    if value is None:
        value = datetime.now(tz) if tz is not None else datetime.now()

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"

    if isinstance(value, date):
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"

    raise DateParseError(value, f"Cannot render {type(value).__name__} as a date")


def local_today(tz: Optional[tzinfo] = None) -> date:
    """Today's local calendar date."""
    return date.fromisoformat(to_local_date_string(tz=tz))


def normalize_to_date_only(value: DateInput, tz: Optional[tzinfo] = None) -> str:
    """
    Normalise an input to YYYY-MM-DD.

    A 10-character date-only string is returned unchanged (after checking
    it is a real calendar date). Anything longer is parsed as an ISO 8601
    timestamp and re-rendered in local time. Idempotent.

    Raises:
        DateParseError: If the input is not a recognisable date.
    """
    if isinstance(value, (date, datetime)):
        return to_local_date_string(value, tz)

    if not isinstance(value, str):
        raise DateParseError(
            value, f"Expected a date string, got {type(value).__name__}"
        )

    text = value.strip()
    if not text:
        raise DateParseError(value, "Empty date string")

    if len(text) == DATE_ONLY_LENGTH:
        if not _DATE_ONLY_PATTERN.match(text):
            raise DateParseError(value, f"Not a YYYY-MM-DD date: {value!r}")
        try:
            date.fromisoformat(text)
        except ValueError:
            raise DateParseError(value, f"Not a calendar date: {value!r}")
        return text

    try:
        parsed = isoparse(text)
    except (ValueError, OverflowError) as e:
        raise DateParseError(value, f"Unrecognised timestamp {value!r}: {e}")

    return to_local_date_string(parsed, tz)


def parse_local_date(value: DateInput, tz: Optional[tzinfo] = None) -> date:
    """Normalise an input and return it as a `date`."""
    return date.fromisoformat(normalize_to_date_only(value, tz))


def days_between(a: DateInput, b: DateInput, tz: Optional[tzinfo] = None) -> int:
    """
    Whole calendar days from `b` to `a` (positive when `a` is later).

    Calendar dates are subtracted directly, so a daylight-saving change
    between the two dates can never produce a fractional day.
    """
    return (parse_local_date(a, tz) - parse_local_date(b, tz)).days
