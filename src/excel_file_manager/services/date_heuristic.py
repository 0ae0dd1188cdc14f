"""Spreadsheet date detection and conversion.

Dates live in two encodings: the numeric serial used inside spreadsheet
containers (days since 1899-12-30) and the display string
``"<Mon> <D>, <YYYY>"`` that is kept in the grid. This module converts
between the two and decides which raw values count as dates.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from typing import Any

SPREADSHEET_EPOCH = datetime(1899, 12, 30)
UNIX_EPOCH_SERIAL = 25569
MS_PER_DAY = 86_400_000

# Serial of 9999-12-31, the last day a datetime can hold.
MAX_SERIAL = 2958465

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
_MONTH_NUMBERS = {name.lower(): idx + 1 for idx, name in enumerate(MONTH_ABBREVIATIONS)}

FORMATTED_DATE_PATTERN = re.compile(r"^([A-Za-z]{3}) (\d{1,2}), (\d{4})$")

# Number format applied to serials written back into a native workbook.
NATIVE_DATE_NUMBER_FORMAT = "mmm d, yyyy"


def is_serial_date(value: Any) -> bool:
    """Return True when a raw data-cell number should be read as a date serial.

    Positive, finite, non-integer numbers are treated as serials. This
    misreads genuine fractions such as ``0.5`` as dates; callers depend on
    that behaviour, so it is kept.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if not math.isfinite(value):
        return False
    return value > 0 and not float(value).is_integer() and value <= MAX_SERIAL


def serial_to_date(serial: float) -> date:
    """Convert a spreadsheet serial to a calendar date, dropping time of day."""
    if not math.isfinite(serial) or serial < 0 or serial > MAX_SERIAL:
        raise ValueError(f"Serial {serial} is outside the supported date range")
    return (SPREADSHEET_EPOCH + timedelta(days=serial)).date()


def date_to_serial(value: date | datetime) -> float:
    """Convert a date or datetime to a spreadsheet serial.

    Equivalent to ``25569 + epoch_millis / 86_400_000``; midnight dates give
    integral serials.
    """
    if isinstance(value, datetime):
        moment = value.replace(tzinfo=None)
    else:
        moment = datetime(value.year, value.month, value.day)
    delta = moment - SPREADSHEET_EPOCH
    millis = delta.days * MS_PER_DAY + delta.seconds * 1000 + delta.microseconds // 1000
    return millis / MS_PER_DAY


def format_date(value: date) -> str:
    """Format a date as ``"Mar 15, 2023"`` regardless of the process locale."""
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day}, {value.year}"


def parse_formatted_date(text: str) -> date | None:
    """Parse ``"<Mon> <D>, <YYYY>"`` into a date.

    Returns None when the text does not match the pattern or names an
    impossible day such as ``"Feb 30, 2024"``.
    """
    match = FORMATTED_DATE_PATTERN.match(text)
    if match is None:
        return None
    month = _MONTH_NUMBERS.get(match.group(1).lower())
    if month is None:
        return None
    try:
        return date(int(match.group(3)), month, int(match.group(2)))
    except ValueError:
        return None


def is_formatted_date(text: str) -> bool:
    return parse_formatted_date(text) is not None
