"""Calendar helpers for converting evaluation dates to decimal years."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone

import numpy as np

from ..errors import DomainError

__all__ = [
    "DateLike",
    "MONTH_DAYS",
    "date_to_decimal_year",
    "days_in_year",
    "decimal_year",
    "is_leap_year",
]

DateLike = date | datetime | np.datetime64 | float | int

MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def date_to_decimal_year(year: int, month: int, day: int) -> float:
    """Convert a calendar date to a decimal year.

    January 1st maps to ``year + 0.0``; each following day adds
    ``1 / days_in_year(year)``.

    Raises:
        DomainError: If the month or day does not exist.
    """
    if not 1 <= month <= 12:
        raise DomainError(f"Month must be in 1..12, got {month}")
    month_lengths = list(MONTH_DAYS)
    if is_leap_year(year):
        month_lengths[1] = 29
    if not 1 <= day <= month_lengths[month - 1]:
        raise DomainError(f"Day {day} does not exist in {year}-{month:02d}")
    day_of_year = sum(month_lengths[: month - 1]) + day
    return year + (day_of_year - 1) / days_in_year(year)


def _datetime_to_decimal_year(value: datetime) -> float:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    base = date_to_decimal_year(value.year, value.month, value.day)
    seconds = value.hour * 3600 + value.minute * 60 + value.second
    seconds += value.microsecond * 1e-6
    return base + seconds / 86400.0 / days_in_year(value.year)


def decimal_year(value: DateLike) -> float:
    """
    Convert an evaluation date to a decimal year.

    Args:
        value: ``datetime.date`` (midnight), ``datetime.datetime`` (fraction of
            the day included, aware values converted to UTC),
            ``numpy.datetime64``, or a number already expressed in decimal years.

    Returns:
        The decimal year as a float.

    Raises:
        DomainError: For non-finite numbers, NaT, or unsupported types.
    """
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            raise DomainError("Date must not be NaT")
        return _datetime_to_decimal_year(value.astype("datetime64[us]").item())
    if isinstance(value, datetime):
        return _datetime_to_decimal_year(value)
    if isinstance(value, date):
        return date_to_decimal_year(value.year, value.month, value.day)
    if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(
        value, bool
    ):
        year = float(value)
        if not math.isfinite(year):
            raise DomainError(f"Decimal year must be finite, got {value}")
        return year
    raise DomainError(f"Unsupported date type: {type(value).__name__}")
