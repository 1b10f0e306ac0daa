"""
Utils package for the geomagnetic field engine.

This package provides utilities for:
- Unit handling (pint registry and length conversion)
- Calendar dates to decimal years
- Logging setup for the command-line entry point
"""

from .dates import DateLike, date_to_decimal_year, decimal_year, is_leap_year
from .logging_utils import setup_logging
from .units import LengthType, length_to_km, ureg

__all__ = [
    # Units
    "ureg",
    "LengthType",
    "length_to_km",
    # Dates
    "DateLike",
    "date_to_decimal_year",
    "decimal_year",
    "is_leap_year",
    # Logging
    "setup_logging",
]
