"""Error types and result flags shared by the geomagnetic field engine."""

from __future__ import annotations

from enum import Enum


class GeomagnetismError(Exception):
    """Base class for failures raised by the field engine."""


class ParseError(GeomagnetismError, ValueError):
    """Malformed coefficient table or geoid grid resource."""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class DomainError(GeomagnetismError, ValueError):
    """Input outside the domain the engine accepts (e.g. |latitude| > 90)."""


class StaleModelWarning(UserWarning):
    """Evaluation date lies outside the coefficient model's validity window."""


class DegenerateHorizontalField(UserWarning):
    """Horizontal intensity vanishes, so declination is defined by convention."""


class ElementFlag(str, Enum):
    """Non-fatal conditions attached to a computed result."""

    STALE_MODEL = "stale_model"
    DEGENERATE_HORIZONTAL_FIELD = "degenerate_horizontal_field"

    @property
    def warning_category(self) -> type[UserWarning]:
        if self is ElementFlag.STALE_MODEL:
            return StaleModelWarning
        return DegenerateHorizontalField


__all__ = [
    "DegenerateHorizontalField",
    "DomainError",
    "ElementFlag",
    "GeomagnetismError",
    "ParseError",
    "StaleModelWarning",
]
