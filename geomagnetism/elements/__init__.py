"""Geodetic field components, magnetic elements and heading helpers."""

from .derive import (
    GeodeticFieldVector,
    GeoMagneticElements,
    derive_elements,
    grid_variation,
    rotate_to_geodetic,
)
from .headings import magnetic_to_true, true_to_magnetic

__all__ = [
    "GeoMagneticElements",
    "GeodeticFieldVector",
    "derive_elements",
    "grid_variation",
    "magnetic_to_true",
    "rotate_to_geodetic",
    "true_to_magnetic",
]
