"""Reference ellipsoid and geodetic/geocentric coordinate conversion."""

from .ellipsoid import WGS84, Ellipsoid
from .transform import (
    GeodeticCoordinate,
    SphericalCoordinate,
    geodetic_to_spherical,
    normalize_longitude,
    spherical_to_geodetic,
    to_geodetic,
    to_spherical,
    validate_position,
)

__all__ = [
    "WGS84",
    "Ellipsoid",
    "GeodeticCoordinate",
    "SphericalCoordinate",
    "geodetic_to_spherical",
    "normalize_longitude",
    "spherical_to_geodetic",
    "to_geodetic",
    "to_spherical",
    "validate_position",
]
