"""
Geodetic <-> geocentric spherical coordinate conversion.

The forward transform follows equations 17-18 of the WMM technical report:
the point is placed in a meridian plane using the prime-vertical radius of
curvature and its geocentric radius and latitude are read off directly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pint import DimensionalityError

from .. import config
from ..errors import DomainError
from ..geoid.model import GeoidModel
from ..utils.units import LengthType, length_to_km
from .ellipsoid import WGS84, Ellipsoid


@dataclass(slots=True, frozen=True)
class GeodeticCoordinate:
    """Geodetic position; height in meters above the reference ellipsoid."""

    latitude: float  # degrees
    longitude: float  # degrees, [-180, 180)
    height_m: float

    @property
    def height_km(self) -> float:
        return self.height_m / 1000.0


@dataclass(slots=True, frozen=True)
class SphericalCoordinate:
    """Geocentric spherical position."""

    radius_km: float
    latitude: float  # geocentric latitude, degrees
    longitude: float  # degrees, [-180, 180)

    @property
    def colatitude(self) -> float:
        return 90.0 - self.latitude


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude in degrees into [-180, 180)."""
    wrapped = math.fmod(lon + 180.0, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    return wrapped - 180.0


def validate_position(lat: float, lon: float) -> None:
    """
    Raises:
        DomainError: If either value is not finite or |lat| > 90.
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise DomainError(f"Latitude and longitude must be finite, got ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0:
        raise DomainError(f"Latitude {lat} outside [-90, 90]")


def to_geodetic(
    lat: float,
    lon: float,
    height_above_sea_level: float | LengthType,
    geoid: GeoidModel | None = None,
) -> GeodeticCoordinate:
    """
    Build a geodetic coordinate from a mean-sea-level height.

    Args:
        lat: Geodetic latitude in degrees.
        lon: Longitude in degrees, any range.
        height_above_sea_level: Meters (or a pint length) above the geoid.
        geoid: Undulation grid. Without one the height is taken as already
            referenced to the ellipsoid.
    """
    lat = float(lat)
    lon = float(lon)
    validate_position(lat, lon)
    try:
        height_m = length_to_km(height_above_sea_level) * 1000.0
    except (DimensionalityError, TypeError, ValueError) as exc:
        raise DomainError(f"Invalid height {height_above_sea_level!r}: {exc}") from exc
    if not math.isfinite(height_m):
        raise DomainError(f"Height must be finite, got {height_m}")

    lon = normalize_longitude(lon)
    if geoid is not None:
        height_m += geoid.undulation_at(lat, lon)
    return GeodeticCoordinate(latitude=lat, longitude=lon, height_m=height_m)


def geodetic_to_spherical(
    coord: GeodeticCoordinate, ellipsoid: Ellipsoid = WGS84
) -> SphericalCoordinate:
    """Convert a geodetic coordinate to geocentric spherical coordinates."""
    lat_rad = math.radians(coord.latitude)
    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)
    height_km = coord.height_km

    rc = ellipsoid.prime_vertical_radius_km(sin_lat)
    xp = (rc + height_km) * cos_lat
    zp = (rc * (1.0 - ellipsoid.eccentricity_squared) + height_km) * sin_lat

    radius = math.hypot(xp, zp)
    if radius <= 0:
        raise DomainError("Point coincides with the centre of the ellipsoid")
    return SphericalCoordinate(
        radius_km=radius,
        latitude=math.degrees(math.asin(zp / radius)),
        longitude=coord.longitude,
    )


def to_spherical(
    lat: float,
    lon: float,
    height_above_sea_level: float | LengthType,
    ellipsoid: Ellipsoid = WGS84,
    geoid: GeoidModel | None = None,
) -> SphericalCoordinate:
    """Mean-sea-level geodetic input straight to spherical coordinates."""
    return geodetic_to_spherical(
        to_geodetic(lat, lon, height_above_sea_level, geoid=geoid), ellipsoid
    )


def spherical_to_geodetic(
    coord: SphericalCoordinate, ellipsoid: Ellipsoid = WGS84
) -> GeodeticCoordinate:
    """
    Invert :func:`geodetic_to_spherical`.

    Iterates the geodetic latitude from the meridian-plane position until it
    changes by less than ``config.INVERSE_TOLERANCE_RAD``. The height update
    ``p cos(phi) + z sin(phi) - a sqrt(1 - e^2 sin^2(phi))`` stays well
    conditioned at the poles.
    """
    lat_c = math.radians(coord.latitude)
    p = coord.radius_km * math.cos(lat_c)
    z = coord.radius_km * math.sin(lat_c)
    a = ellipsoid.semi_major_axis_km
    e2 = ellipsoid.eccentricity_squared

    lat = math.atan2(z, p * (1.0 - e2))
    for _ in range(config.INVERSE_MAX_ITERATIONS):
        sin_lat = math.sin(lat)
        n = ellipsoid.prime_vertical_radius_km(sin_lat)
        height = p * math.cos(lat) + z * sin_lat - a * math.sqrt(1.0 - e2 * sin_lat**2)
        updated = math.atan2(z, p * (1.0 - e2 * n / (n + height)))
        converged = abs(updated - lat) < config.INVERSE_TOLERANCE_RAD
        lat = updated
        if converged:
            break

    sin_lat = math.sin(lat)
    height = p * math.cos(lat) + z * sin_lat - a * math.sqrt(1.0 - e2 * sin_lat**2)
    return GeodeticCoordinate(
        latitude=math.degrees(lat),
        longitude=coord.longitude,
        height_m=height * 1000.0,
    )
