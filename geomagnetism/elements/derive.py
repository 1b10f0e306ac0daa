"""
Rotate the synthesized field into the local geodetic frame and derive the
magnetic elements with their annual rates.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from .. import config
from ..errors import ElementFlag
from ..synthesis.harmonics import SphericalFieldVector
from ..utils.units import (
    AngleRateType,
    AngleType,
    MagneticFluxDensityRateType,
    MagneticFluxDensityType,
    ureg,
)

_RAD_TO_DEG = 180.0 / math.pi
_ANGLE_FIELDS = ("declination", "inclination")
_INTENSITY_FIELDS = ("horizontal_intensity", "total_intensity", "north", "east", "down")


@dataclass(slots=True, frozen=True)
class GeodeticFieldVector:
    """North/east/down components in nT (or nT/year)."""

    north: float
    east: float
    down: float


@dataclass(slots=True, frozen=True)
class GeoMagneticElements:
    """
    Magnetic elements at one point and date.

    Angles are in degrees and intensities in nT; each ``*_rate`` is the
    change per year. ``grid_variation`` is only defined poleward of
    +/-55 degrees latitude.
    """

    declination: float
    inclination: float
    horizontal_intensity: float
    total_intensity: float
    north: float
    east: float
    down: float
    declination_rate: float
    inclination_rate: float
    horizontal_intensity_rate: float
    total_intensity_rate: float
    north_rate: float
    east_rate: float
    down_rate: float
    grid_variation: float | None = None
    grid_variation_rate: float | None = None
    flags: frozenset[ElementFlag] = field(default_factory=frozenset)

    @property
    def stale_model(self) -> bool:
        return ElementFlag.STALE_MODEL in self.flags

    @property
    def degenerate_horizontal_field(self) -> bool:
        return ElementFlag.DEGENERATE_HORIZONTAL_FIELD in self.flags

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["flags"] = sorted(flag.value for flag in self.flags)
        return payload

    def as_quantities(
        self,
    ) -> dict[str, AngleType | AngleRateType | MagneticFluxDensityType | MagneticFluxDensityRateType]:
        """Elements and rates as pint Quantities (degree, nT, and their per-year rates)."""
        quantities = {}
        for name in _ANGLE_FIELDS:
            quantities[name] = getattr(self, name) * ureg.degree
            quantities[f"{name}_rate"] = getattr(self, f"{name}_rate") * ureg.degree / ureg.year
        for name in _INTENSITY_FIELDS:
            quantities[name] = getattr(self, name) * ureg.nanotesla
            quantities[f"{name}_rate"] = (
                getattr(self, f"{name}_rate") * ureg.nanotesla / ureg.year
            )
        return quantities


def rotate_to_geodetic(
    vector: SphericalFieldVector, geodetic_lat: float, geocentric_lat: float
) -> GeodeticFieldVector:
    """
    Express a spherical field vector in north/east/down geodetic components.

    The local spherical frame (north = -B_theta, down = -B_r) is rotated about
    the east axis by ``geocentric_lat - geodetic_lat``.
    """
    psi = math.radians(geocentric_lat - geodetic_lat)
    north_s = -vector.b_theta
    down_s = -vector.b_r
    cos_psi = math.cos(psi)
    sin_psi = math.sin(psi)
    return GeodeticFieldVector(
        north=north_s * cos_psi - down_s * sin_psi,
        east=vector.b_phi,
        down=north_s * sin_psi + down_s * cos_psi,
    )


def _wrap_degrees(angle: float) -> float:
    wrapped = math.fmod(angle + 180.0, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    return wrapped - 180.0


def grid_variation(declination: float, latitude: float, longitude: float) -> float | None:
    """
    Declination relative to polar stereographic grid north.

    Returns None outside the polar zones (|latitude| < 55 degrees).
    """
    if latitude >= config.GRID_VARIATION_MIN_LATITUDE:
        return _wrap_degrees(declination - longitude)
    if latitude <= -config.GRID_VARIATION_MIN_LATITUDE:
        return _wrap_degrees(declination + longitude)
    return None


def derive_elements(
    field_vector: GeodeticFieldVector,
    rate_vector: GeodeticFieldVector,
    latitude: float = 0.0,
    longitude: float = 0.0,
    flags: frozenset[ElementFlag] = frozenset(),
) -> GeoMagneticElements:
    """
    Derive D, I, H, F and their rates from geodetic field components.

    Rates are the first-order changes of each element under the component
    rates, e.g. ``dD/dt = (X dY - Y dX) / H^2``.

    When ``H`` is below ``config.HORIZONTAL_FIELD_EPS`` the declination and
    its rate are reported as 0 and the result carries
    ``ElementFlag.DEGENERATE_HORIZONTAL_FIELD``; ``dH/dt`` is then the
    magnitude of the horizontal rate.
    """
    x, y, z = field_vector.north, field_vector.east, field_vector.down
    xdot, ydot, zdot = rate_vector.north, rate_vector.east, rate_vector.down

    h = math.hypot(x, y)
    f = math.hypot(h, z)
    flags = frozenset(flags)

    if h < config.HORIZONTAL_FIELD_EPS:
        flags |= {ElementFlag.DEGENERATE_HORIZONTAL_FIELD}
        declination = 0.0
        declination_rate = 0.0
        hdot = math.hypot(xdot, ydot)
    else:
        declination = math.degrees(math.atan2(y, x))
        declination_rate = _RAD_TO_DEG * (x * ydot - y * xdot) / (h * h)
        hdot = (x * xdot + y * ydot) / h

    inclination = math.degrees(math.atan2(z, h))
    if f < config.HORIZONTAL_FIELD_EPS:
        fdot = 0.0
        inclination_rate = 0.0
    else:
        fdot = (x * xdot + y * ydot + z * zdot) / f
        inclination_rate = _RAD_TO_DEG * (h * zdot - z * hdot) / (f * f)

    gv = grid_variation(declination, latitude, longitude)
    return GeoMagneticElements(
        declination=declination,
        inclination=inclination,
        horizontal_intensity=h,
        total_intensity=f,
        north=x,
        east=y,
        down=z,
        declination_rate=declination_rate,
        inclination_rate=inclination_rate,
        horizontal_intensity_rate=hdot,
        total_intensity_rate=fdot,
        north_rate=xdot,
        east_rate=ydot,
        down_rate=zdot,
        grid_variation=gv,
        grid_variation_rate=declination_rate if gv is not None else None,
        flags=flags,
    )
