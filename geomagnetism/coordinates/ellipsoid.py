from __future__ import annotations

import math
from dataclasses import dataclass

from .. import config
from ..errors import DomainError


@dataclass(slots=True, frozen=True)
class Ellipsoid:
    """
    Reference ellipsoid of revolution.

    Attributes:
        semi_major_axis_km: Equatorial radius ``a`` in kilometers.
        flattening: ``f = (a - b) / a``.
        reference_radius_km: Geomagnetic reference radius used by the
            spherical-harmonic expansion.
    """

    semi_major_axis_km: float
    flattening: float
    reference_radius_km: float = config.GEOMAGNETIC_REFERENCE_RADIUS_KM

    def __post_init__(self):
        if not self.semi_major_axis_km > 0:
            raise DomainError("semi_major_axis_km must be positive")
        if not 0 <= self.flattening < 1:
            raise DomainError("flattening must lie in [0, 1)")
        if not self.reference_radius_km > 0:
            raise DomainError("reference_radius_km must be positive")

    @property
    def semi_minor_axis_km(self) -> float:
        return self.semi_major_axis_km * (1.0 - self.flattening)

    @property
    def eccentricity_squared(self) -> float:
        return self.flattening * (2.0 - self.flattening)

    def prime_vertical_radius_km(self, sin_lat: float) -> float:
        """Radius of curvature in the prime vertical at ``sin(latitude)``."""
        return self.semi_major_axis_km / math.sqrt(
            1.0 - self.eccentricity_squared * sin_lat * sin_lat
        )


WGS84 = Ellipsoid(
    semi_major_axis_km=config.WGS84_SEMI_MAJOR_AXIS_KM,
    flattening=config.WGS84_FLATTENING,
)
