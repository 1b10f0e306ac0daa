"""
Geomagnetic field evaluation pipeline.

    CoefficientModel + date          -> TimedCoefficientModel
    (lat, lon, height) + GeoidModel  -> SphericalCoordinate
    timed model + spherical position -> spherical field vector and rate
    rotation to geodetic frame       -> GeoMagneticElements

Models and geoid grids are read-only and can be shared by any number of
concurrent evaluations; everything else is local to one call.
"""

from __future__ import annotations

import logging
import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .coefficients.model import CoefficientModel, TimedCoefficientModel
from .coefficients.timing import adjust
from .coordinates.ellipsoid import WGS84, Ellipsoid
from .coordinates.transform import geodetic_to_spherical, to_geodetic
from .elements.derive import GeoMagneticElements, derive_elements, rotate_to_geodetic
from .errors import DomainError, ElementFlag
from .geoid.model import GeoidModel
from .synthesis.harmonics import evaluate
from .synthesis.legendre import LegendreTable
from .utils.dates import DateLike
from .utils.units import LengthType

logger = logging.getLogger(__name__)

_FLAG_MESSAGES = {
    ElementFlag.STALE_MODEL: "Evaluation date is outside the validity window of model {name}",
    ElementFlag.DEGENERATE_HORIZONTAL_FIELD: (
        "Horizontal intensity is zero; declination reported as 0 by convention"
    ),
}


def _evaluate_timed(
    timed: TimedCoefficientModel,
    latitude: float,
    longitude: float,
    height_above_sea_level: float | LengthType,
    geoid: GeoidModel | None,
    ellipsoid: Ellipsoid,
    workspace: LegendreTable | None = None,
) -> GeoMagneticElements:
    geodetic = to_geodetic(latitude, longitude, height_above_sea_level, geoid=geoid)
    spherical = geodetic_to_spherical(geodetic, ellipsoid)
    field, rate = evaluate(timed, spherical, ellipsoid, workspace=workspace)

    flags = frozenset({ElementFlag.STALE_MODEL}) if timed.stale else frozenset()
    return derive_elements(
        rotate_to_geodetic(field, geodetic.latitude, spherical.latitude),
        rotate_to_geodetic(rate, geodetic.latitude, spherical.latitude),
        latitude=geodetic.latitude,
        longitude=geodetic.longitude,
        flags=flags,
    )


def _report_flags(result: GeoMagneticElements, model_name: str) -> None:
    for flag in sorted(result.flags, key=lambda f: f.value):
        message = _FLAG_MESSAGES[flag].format(name=model_name)
        logger.debug("%s", message)
        warnings.warn(message, flag.warning_category, stacklevel=3)


def compute_geomagnetic_elements(
    model: CoefficientModel,
    latitude: float,
    longitude: float,
    height_above_sea_level: float | LengthType,
    date: DateLike,
    geoid: GeoidModel | None = None,
    ellipsoid: Ellipsoid = WGS84,
    workspace: LegendreTable | None = None,
) -> GeoMagneticElements:
    """
    Compute the magnetic elements at one point and date.

    Args:
        model: Coefficient model to evaluate.
        latitude: Geodetic latitude in degrees, -90..90.
        longitude: Longitude in degrees (any range).
        height_above_sea_level: Meters above mean sea level, or a pint length.
        date: Evaluation date (see :func:`geomagnetism.utils.dates.decimal_year`).
        geoid: Undulation grid; heights are treated as ellipsoidal without one.
        ellipsoid: Reference ellipsoid.
        workspace: Optional Legendre scratch table sized for ``model.nmax``.

    Returns:
        GeoMagneticElements. Stale-model and degenerate-horizontal-field
        conditions are set in ``flags`` and issued as
        :class:`~geomagnetism.errors.StaleModelWarning` /
        :class:`~geomagnetism.errors.DegenerateHorizontalField` warnings.

    Raises:
        DomainError: For latitudes outside +/-90 or other invalid inputs.
    """
    timed = adjust(model, date)
    result = _evaluate_timed(
        timed, latitude, longitude, height_above_sea_level, geoid, ellipsoid, workspace
    )
    _report_flags(result, model.name)
    return result


def declination(
    model: CoefficientModel,
    latitude: float,
    longitude: float,
    height_above_sea_level: float | LengthType,
    date: DateLike,
    geoid: GeoidModel | None = None,
    ellipsoid: Ellipsoid = WGS84,
) -> float:
    """Magnetic declination in degrees, positive east of true north."""
    return compute_geomagnetic_elements(
        model, latitude, longitude, height_above_sea_level, date, geoid, ellipsoid
    ).declination


def compute_elements_batch(
    model: CoefficientModel,
    points: Iterable[tuple[float, float, float | LengthType, DateLike]],
    geoid: GeoidModel | None = None,
    ellipsoid: Ellipsoid = WGS84,
    max_workers: int | None = None,
) -> list[GeoMagneticElements]:
    """
    Evaluate many ``(latitude, longitude, height, date)`` points.

    All points share ``model`` and ``geoid``. With ``max_workers`` greater
    than 1 the points are spread over a thread pool; results keep the input
    order either way.
    """
    points = list(points)

    if max_workers is None or max_workers <= 1:
        workspace = LegendreTable.allocate(model.nmax)
        return [
            compute_geomagnetic_elements(
                model, lat, lon, height, date, geoid, ellipsoid, workspace
            )
            for lat, lon, height, date in points
        ]

    def _one(point):
        lat, lon, height, date = point
        return compute_geomagnetic_elements(model, lat, lon, height, date, geoid, ellipsoid)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(_one, points))


def declination_grid(
    model: CoefficientModel,
    latitudes: Sequence[float] | np.ndarray,
    longitudes: Sequence[float] | np.ndarray,
    height_above_sea_level: float | LengthType,
    date: DateLike,
    geoid: GeoidModel | None = None,
    ellipsoid: Ellipsoid = WGS84,
) -> np.ndarray:
    """
    Declination over a latitude/longitude mesh.

    Returns:
        Array of shape ``(len(latitudes), len(longitudes))`` in degrees.
        Points with a degenerate horizontal field hold 0; a single
        DegenerateHorizontalField warning is issued when any point did.
    """
    lats = np.asarray(latitudes, dtype=np.float64)
    lons = np.asarray(longitudes, dtype=np.float64)
    if lats.ndim != 1 or lons.ndim != 1:
        raise DomainError("latitudes and longitudes must be one-dimensional")

    timed = adjust(model, date)
    if timed.stale:
        warnings.warn(
            _FLAG_MESSAGES[ElementFlag.STALE_MODEL].format(name=model.name),
            ElementFlag.STALE_MODEL.warning_category,
            stacklevel=2,
        )
    workspace = LegendreTable.allocate(model.nmax)
    grid = np.empty((lats.size, lons.size))
    degenerate = 0
    for i, lat in enumerate(lats):
        for j, lon in enumerate(lons):
            result = _evaluate_timed(
                timed, lat, lon, height_above_sea_level, geoid, ellipsoid, workspace
            )
            grid[i, j] = result.declination
            degenerate += result.degenerate_horizontal_field
    if degenerate:
        flag = ElementFlag.DEGENERATE_HORIZONTAL_FIELD
        logger.debug("%d grid points have a degenerate horizontal field", degenerate)
        warnings.warn(
            f"{_FLAG_MESSAGES[flag]} at {degenerate} grid point(s)",
            flag.warning_category,
            stacklevel=2,
        )
    logger.debug("Computed %dx%d declination grid for %s", lats.size, lons.size, model.name)
    return grid


@dataclass(slots=True, frozen=True)
class MagneticFieldCalculator:
    """Binds a coefficient model, an optional geoid and an ellipsoid for repeated use."""

    model: CoefficientModel
    geoid: GeoidModel | None = None
    ellipsoid: Ellipsoid = WGS84

    def compute(
        self,
        latitude: float,
        longitude: float,
        height_above_sea_level: float | LengthType,
        date: DateLike,
    ) -> GeoMagneticElements:
        return compute_geomagnetic_elements(
            self.model,
            latitude,
            longitude,
            height_above_sea_level,
            date,
            self.geoid,
            self.ellipsoid,
        )

    def declination(
        self,
        latitude: float,
        longitude: float,
        height_above_sea_level: float | LengthType,
        date: DateLike,
    ) -> float:
        return self.compute(latitude, longitude, height_above_sea_level, date).declination
