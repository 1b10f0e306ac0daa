"""
Spherical-harmonic synthesis of the internal geomagnetic field.

With reference radius ``a`` the scalar potential is::

    V = a * sum_{n,m} (a/r)^(n+1) [g cos(m lambda) + h sin(m lambda)] P(n,m)(theta)

and the field ``B = -grad V`` has spherical components::

    B_r     =  sum (n+1) (a/r)^(n+2) [g cos + h sin] P(n,m)
    B_theta = -sum       (a/r)^(n+2) [g cos + h sin] dP(n,m)/dtheta
    B_phi   =  sum     m (a/r)^(n+2) [g sin - h cos] P(n,m) / sin(theta)

The rate vector uses the same sums with ``dg, dh`` in place of ``g, h``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..coefficients.model import TimedCoefficientModel
from ..coordinates.ellipsoid import WGS84, Ellipsoid
from ..coordinates.transform import SphericalCoordinate
from .legendre import LegendreTable, schmidt_legendre


@dataclass(slots=True, frozen=True)
class SphericalFieldVector:
    """Field in geocentric spherical components (nT, or nT/year for rates).

    ``b_r`` points outward, ``b_theta`` southward (increasing colatitude),
    ``b_phi`` eastward.
    """

    b_r: float
    b_theta: float
    b_phi: float


def _harmonic_terms(
    model: TimedCoefficientModel, coord: SphericalCoordinate, ellipsoid: Ellipsoid
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    nmax = model.nmax
    n = np.arange(nmax + 1)
    m = np.arange(nmax + 1)
    ratio = ellipsoid.reference_radius_km / coord.radius_km
    radial = (ratio ** (n + 2))[:, None]
    lam = math.radians(coord.longitude)
    cos_ml = np.cos(m * lam)[None, :]
    sin_ml = np.sin(m * lam)[None, :]
    return n[:, None], m[None, :], radial, cos_ml, sin_ml


def _sum_components(
    g: np.ndarray,
    h: np.ndarray,
    table: LegendreTable,
    n: np.ndarray,
    m: np.ndarray,
    radial: np.ndarray,
    cos_ml: np.ndarray,
    sin_ml: np.ndarray,
) -> SphericalFieldVector:
    in_phase = g * cos_ml + h * sin_ml
    quadrature = g * sin_ml - h * cos_ml
    return SphericalFieldVector(
        b_r=float(np.sum(radial * (n + 1) * in_phase * table.p)),
        b_theta=float(-np.sum(radial * in_phase * table.dp)),
        b_phi=float(np.sum(radial * m * quadrature * table.q)),
    )


def evaluate(
    model: TimedCoefficientModel,
    coord: SphericalCoordinate,
    ellipsoid: Ellipsoid = WGS84,
    workspace: LegendreTable | None = None,
) -> tuple[SphericalFieldVector, SphericalFieldVector]:
    """
    Synthesize the main field and its secular variation at one point.

    Args:
        model: Coefficients already extrapolated to the evaluation date.
        coord: Geocentric spherical position.
        ellipsoid: Supplies the geomagnetic reference radius.
        workspace: Optional Legendre scratch table sized for ``model.nmax``.

    Returns:
        ``(field, rate)`` in nT and nT/year.
    """
    table = schmidt_legendre(coord.colatitude, model.nmax, out=workspace)
    terms = _harmonic_terms(model, coord, ellipsoid)
    field = _sum_components(model.g, model.h, table, *terms)
    rate = _sum_components(model.dg, model.dh, table, *terms)
    return field, rate


def magnetic_potential(
    model: TimedCoefficientModel,
    coord: SphericalCoordinate,
    ellipsoid: Ellipsoid = WGS84,
) -> float:
    """Scalar potential ``V`` in nT*km at ``coord``."""
    table = schmidt_legendre(coord.colatitude, model.nmax)
    _, _, radial, cos_ml, sin_ml = _harmonic_terms(model, coord, ellipsoid)
    ratio = ellipsoid.reference_radius_km / coord.radius_km
    in_phase = model.g * cos_ml + model.h * sin_ml
    # (a/r)^(n+1) = (a/r)^(n+2) * (r/a)
    return float(
        ellipsoid.reference_radius_km * np.sum(radial / ratio * in_phase * table.p)
    )
