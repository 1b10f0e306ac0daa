"""Gauss coefficient containers for spherical-harmonic field models.

Coefficients are stored as lower-triangular ``(nmax + 1, nmax + 1)`` arrays
indexed ``[n, m]``. Row ``n = 0`` and the upper triangle are always zero.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .. import config
from ..errors import DomainError


def triangular_size(nmax: int) -> int:
    """Number of (n, m) pairs with 1 <= n <= nmax and 0 <= m <= n."""
    return (nmax + 1) * (nmax + 2) // 2 - 1


def _frozen_copy(values: np.ndarray) -> np.ndarray:
    arr = np.array(values, dtype=np.float64, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(slots=True, frozen=True, eq=False)
class CoefficientModel:
    """
    One epoch of Gauss coefficients and their secular variation.

    Attributes:
        name: Model designator from the table header (e.g. ``WMM-2020``).
        epoch: Reference decimal year ``t0`` of the base coefficients.
        g, h: Main-field coefficients in nT, shape ``(nmax + 1, nmax + 1)``.
        dg, dh: Secular-variation rates in nT/year, same shape.
        release_date: Release date string from the header, if any.
        validity_years: Length of the validity window starting at ``epoch``.

    Instances are read-only (arrays are flagged non-writeable) and may be
    shared between threads.
    """

    name: str
    epoch: float
    g: np.ndarray
    h: np.ndarray
    dg: np.ndarray
    dh: np.ndarray
    release_date: str | None = None
    validity_years: float = config.DEFAULT_VALIDITY_YEARS

    def __post_init__(self):
        shape = np.shape(self.g)
        if len(shape) != 2 or shape[0] != shape[1] or shape[0] < 2:
            raise DomainError(f"Coefficient arrays must be square with nmax >= 1, got {shape}")
        for attr in ("h", "dg", "dh"):
            if np.shape(getattr(self, attr)) != shape:
                raise DomainError(f"{attr} has shape {np.shape(getattr(self, attr))}, expected {shape}")
        if self.validity_years <= 0:
            raise DomainError("validity_years must be positive")

        for attr in ("g", "h", "dg", "dh"):
            values = _frozen_copy(getattr(self, attr))
            if not np.all(np.isfinite(values)):
                raise DomainError(f"{attr} contains non-finite coefficients")
            object.__setattr__(self, attr, values)

    @property
    def nmax(self) -> int:
        return self.g.shape[0] - 1

    @property
    def num_terms(self) -> int:
        return triangular_size(self.nmax)

    @property
    def validity_end(self) -> float:
        return self.epoch + self.validity_years

    def is_valid_for(self, year: float) -> bool:
        """True when ``year`` falls inside ``[epoch, epoch + validity_years]``."""
        return self.epoch <= year <= self.validity_end

    def coefficient(self, n: int, m: int) -> tuple[float, float, float, float]:
        """Return ``(g, h, dg, dh)`` for degree ``n`` and order ``m``."""
        if not (1 <= n <= self.nmax and 0 <= m <= n):
            raise DomainError(f"No coefficient for (n={n}, m={m}) with nmax={self.nmax}")
        return (
            float(self.g[n, m]),
            float(self.h[n, m]),
            float(self.dg[n, m]),
            float(self.dh[n, m]),
        )

    def without_secular_variation(self) -> CoefficientModel:
        """Copy of the model with all rate terms set to zero."""
        zeros = np.zeros_like(self.g)
        return CoefficientModel(
            name=self.name,
            epoch=self.epoch,
            g=self.g,
            h=self.h,
            dg=zeros,
            dh=zeros,
            release_date=self.release_date,
            validity_years=self.validity_years,
        )

    @classmethod
    def from_rows(
        cls,
        rows,
        epoch: float,
        name: str = "custom",
        release_date: str | None = None,
        validity_years: float = config.DEFAULT_VALIDITY_YEARS,
    ) -> CoefficientModel:
        """
        Build a model from ``(n, m, g, h, dg, dh)`` tuples.

        Missing pairs are left at zero; use the table loader when every pair
        must be present.
        """
        rows = list(rows)
        if not rows:
            raise DomainError("At least one coefficient row is required")
        nmax = max(int(row[0]) for row in rows)
        if nmax < 1:
            raise DomainError("Coefficient rows must include degree >= 1")
        arrays = {key: np.zeros((nmax + 1, nmax + 1)) for key in ("g", "h", "dg", "dh")}
        for n, m, g, h, dg, dh in rows:
            n, m = int(n), int(m)
            if not (1 <= n and 0 <= m <= n):
                raise DomainError(f"Invalid coefficient index (n={n}, m={m})")
            arrays["g"][n, m] = g
            arrays["dg"][n, m] = dg
            if m > 0:
                arrays["h"][n, m] = h
                arrays["dh"][n, m] = dh
        return cls(
            name=name,
            epoch=float(epoch),
            release_date=release_date,
            validity_years=validity_years,
            **arrays,
        )


@dataclass(slots=True, frozen=True, eq=False)
class TimedCoefficientModel:
    """
    Coefficients extrapolated to one evaluation date.

    ``g`` and ``h`` hold ``g0 + (t - t0) * dg``; ``dg`` and ``dh`` are the
    untouched rates of the source model. Built per evaluation and not shared.
    """

    name: str
    epoch: float
    year: float
    g: np.ndarray
    h: np.ndarray
    dg: np.ndarray
    dh: np.ndarray
    stale: bool = False
    validity_end: float = float("nan")

    @property
    def nmax(self) -> int:
        return self.g.shape[0] - 1

    @property
    def years_from_epoch(self) -> float:
        return self.year - self.epoch
