"""
Schmidt semi-normalized associated Legendre functions.

For colatitude ``theta`` (``x = cos(theta)``, ``s = sin(theta)``)::

    P(0,0) = 1,  P(1,1) = s
    P(n,n) = sqrt((2n - 1) / 2n) * s * P(n-1,n-1)                       n >= 2
    P(n,m) = [(2n - 1) x P(n-1,m) - sqrt((n-1)^2 - m^2) P(n-2,m)] / sqrt(n^2 - m^2)

No Condon-Shortley phase is applied. All values stay within [-1, 1], so the
recursion neither overflows nor needs rescaling at the degrees used by
WMM/IGRF-class models.

Alongside ``P`` the table holds ``dP/dtheta`` and ``Q(n,m) = P(n,m) / s`` for
``m >= 1``. ``Q`` obeys the same recursion in ``n`` (starting from
``Q(1,1) = 1``), so it stays finite at the poles where it reduces to
``Q(n,1) = cos(theta)^(n+1) * sqrt(n(n+1)/2)`` and ``Q(n,m) = 0`` for m >= 2.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from ..errors import DomainError


@lru_cache(maxsize=16)
def _recursion_factors(nmax: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Per-(n, m) recursion coefficients, shared read-only between calls."""
    a = np.zeros((nmax + 1, nmax + 1))
    b = np.zeros((nmax + 1, nmax + 1))
    sectoral = np.zeros(nmax + 1)
    for n in range(1, nmax + 1):
        m = np.arange(n)
        denom = np.sqrt(n * n - m * m)
        a[n, :n] = (2 * n - 1) / denom
        b[n, :n] = np.sqrt(np.maximum((n - 1) ** 2 - m * m, 0)) / denom
        sectoral[n] = 1.0 if n == 1 else math.sqrt((2 * n - 1) / (2 * n))
    for arr in (a, b, sectoral):
        arr.setflags(write=False)
    return a, b, sectoral


@dataclass(slots=True)
class LegendreTable:
    """
    Legendre values at one colatitude, indexed ``[n, m]``.

    Attributes:
        p: Schmidt semi-normalized ``P(n, m)``.
        dp: Derivative of ``P(n, m)`` with respect to colatitude.
        q: ``P(n, m) / sin(theta)`` for ``m >= 1`` (column ``m = 0`` is zero).

    A table may be passed back into :func:`schmidt_legendre` as scratch
    space. It must not be shared between threads while in use.
    """

    p: np.ndarray
    dp: np.ndarray
    q: np.ndarray

    @classmethod
    def allocate(cls, nmax: int) -> LegendreTable:
        shape = (nmax + 1, nmax + 1)
        return cls(p=np.zeros(shape), dp=np.zeros(shape), q=np.zeros(shape))

    @property
    def nmax(self) -> int:
        return self.p.shape[0] - 1


def schmidt_legendre(
    colatitude_deg: float, nmax: int, out: LegendreTable | None = None
) -> LegendreTable:
    """
    Evaluate the Legendre table for ``0 <= n <= nmax`` at one colatitude.

    Args:
        colatitude_deg: Geocentric colatitude in degrees, 0..180.
        nmax: Maximum degree, >= 1.
        out: Optional table of matching size to fill in place.

    Returns:
        The filled LegendreTable (``out`` when given).
    """
    if nmax < 1:
        raise DomainError(f"nmax must be >= 1, got {nmax}")
    if out is None:
        out = LegendreTable.allocate(nmax)
    elif out.nmax != nmax:
        raise DomainError(f"Scratch table has nmax={out.nmax}, expected {nmax}")

    theta = math.radians(colatitude_deg)
    x = math.cos(theta)
    s = math.sin(theta)
    a, b, sectoral = _recursion_factors(nmax)
    p, dp, q = out.p, out.dp, out.q
    p.fill(0.0)
    dp.fill(0.0)
    q.fill(0.0)

    p[0, 0] = 1.0
    p[1, 0] = x
    dp[1, 0] = -s
    p[1, 1] = s
    dp[1, 1] = x
    q[1, 1] = 1.0

    for n in range(2, nmax + 1):
        k = sectoral[n]
        p[n, n] = k * s * p[n - 1, n - 1]
        dp[n, n] = k * (s * dp[n - 1, n - 1] + x * p[n - 1, n - 1])
        q[n, n] = k * s * q[n - 1, n - 1]

        an = a[n, :n]
        bn = b[n, :n]
        p[n, :n] = an * x * p[n - 1, :n] - bn * p[n - 2, :n]
        dp[n, :n] = an * (x * dp[n - 1, :n] - s * p[n - 1, :n]) - bn * dp[n - 2, :n]
        q[n, 1:n] = an[1:] * x * q[n - 1, 1:n] - bn[1:] * q[n - 2, 1:n]

    return out
