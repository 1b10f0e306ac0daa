"""Geoid undulation grid used to turn mean-sea-level heights into ellipsoid heights."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from ..errors import DomainError


@dataclass(slots=True, frozen=True, eq=False)
class GeoidModel:
    """
    Regular latitude/longitude grid of geoid undulations (meters).

    ``undulation[i, j]`` is the height of the geoid above the ellipsoid at
    latitude ``lat_min + i * lat_spacing`` and longitude
    ``lon_min + j * lon_spacing``. Queries outside the grid are clamped to the
    nearest edge. A grid whose columns cover a full 360 degrees wraps in
    longitude; the seam between its last and first column is interpolated like
    any other cell, whether or not the grid repeats its first column.
    """

    undulation: np.ndarray
    lat_min: float
    lon_min: float
    lat_spacing: float
    lon_spacing: float
    _interpolator: RegularGridInterpolator = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        grid = np.array(self.undulation, dtype=np.float64, copy=True)
        if grid.ndim != 2 or grid.shape[0] < 2 or grid.shape[1] < 2:
            raise DomainError(f"Geoid grid must be 2D with at least 2x2 samples, got {grid.shape}")
        if not np.all(np.isfinite(grid)):
            raise DomainError("Geoid grid contains non-finite samples")
        if self.lat_spacing <= 0 or self.lon_spacing <= 0:
            raise DomainError("Geoid grid spacing must be positive")
        grid.setflags(write=False)
        object.__setattr__(self, "undulation", grid)

        lats = self.lat_min + self.lat_spacing * np.arange(grid.shape[0])
        lons = self.lon_min + self.lon_spacing * np.arange(grid.shape[1])
        if lats[0] < -90.0 - 1e-9 or lats[-1] > 90.0 + 1e-9:
            raise DomainError(f"Geoid grid latitudes {lats[0]}..{lats[-1]} exceed +/-90")

        values = grid
        if self.wraps_longitude and lons[-1] - lons[0] < 360.0 - 1e-9:
            # close the seam with the first column one turn east
            lons = np.append(lons, lons[0] + 360.0)
            values = np.concatenate([grid, grid[:, :1]], axis=1)
        object.__setattr__(
            self,
            "_interpolator",
            RegularGridInterpolator((lats, lons), values, method="linear"),
        )

    @property
    def lat_max(self) -> float:
        return self.lat_min + self.lat_spacing * (self.undulation.shape[0] - 1)

    @property
    def lon_max(self) -> float:
        return self.lon_min + self.lon_spacing * (self.undulation.shape[1] - 1)

    @property
    def wraps_longitude(self) -> bool:
        return self.lon_spacing * self.undulation.shape[1] >= 360.0 - 1e-9

    def undulation_at(self, lat, lon):
        """
        Bilinearly interpolated geoid undulation in meters.

        Args:
            lat: Geodetic latitude(s) in degrees.
            lon: Longitude(s) in degrees, any range.

        Returns:
            A float for scalar inputs, otherwise an array broadcast from
            ``lat`` and ``lon``.
        """
        lat_arr, lon_arr = np.broadcast_arrays(
            np.asarray(lat, dtype=np.float64), np.asarray(lon, dtype=np.float64)
        )
        lat_q = np.clip(lat_arr, self.lat_min, self.lat_max)
        if self.wraps_longitude:
            lon_q = self.lon_min + np.mod(lon_arr - self.lon_min, 360.0)
        else:
            lon_q = np.clip(lon_arr, self.lon_min, self.lon_max)

        values = self._interpolator(np.stack([lat_q.ravel(), lon_q.ravel()], axis=-1))
        values = values.reshape(lat_q.shape)
        if values.ndim == 0:
            return float(values)
        return values
