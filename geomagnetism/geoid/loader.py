"""
Load geoid undulation grids from in-memory resources.

Two layouts are accepted:

- NPZ archives with ``undulation`` (south-to-north rows), ``lat_min``,
  ``lon_min``, ``lat_spacing`` and ``lon_spacing``.
- Text grids in the EGM96 ``WW15MGH.GRD`` layout: a header
  ``lat_min lat_max lon_min lon_max dlat dlon`` followed by the samples row by
  row from the northernmost latitude southwards, each row west to east.
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO

import numpy as np

from .. import config
from ..errors import DomainError, ParseError
from .model import GeoidModel

logger = logging.getLogger(__name__)

GeoidSource = bytes | bytearray | memoryview | BinaryIO


def _as_stream(source: GeoidSource) -> BinaryIO:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if hasattr(source, "read"):
        return source
    raise ParseError(f"Unsupported geoid source type: {type(source).__name__}")


def _grid_count(low: float, high: float, spacing: float, axis: str) -> int:
    steps = (high - low) / spacing
    count = int(round(steps))
    if count < 1 or abs(steps - count) > 1e-6:
        raise ParseError(f"{axis} extent {low}..{high} is not a multiple of spacing {spacing}")
    return count + 1


def load_geoid_npz(source: GeoidSource) -> GeoidModel:
    """Load a geoid grid stored as an NPZ archive."""
    try:
        with np.load(_as_stream(source), allow_pickle=False) as data:
            arrays = {key: data[key] for key in config.GEOID_NPZ_KEYS if key in data.files}
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise ParseError(f"Could not read geoid archive: {exc}") from exc

    missing = [key for key in config.GEOID_NPZ_KEYS if key not in arrays]
    if missing:
        raise ParseError(f"Geoid archive is missing keys: {', '.join(missing)}")
    try:
        undulation = np.asarray(arrays["undulation"], dtype=np.float64)
        lat_min = float(arrays["lat_min"])
        lon_min = float(arrays["lon_min"])
        lat_spacing = float(arrays["lat_spacing"])
        lon_spacing = float(arrays["lon_spacing"])
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Geoid archive has malformed fields: {exc}") from exc

    try:
        model = GeoidModel(
            undulation=undulation,
            lat_min=lat_min,
            lon_min=lon_min,
            lat_spacing=lat_spacing,
            lon_spacing=lon_spacing,
        )
    except DomainError as exc:
        raise ParseError(f"Invalid geoid grid: {exc}") from exc
    logger.debug("Loaded geoid grid %s from NPZ", model.undulation.shape)
    return model


def parse_geoid_text(text: str) -> GeoidModel:
    """Parse a ``WW15MGH.GRD``-style text grid."""
    tokens = text.split()
    if len(tokens) < 6:
        raise ParseError("Geoid grid header needs lat_min lat_max lon_min lon_max dlat dlon")
    try:
        lat_min, lat_max, lon_min, lon_max, dlat, dlon = (float(tok) for tok in tokens[:6])
        values = np.array([float(tok) for tok in tokens[6:]], dtype=np.float64)
    except ValueError as exc:
        raise ParseError(f"Non-numeric value in geoid grid: {exc}") from None
    if dlat <= 0 or dlon <= 0:
        raise ParseError("Geoid grid spacing must be positive")

    n_lat = _grid_count(lat_min, lat_max, dlat, "Latitude")
    n_lon = _grid_count(lon_min, lon_max, dlon, "Longitude")
    if values.size != n_lat * n_lon:
        raise ParseError(
            f"Geoid grid declares {n_lat}x{n_lon} samples but holds {values.size}"
        )

    # Stored north to south in the file.
    undulation = values.reshape(n_lat, n_lon)[::-1]
    try:
        model = GeoidModel(
            undulation=undulation,
            lat_min=lat_min,
            lon_min=lon_min,
            lat_spacing=dlat,
            lon_spacing=dlon,
        )
    except DomainError as exc:
        raise ParseError(f"Invalid geoid grid: {exc}") from exc
    logger.debug("Loaded geoid grid %dx%d from text", n_lat, n_lon)
    return model


def load_geoid_model(source: GeoidSource) -> GeoidModel:
    """
    Load a geoid grid from bytes or a binary stream.

    NPZ archives are recognised by their ZIP signature; anything else is
    parsed as a text grid.
    """
    stream = _as_stream(source)
    raw = stream.read()
    if raw[:4] == b"PK\x03\x04":
        return load_geoid_npz(raw)
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Geoid grid is neither NPZ nor ASCII text: {exc}") from exc
    return parse_geoid_text(text)


def read_geoid_file(path: str | Path) -> GeoidModel:
    """Load a geoid grid from a file on disk."""
    try:
        with open(path, "rb") as handle:
            return load_geoid_model(handle)
    except OSError as exc:
        raise ParseError(f"Could not read geoid file {path}: {exc}") from exc
