"""Geoid undulation grids for mean-sea-level to ellipsoid height conversion."""

from .loader import (
    load_geoid_model,
    load_geoid_npz,
    parse_geoid_text,
    read_geoid_file,
)
from .model import GeoidModel

__all__ = [
    "GeoidModel",
    "load_geoid_model",
    "load_geoid_npz",
    "parse_geoid_text",
    "read_geoid_file",
]
