"""Legendre tables and spherical-harmonic synthesis of the field vector."""

from .harmonics import SphericalFieldVector, evaluate, magnetic_potential
from .legendre import LegendreTable, schmidt_legendre

__all__ = [
    "LegendreTable",
    "SphericalFieldVector",
    "evaluate",
    "magnetic_potential",
    "schmidt_legendre",
]
