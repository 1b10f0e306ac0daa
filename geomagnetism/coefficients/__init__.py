"""Gauss coefficient models: representation, table loading and time adjustment."""

from .loader import (
    load_coefficient_model,
    parse_coefficient_table,
    read_coefficient_file,
)
from .model import CoefficientModel, TimedCoefficientModel, triangular_size
from .timing import adjust, adjust_to_year

__all__ = [
    "CoefficientModel",
    "TimedCoefficientModel",
    "adjust",
    "adjust_to_year",
    "load_coefficient_model",
    "parse_coefficient_table",
    "read_coefficient_file",
    "triangular_size",
]
