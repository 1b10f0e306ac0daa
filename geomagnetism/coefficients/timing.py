"""Linear secular-variation extrapolation of coefficient models."""

from __future__ import annotations

import logging

from ..utils.dates import DateLike, decimal_year
from .model import CoefficientModel, TimedCoefficientModel

logger = logging.getLogger(__name__)


def adjust_to_year(model: CoefficientModel, year: float) -> TimedCoefficientModel:
    """
    Extrapolate ``model`` to the decimal year ``year``.

    Every coefficient becomes ``g0 + (year - epoch) * dg`` (likewise ``h``).
    There is no cutoff outside the validity window; the result is marked
    ``stale`` instead.
    """
    dt = year - model.epoch
    stale = not model.is_valid_for(year)
    if stale:
        logger.debug(
            "Year %.4f outside validity window %.1f-%.1f of %s",
            year,
            model.epoch,
            model.validity_end,
            model.name,
        )
    return TimedCoefficientModel(
        name=model.name,
        epoch=model.epoch,
        year=year,
        g=model.g + dt * model.dg,
        h=model.h + dt * model.dh,
        dg=model.dg,
        dh=model.dh,
        stale=stale,
        validity_end=model.validity_end,
    )


def adjust(model: CoefficientModel, date: DateLike) -> TimedCoefficientModel:
    """Convert ``date`` to a decimal year and extrapolate ``model`` to it."""
    return adjust_to_year(model, decimal_year(date))
