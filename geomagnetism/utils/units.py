from typing import Annotated

import pint
from pint import Quantity

ureg = pint.UnitRegistry()

LengthType = Annotated[Quantity, ureg.meter]
AngleType = Annotated[Quantity, ureg.degree]
AngleRateType = Annotated[Quantity, ureg.degree / ureg.year]
MagneticFluxDensityType = Annotated[Quantity, ureg.nanotesla]
MagneticFluxDensityRateType = Annotated[Quantity, ureg.nanotesla / ureg.year]


def length_to_km(value: float | LengthType, default_unit=ureg.meter) -> float:
    """
    Convert a plain number or a pint length to kilometers.

    Plain numbers are interpreted in ``default_unit``.

    Raises:
        pint.DimensionalityError: If ``value`` is a Quantity that is not a length.
    """
    if isinstance(value, Quantity):
        return float(value.to(ureg.kilometer).magnitude)
    return float((value * default_unit).to(ureg.kilometer).magnitude)


__all__ = [
    "ureg",
    "LengthType",
    "AngleType",
    "AngleRateType",
    "MagneticFluxDensityType",
    "MagneticFluxDensityRateType",
    "length_to_km",
]
