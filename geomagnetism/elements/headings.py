"""Convert headings between true and magnetic north."""

from __future__ import annotations


def true_to_magnetic(heading: float, declination: float) -> float:
    """Magnetic heading in [0, 360) for a true heading and an east-positive declination."""
    return (heading - declination) % 360.0


def magnetic_to_true(heading: float, declination: float) -> float:
    """True heading in [0, 360) for a magnetic heading and an east-positive declination."""
    return (heading + declination) % 360.0
