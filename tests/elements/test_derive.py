# Tests for geomagnetism/elements

import math

import pytest

from geomagnetism.elements import (
    GeodeticFieldVector,
    derive_elements,
    grid_variation,
    magnetic_to_true,
    rotate_to_geodetic,
    true_to_magnetic,
)
from geomagnetism.errors import ElementFlag
from geomagnetism.synthesis import SphericalFieldVector
from geomagnetism.utils.units import ureg

FIELD = GeodeticFieldVector(north=21000.0, east=-3500.0, down=42000.0)
RATE = GeodeticFieldVector(north=-12.0, east=25.0, down=-80.0)


def _shifted(vector, rate, dt):
    return GeodeticFieldVector(
        north=vector.north + dt * rate.north,
        east=vector.east + dt * rate.east,
        down=vector.down + dt * rate.down,
    )


def test_scalar_elements():
    elements = derive_elements(FIELD, RATE)
    h = math.hypot(21000.0, -3500.0)
    assert elements.horizontal_intensity == pytest.approx(h)
    assert elements.total_intensity == pytest.approx(math.hypot(h, 42000.0))
    assert elements.declination == pytest.approx(math.degrees(math.atan2(-3500.0, 21000.0)))
    assert elements.inclination == pytest.approx(math.degrees(math.atan2(42000.0, h)))
    assert (elements.north, elements.east, elements.down) == (21000.0, -3500.0, 42000.0)
    assert (elements.north_rate, elements.east_rate, elements.down_rate) == (-12.0, 25.0, -80.0)
    assert not elements.flags


@pytest.mark.parametrize(
    "attr",
    ["declination", "inclination", "horizontal_intensity", "total_intensity"],
)
def test_rates_match_finite_differences(attr):
    dt = 1e-3
    ahead = derive_elements(_shifted(FIELD, RATE, dt), RATE)
    behind = derive_elements(_shifted(FIELD, RATE, -dt), RATE)
    numeric = (getattr(ahead, attr) - getattr(behind, attr)) / (2 * dt)
    analytic = getattr(derive_elements(FIELD, RATE), f"{attr}_rate")
    assert analytic == pytest.approx(numeric, rel=1e-6, abs=1e-9)


def test_vertical_field_is_degenerate():
    elements = derive_elements(
        GeodeticFieldVector(0.0, 0.0, 55000.0), GeodeticFieldVector(3.0, 4.0, 10.0)
    )
    assert elements.degenerate_horizontal_field
    assert ElementFlag.DEGENERATE_HORIZONTAL_FIELD in elements.flags
    assert elements.declination == 0.0
    assert elements.declination_rate == 0.0
    assert elements.inclination == 90.0
    assert elements.horizontal_intensity_rate == pytest.approx(5.0)
    assert all(math.isfinite(v) for v in elements.as_dict().values() if isinstance(v, float))


def test_zero_field_stays_finite():
    zero = GeodeticFieldVector(0.0, 0.0, 0.0)
    elements = derive_elements(zero, zero)
    assert elements.total_intensity == 0.0
    assert elements.total_intensity_rate == 0.0
    assert elements.inclination_rate == 0.0


def test_incoming_flags_are_kept():
    elements = derive_elements(FIELD, RATE, flags=frozenset({ElementFlag.STALE_MODEL}))
    assert elements.stale_model
    assert not elements.degenerate_horizontal_field


def test_as_dict_lists_flag_names():
    elements = derive_elements(
        GeodeticFieldVector(0.0, 0.0, 1.0),
        GeodeticFieldVector(0.0, 0.0, 0.0),
        flags=frozenset({ElementFlag.STALE_MODEL}),
    )
    assert elements.as_dict()["flags"] == ["degenerate_horizontal_field", "stale_model"]


def test_rotation_without_latitude_offset():
    vector = SphericalFieldVector(b_r=-40000.0, b_theta=-20000.0, b_phi=1500.0)
    rotated = rotate_to_geodetic(vector, 30.0, 30.0)
    assert rotated == GeodeticFieldVector(north=20000.0, east=1500.0, down=40000.0)


def test_rotation_preserves_magnitude():
    vector = SphericalFieldVector(b_r=-40000.0, b_theta=-20000.0, b_phi=1500.0)
    rotated = rotate_to_geodetic(vector, 45.0, 44.8076)
    before = math.sqrt(vector.b_r**2 + vector.b_theta**2 + vector.b_phi**2)
    after = math.sqrt(rotated.north**2 + rotated.east**2 + rotated.down**2)
    assert after == pytest.approx(before, rel=1e-12)
    assert rotated.east == 1500.0


def test_rotation_direction():
    # Purely radial field: geodetic north picks up a component when the
    # geocentric latitude is smaller than the geodetic one.
    vector = SphericalFieldVector(b_r=-50000.0, b_theta=0.0, b_phi=0.0)
    rotated = rotate_to_geodetic(vector, 45.0, 44.0)
    psi = math.radians(-1.0)
    assert rotated.north == pytest.approx(-50000.0 * math.sin(psi))
    assert rotated.down == pytest.approx(50000.0 * math.cos(psi))


@pytest.mark.parametrize(
    "declination,lat,lon,expected",
    [
        (10.0, 60.0, 30.0, -20.0),
        (10.0, -60.0, 30.0, 40.0),
        (20.0, 70.0, -170.0, -170.0),
        (-5.0, -80.0, 170.0, 165.0),
        (10.0, 55.0, 0.0, 10.0),
        (10.0, 54.9, 30.0, None),
        (10.0, 0.0, 30.0, None),
    ],
)
def test_grid_variation(declination, lat, lon, expected):
    result = grid_variation(declination, lat, lon)
    if expected is None:
        assert result is None
    else:
        assert result == pytest.approx(expected)


def test_grid_variation_rate_follows_declination_rate():
    polar = derive_elements(FIELD, RATE, latitude=75.0, longitude=20.0)
    assert polar.grid_variation_rate == polar.declination_rate
    assert polar.grid_variation == pytest.approx(polar.declination - 20.0)
    temperate = derive_elements(FIELD, RATE, latitude=45.0, longitude=20.0)
    assert temperate.grid_variation is None
    assert temperate.grid_variation_rate is None


@pytest.mark.parametrize(
    "heading,declination,magnetic",
    [(10.0, 15.0, 355.0), (90.0, -10.0, 100.0), (0.0, 0.0, 0.0), (350.0, -20.0, 10.0)],
)
def test_heading_conversion(heading, declination, magnetic):
    assert true_to_magnetic(heading, declination) == pytest.approx(magnetic)
    assert magnetic_to_true(magnetic, declination) == pytest.approx(heading % 360.0)


def test_as_quantities_carries_units():
    quantities = derive_elements(FIELD, RATE).as_quantities()
    assert quantities["declination"].units == ureg.degree
    assert quantities["north"].to(ureg.microtesla).magnitude == pytest.approx(21.0)
    assert quantities["down_rate"].to(ureg.nanotesla / ureg.year).magnitude == -80.0
    assert set(quantities) == {
        "declination", "declination_rate",
        "inclination", "inclination_rate",
        "horizontal_intensity", "horizontal_intensity_rate",
        "total_intensity", "total_intensity_rate",
        "north", "north_rate",
        "east", "east_rate",
        "down", "down_rate",
    }
