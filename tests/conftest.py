import numpy as np
import pytest

from geomagnetism.coefficients import CoefficientModel, parse_coefficient_table
from geomagnetism.geoid import GeoidModel

# Degree-3 truncation of a WMM-like table, used as realistic test data.
SMALL_COF = """\
    2020.0            TEST-3        12/10/2019
  1  0  -29404.5       0.0        6.7        0.0
  1  1   -1450.7    4652.9        7.7      -25.1
  2  0   -2500.0       0.0      -11.5        0.0
  2  1    2982.0   -2991.6       -7.1      -30.2
  2  2    1676.8    -734.8       -2.2      -23.9
  3  0    1363.9       0.0        2.8        0.0
  3  1   -2381.0     -82.2       -6.2        5.7
  3  2    1236.2     241.8        3.4       -1.0
  3  3     525.7    -542.9      -12.2        1.1
999999999999999999999999999999999999999999999999
999999999999999999999999999999999999999999999999
"""

DIPOLE_G10 = -30000.0
DIPOLE_DG10 = 10.0


@pytest.fixture
def small_cof_text():
    return SMALL_COF


@pytest.fixture
def small_model():
    """Degree-3 model with epoch 2020.0 and a five-year validity window."""
    return parse_coefficient_table(SMALL_COF)


@pytest.fixture
def dipole_model():
    """Axial dipole: only g(1,0) and its rate are non-zero."""
    return CoefficientModel.from_rows(
        [(1, 0, DIPOLE_G10, 0.0, DIPOLE_DG10, 0.0), (1, 1, 0.0, 0.0, 0.0, 0.0)],
        epoch=2020.0,
        name="DIPOLE",
    )


@pytest.fixture
def constant_geoid():
    """Global grid with a uniform 30 m undulation."""
    return GeoidModel(
        undulation=np.full((3, 5), 30.0),
        lat_min=-90.0,
        lon_min=-180.0,
        lat_spacing=90.0,
        lon_spacing=90.0,
    )
