"""
Central configuration constants for the geomagnetic field engine.
"""

from .utils.units import LengthType, ureg

# ========== Reference ellipsoid (WGS-84) ==========
WGS84_SEMI_MAJOR_AXIS_KM: float = 6378.137  # equatorial radius in kilometers
WGS84_SEMI_MAJOR_AXIS: LengthType = 6378.137 * ureg.kilometer
WGS84_SEMI_MINOR_AXIS_KM: float = 6356.7523142  # polar radius in kilometers
WGS84_SEMI_MINOR_AXIS: LengthType = 6356.7523142 * ureg.kilometer
WGS84_FLATTENING: float = 1 / 298.257223563

# ========== Geomagnetic reference ==========
GEOMAGNETIC_REFERENCE_RADIUS_KM: float = 6371.2  # mean radius used by WMM/IGRF
GEOMAGNETIC_REFERENCE_RADIUS: LengthType = 6371.2 * ureg.kilometer

# ========== Coefficient tables ==========
DEFAULT_VALIDITY_YEARS = 5.0  # WMM models are issued for five-year spans
COEFFICIENT_SENTINEL_DEGREE = 999  # legacy end-of-table marker
COEFFICIENT_SENTINEL_PREFIX = "9999"  # WMM.COF files end with a row of nines
COEFFICIENT_ROW_FIELDS = 6  # n m g h dg dh

# ========== Polar grid variation ==========
GRID_VARIATION_MIN_LATITUDE = 55.0  # degrees, start of the polar stereographic zones

# ========== Numerical tolerances ==========
HORIZONTAL_FIELD_EPS = 1e-6  # nT, horizontal intensity treated as zero
INVERSE_TOLERANCE_RAD = 1e-15  # convergence of the geodetic latitude iteration
INVERSE_MAX_ITERATIONS = 20

# ========== Geoid resources ==========
GEOID_NPZ_KEYS = ("undulation", "lat_min", "lon_min", "lat_spacing", "lon_spacing")
