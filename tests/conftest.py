"""
Shared pytest fixtures for the BioGeoSeed test suite.

Province lookups use a small in-memory repository of rectangular provinces so
tests do not need the Longhurst dataset.
"""

import pytest
import sys
from pathlib import Path

from shapely.geometry import box

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.parameters import DEFAULT_PARAMETER_STORE
from utils.provinces import ProvinceRepository


# =============================================================================
# LOCATIONS (lat, lon)
# =============================================================================

POLAR_POINT = (-70.0, -90.0)          # APLR
WESTERLIES_POINT = (50.0, -30.0)      # NADR
TRADE_WINDS_POINT = (0.0, -120.0)     # PEQD
COASTAL_POINT = (35.0, -124.0)        # CCAL
UNMAPPED_POINT = (-5.0, 65.0)         # XXXX, not in the biome map
LAND_POINT = (15.0, 25.0)             # Sahara, outside every province

BIOME_POINTS = {
    "Polar": POLAR_POINT,
    "Westerlies": WESTERLIES_POINT,
    "Trade-Winds": TRADE_WINDS_POINT,
    "Coastal": COASTAL_POINT,
}

# shapely boxes are (min lon, min lat, max lon, max lat)
TEST_PROVINCES = {
    "APLR": box(-100.0, -75.0, -80.0, -65.0),
    "NADR": box(-40.0, 45.0, -20.0, 55.0),
    "PEQD": box(-140.0, -5.0, -100.0, 5.0),
    "CCAL": box(-130.0, 30.0, -118.0, 40.0),
    "NPTG": box(-160.0, 20.0, -130.0, 35.0),
    "XXXX": box(60.0, -10.0, 70.0, 0.0),
}


@pytest.fixture
def province_repository():
    """In-memory province repository covering one point per biome."""
    return ProvinceRepository.from_polygons(TEST_PROVINCES)


@pytest.fixture
def parameter_store():
    return DEFAULT_PARAMETER_STORE


@pytest.fixture(params=sorted(BIOME_POINTS))
def biome(request):
    """Each configured biome in turn."""
    return request.param
