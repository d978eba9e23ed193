"""
Longhurst province lookup.

Resolves a (latitude, longitude) point to its biogeochemical province code and
parent biome using province polygons read from a GeoJSON FeatureCollection.
The polygons are loaded once per repository, on first use.
"""

import json
import logging
import os
import threading
from typing import Dict, List, Mapping, Optional, Tuple

from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry

from .exceptions import ProvinceDataError

logger = logging.getLogger(__name__)

# Environment variables naming the province GeoJSON file, in priority order
PROVINCES_PATH_ENV_VARS = ("BIOGEOSEED_PROVINCES_PATH", "LONGHURST_PROVINCES_PATH")

# GeoJSON feature property holding the province code
PROVINCE_CODE_PROPERTY = "ProvCode"

UNKNOWN_BIOME = "Unknown"

# Province code -> parent biome
BIOME_MAP = {
    "APLR": "Polar", "ARCT": "Polar", "ARCH": "Coastal", "BENG": "Coastal",
    "BERS": "Westerlies", "BKPL": "Coastal", "BRAZ": "Coastal", "CALC": "Coastal",
    "CARI": "Coastal", "CHIL": "Coastal", "CHIN": "Coastal", "EAFR": "Coastal",
    "EURA": "Westerlies", "FKLD": "Coastal", "GUIA": "Coastal", "GUIN": "Coastal",
    "GULF": "Coastal", "HUMB": "Coastal", "INDW": "Coastal", "JAVA": "Coastal",
    "KAMS": "Westerlies", "KURO": "Westerlies", "MEDI": "Westerlies", "MONS": "Coastal",
    "NADR": "Westerlies", "NASE": "Coastal", "NASW": "Westerlies", "NATR": "Trade-Winds",
    "NECS": "Coastal", "NEWZ": "Westerlies", "NPPF": "Westerlies", "NPTG": "Trade-Winds",
    "NPTE": "Trade-Winds", "OCEA": "Westerlies", "PEQD": "Trade-Winds", "PNEC": "Coastal",
    "PSAE": "Westerlies", "PSAW": "Westerlies", "REDS": "Coastal", "SANT": "Polar",
    "SATL": "Trade-Winds", "SGS": "Polar", "SOUT": "Westerlies", "SSTC": "Westerlies",
    "SUND": "Coastal", "TAS": "Westerlies", "TASM": "Westerlies", "TEDP": "Trade-Winds",
    "TPLU": "Coastal", "WARM": "Trade-Winds", "WAFR": "Coastal", "ETRA": "Trade-Winds",
    "ANTA": "Polar", "AUSW": "Coastal", "ALSE": "Coastal", "CCAL": "Coastal",
}


def get_default_provinces_path() -> Optional[str]:
    """Province GeoJSON path from the environment, or None if unset."""
    for var in PROVINCES_PATH_ENV_VARS:
        path = os.environ.get(var)
        if path:
            return path
    return None


def load_province_polygons(path: str) -> List[Tuple[str, BaseGeometry]]:
    """
    Read province polygons from a GeoJSON FeatureCollection.

    Args:
        path: Path to the GeoJSON file

    Returns:
        List of (province code, geometry) in file order

    Raises:
        ProvinceDataError: If the file cannot be read or has no usable features
    """
    if not os.path.exists(path):
        raise ProvinceDataError(f"Province data file not found: {path}", path=path)

    try:
        with open(path, "r") as f:
            collection = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ProvinceDataError(f"Could not read province data from {path}: {e}", path=path) from e

    provinces = []
    for feature in collection.get("features", []):
        code = (feature.get("properties") or {}).get(PROVINCE_CODE_PROPERTY)
        geometry = feature.get("geometry")
        if not code or not geometry:
            logger.debug(f"Skipping feature without {PROVINCE_CODE_PROPERTY} or geometry")
            continue
        try:
            provinces.append((code, shape(geometry)))
        except (ValueError, TypeError, AttributeError) as e:
            raise ProvinceDataError(f"Invalid geometry for province {code}: {e}", path=path) from e

    if not provinces:
        raise ProvinceDataError(f"No province features found in {path}", path=path)
    return provinces


class ProvinceRepository:
    """
    Point-in-polygon lookup of Longhurst provinces.

    Either reads its polygons from ``path`` on first lookup, or is built
    directly from in-memory geometries. Lookups are safe to share across
    threads once loaded.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        provinces: Optional[List[Tuple[str, BaseGeometry]]] = None,
        biome_map: Optional[Mapping[str, str]] = None,
    ):
        self.path = path
        self.biome_map: Dict[str, str] = dict(BIOME_MAP if biome_map is None else biome_map)
        self._provinces = list(provinces) if provinces is not None else None
        self._lock = threading.Lock()

    @classmethod
    def from_polygons(
        cls, polygons: Mapping[str, BaseGeometry], biome_map: Optional[Mapping[str, str]] = None
    ) -> "ProvinceRepository":
        return cls(provinces=list(polygons.items()), biome_map=biome_map)

    @property
    def is_loaded(self) -> bool:
        return self._provinces is not None

    def _ensure_loaded(self) -> List[Tuple[str, BaseGeometry]]:
        if self._provinces is not None:
            return self._provinces
        with self._lock:
            if self._provinces is None:
                path = self.path or get_default_provinces_path()
                if not path:
                    raise ProvinceDataError(
                        "No province data configured. Set BIOGEOSEED_PROVINCES_PATH to a "
                        "Longhurst provinces GeoJSON file."
                    )
                logger.info(f"Loading province polygons from {path}")
                self._provinces = load_province_polygons(path)
                self.path = path
                logger.info(f"Loaded {len(self._provinces)} province polygons")
        return self._provinces

    def find_province(self, lat: float, lon: float) -> Optional[str]:
        """Code of the first province covering the point, or None."""
        point = Point(lon, lat)
        for code, geometry in self._ensure_loaded():
            if geometry.covers(point):
                return code
        return None

    def resolve_biome(self, lat: float, lon: float) -> Optional[Tuple[str, str]]:
        """
        Resolve a location to ``(biome, province_code)``.

        Returns None when the point is outside every province (on land or
        outside the dataset). A province whose code has no biome mapping
        resolves to ``"Unknown"``, which no parameter table contains.
        """
        code = self.find_province(lat, lon)
        if code is None:
            logger.info(f"Location ({lat}, {lon}) is not inside any province")
            return None

        biome = self.biome_map.get(code)
        if biome is None:
            logger.error(f"Province '{code}' has no entry in the biome map")
            return UNKNOWN_BIOME, code
        return biome, code


# Process-wide repository used by the tool layer, configured from the environment
province_manager = ProvinceRepository()
