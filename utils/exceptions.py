"""
Custom exceptions for the BioGeoSeed profile engine.

The numeric profile models never raise for ordinary control flow: an unknown
biome or a missing upstream key is reported through a ``None`` sentinel and the
assembler aborts the whole seed. These exceptions are raised at the outer
surfaces (tool functions, MCP server, province data loading) where the
"FAIL LOUDLY" convention applies:
- Invalid requests raise typed exceptions
- A failed seed is never returned as a partial result
- No returning {"error": ...} patterns
- Exceptions are converted to MCP isError=True by FastMCP

Exception Hierarchy:
    BioGeoSeedError (base)
    ├── InputValidationError
    ├── ProvinceDataError
    └── SeedGenerationError
        ├── LocationNotResolvedError
        ├── UnknownBiomeError
        └── MissingDependencyKeyError
"""

from typing import Any, Dict, List, Optional


class BioGeoSeedError(Exception):
    """Base exception for all BioGeoSeed errors.

    All exceptions in this module inherit from this class,
    allowing for broad exception handling when needed.
    """
    pass


class InputValidationError(BioGeoSeedError):
    """Invalid input data provided to a tool.

    Raised when:
    - Required fields are missing
    - Latitude or longitude are out of range
    - Override values are negative or of the wrong type
    """
    pass


class ProvinceDataError(BioGeoSeedError):
    """The province polygon dataset could not be loaded.

    This is a configuration fault (missing or unreadable file), distinct
    from a location that simply falls outside every province.

    Attributes:
        path: The dataset path that was tried
    """
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


# =============================================================================
# Seed Generation Errors
# =============================================================================

class SeedGenerationError(BioGeoSeedError):
    """A seed could not be generated; no partial result exists.

    Attributes:
        stage: The cascade stage that failed (e.g. 'province', 'oxygen')
        category: Failure category ('unknown_biome', 'missing_dependency_key',
            'location_not_resolved')
        biome: The biome in force when the stage failed, if any
        latitude: Requested latitude
        longitude: Requested longitude
        depth_m: Requested depth
    """
    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        category: Optional[str] = None,
        biome: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        depth_m: Optional[float] = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.category = category
        self.biome = biome
        self.latitude = latitude
        self.longitude = longitude
        self.depth_m = depth_m

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured error reporting."""
        return {
            "error_type": "seed_generation_error",
            "stage": self.stage,
            "category": self.category,
            "biome": self.biome,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "depth_m": self.depth_m,
            "message": str(self),
        }


class LocationNotResolvedError(SeedGenerationError):
    """The location is not inside any province (on land or outside coverage)."""
    pass


class UnknownBiomeError(SeedGenerationError):
    """A cascade stage has no parameter set for the resolved biome.

    Attributes:
        missing_tables: Parameter tables that lack the biome
    """
    def __init__(self, message: str, missing_tables: Optional[List[str]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing_tables = missing_tables or []


class MissingDependencyKeyError(SeedGenerationError):
    """A downstream stage received upstream results without an expected key."""
    pass


EXCEPTIONS_BY_CATEGORY = {
    "location_not_resolved": LocationNotResolvedError,
    "unknown_biome": UnknownBiomeError,
    "missing_dependency_key": MissingDependencyKeyError,
}
