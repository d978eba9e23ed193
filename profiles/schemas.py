"""
Schemas for seed generation: per-model chemical states, requests and results.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, root_validator, validator

# --- Per-model chemical states ---


class MacronutrientState(BaseModel):
    """Phosphate and silicate at one depth (umol/kg)."""

    model_config = ConfigDict(frozen=True)

    phosphate: float = Field(..., ge=0)
    silicate: float = Field(..., ge=0)

    def as_chemical_state(self) -> Dict[str, float]:
        return {"phosphate": self.phosphate, "silicate": self.silicate}


class RedoxState(BaseModel):
    """Nitrogen, metal and sulfur speciation at one depth (umol/kg)."""

    model_config = ConfigDict(frozen=True)

    nitrate: float = Field(..., ge=0)
    nitrite: float = Field(..., ge=0)
    ammonium: float = Field(..., ge=0)
    iron: float = Field(..., ge=0)
    manganese: float = Field(..., ge=0)
    sulfate: float = Field(..., ge=0)
    sulfide: float = Field(..., ge=0)
    # Diagnostics, not exported as compounds
    potential_nitrate: float = Field(..., ge=0, description="Nitrate implied by phosphate absent redox loss.")
    nitrate_deficit: float = Field(..., ge=0, description="Nitrate removed by denitrification at this depth.")
    anammox_sink: float = Field(..., ge=0, description="Nitrite/ammonium consumed by anammox.")

    def as_chemical_state(self) -> Dict[str, float]:
        return {
            "nitrate": self.nitrate,
            "nitrite": self.nitrite,
            "ammonium": self.ammonium,
            "iron": self.iron,
            "manganese": self.manganese,
            "sulfate": self.sulfate,
            "sulfide": self.sulfide,
        }


class MicronutrientState(BaseModel):
    """Trace metals and vitamins (umol/kg)."""

    model_config = ConfigDict(frozen=True)

    Zn: float = Field(..., ge=0)
    Cd: float = Field(..., ge=0)
    Ni: float = Field(..., ge=0)
    Cu: float = Field(..., ge=0)
    Co: float = Field(..., ge=0)
    B1: float = Field(..., ge=0)
    B12: float = Field(..., ge=0)

    def as_chemical_state(self) -> Dict[str, float]:
        return self.model_dump()


class OrganicMatterState(BaseModel):
    """
    Bulk organic pools and their biochemical breakdown (umol C/kg).

    Class and monomer breakdowns are kept per pool. The exported chemical state
    sums dissolved and particulate carbon for each monomer.
    """

    model_config = ConfigDict(frozen=True)

    zone: str = Field(..., description="Depth zone: euphotic, mesopelagic or deep.")
    DOC_total: float = Field(..., ge=0)
    POC_total: float = Field(..., ge=0)
    DON: float = Field(..., ge=0)
    DOP: float = Field(..., ge=0)
    dissolved_classes: Dict[str, float]
    particulate_classes: Dict[str, float]
    dissolved_monomers: Dict[str, float]
    particulate_monomers: Dict[str, float]

    def monomer_totals(self) -> Dict[str, float]:
        totals = dict(self.dissolved_monomers)
        for monomer, value in self.particulate_monomers.items():
            totals[monomer] = totals.get(monomer, 0.0) + value
        return totals

    def as_chemical_state(self) -> Dict[str, float]:
        state = self.monomer_totals()
        state["DON"] = self.DON
        state["DOP"] = self.DOP
        return state


class SeawaterState(BaseModel):
    """Carbonate chemistry at one depth."""

    model_config = ConfigDict(frozen=True)

    pH: float
    dissolved_co2: float = Field(..., ge=0, description="Equilibrium plus respired CO2 (umol/kg).")
    temperature_celsius: float = Field(..., description="Temperature used (SST or override).")
    pco2_uatm: float = Field(..., gt=0)
    aou: float = Field(..., description="Apparent oxygen utilization (umol/kg), unclamped.")

    def as_chemical_state(self) -> Dict[str, float]:
        return {"dissolved_co2": self.dissolved_co2}


# --- Requests ---


class SeedOverrides(BaseModel):
    """Measured values substituted for the internal profile models. Unknown keys are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    oxygen: Optional[float] = Field(None, ge=0, description="Dissolved O2 in umol/kg.")
    phosphate: Optional[float] = Field(None, ge=0, description="Phosphate in umol/kg.")
    temperature: Optional[float] = Field(None, description="Temperature in Celsius.")


class SeedRequest(BaseModel):
    """A single seed request: location, depth and optional overrides."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees.")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees.")
    depth: float = Field(0.0, description="Depth in m. Negative values are treated as the surface.")
    overrides: SeedOverrides = Field(default_factory=SeedOverrides)

    @root_validator(pre=True, skip_on_failure=True)
    def handle_aliases(cls, values):
        """Accept 'lat', 'lon', 'depth_m' and 'user_data' as aliases."""
        if not isinstance(values, dict):
            return values
        values = dict(values)
        for alias, field in (("lat", "latitude"), ("lon", "longitude"), ("depth_m", "depth"), ("user_data", "overrides")):
            if alias in values and field not in values:
                values[field] = values.pop(alias)
        if values.get("overrides") is None:
            values.pop("overrides", None)
        return values


class GenerateSeedInput(SeedRequest):
    """Input for the generate_environmental_seed tool."""


class GenerateProfileInput(BaseModel):
    """Input for the generate_depth_profile tool."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    solutes: List[str] = Field(
        ..., min_length=1, description="Canonical ids (e.g. 'no3_e') or metadata fields (e.g. 'pH') to collect."
    )
    max_depth: float = Field(1000.0, ge=0, description="Deepest depth of the sweep in m (inclusive).")
    depth_step: float = Field(50.0, gt=0, description="Depth increment in m.")
    overrides: SeedOverrides = Field(default_factory=SeedOverrides)

    @root_validator(pre=True, skip_on_failure=True)
    def handle_aliases(cls, values):
        if not isinstance(values, dict):
            return values
        values = dict(values)
        for alias, field in (("lat", "latitude"), ("lon", "longitude"), ("user_data", "overrides")):
            if alias in values and field not in values:
                values[field] = values.pop(alias)
        if values.get("overrides") is None:
            values.pop("overrides", None)
        return values

    @validator("solutes")
    def strip_solutes(cls, v):
        cleaned = [s.strip() for s in v if s and s.strip()]
        if not cleaned:
            raise ValueError("At least one solute must be requested")
        return cleaned


# --- Results ---


class SeedMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    depth_m: float = Field(..., description="Depth the seed was evaluated at (negative depths clamp to 0).")
    province_code: str
    biome: str
    pH: float
    DOC_total_umolC_kg: float
    POC_total_umolC_kg: float
    units: str


class StandardizedSeed(BaseModel):
    """
    Concentrations keyed by canonical metabolite id plus a metadata record.

    Behaves like a read-only mapping over the concentrations::

        seed["no3_e"], "o2_e" in seed, seed.get("h2s_e", 0.0)

    The concentrations are held in a read-only view; use ``to_dict`` for a
    mutable copy.
    """

    model_config = ConfigDict(frozen=True)

    concentrations: Mapping[str, float]
    metadata: SeedMetadata

    @validator("concentrations")
    def read_only_concentrations(cls, v):
        return MappingProxyType(dict(v))

    def __getitem__(self, key: str) -> float:
        return self.concentrations[key]

    def __contains__(self, key: object) -> bool:
        return key in self.concentrations

    def keys(self):
        return self.concentrations.keys()

    def get(self, key: str, default: Optional[float] = None) -> Optional[float]:
        return self.concentrations.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping of concentrations with a nested 'metadata' entry."""
        result: Dict[str, Any] = dict(self.concentrations)
        result["metadata"] = self.metadata.model_dump()
        return result


class FailureCategory(str, Enum):
    UNKNOWN_BIOME = "unknown_biome"
    MISSING_DEPENDENCY_KEY = "missing_dependency_key"
    LOCATION_NOT_RESOLVED = "location_not_resolved"
    INVALID_REQUEST = "invalid_request"


class SeedFailure(BaseModel):
    """Why a seed could not be produced."""

    model_config = ConfigDict(frozen=True)

    stage: str = Field(..., description="Cascade stage that failed (e.g. 'province', 'redox').")
    category: FailureCategory
    message: str
    biome: Optional[str] = None


class SeedOutcome(BaseModel):
    """Either a complete seed or a failure, never both."""

    model_config = ConfigDict(frozen=True)

    seed: Optional[StandardizedSeed] = None
    failure: Optional[SeedFailure] = None

    @property
    def ok(self) -> bool:
        return self.seed is not None


class DepthProfile(BaseModel):
    """Selected solutes sampled over a depth sweep at one location."""

    latitude: float
    longitude: float
    biome: str
    province_code: str
    depths: List[float]
    values: Dict[str, List[float]] = Field(..., description="Solute -> value at each depth in 'depths'.")

    def records(self) -> List[Dict[str, float]]:
        """One row per depth: {'depth': ..., solute: value, ...}."""
        rows = []
        for i, depth in enumerate(self.depths):
            row = {"depth": depth}
            for solute, series in self.values.items():
                row[solute] = series[i]
            rows.append(row)
        return rows
