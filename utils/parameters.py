"""
Per-biome parameter tables for every profile model.

The biome name is the join key across all tables. A model that cannot find
its parameter set for a biome fails closed (returns ``None``), which aborts
the whole seed in the assembler.

Canonical OMZ table: the oxygen parameters below are the single authoritative
set (Trade-Winds OMZ core at 500 m, 5 umol/kg).
"""

import logging
from typing import Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, validator

logger = logging.getLogger(__name__)

ProductivityGroup = Literal["productive", "oligotrophic"]


# --- Parameter sets ---


class OxygenParameters(BaseModel):
    """Dissolved-oxygen profile: saturated surface, OMZ core, deep value."""

    model_config = ConfigDict(frozen=True)

    surface_saturation_umol_kg: float = Field(..., ge=0, description="Surface O2 saturation concentration.")
    omz_depth_m: float = Field(..., gt=0, description="Depth of the OMZ core.")
    omz_intensity_umol_kg: float = Field(..., ge=0, description="O2 concentration at the OMZ core.")
    deep_umol_kg: float = Field(..., ge=0, description="Deep-water O2 concentration.")
    omz_width_m: float = Field(..., gt=0, description="Vertical spread of the OMZ.")

    @validator("deep_umol_kg")
    def deep_between_core_and_surface(cls, v, values):
        intensity = values.get("omz_intensity_umol_kg")
        surface = values.get("surface_saturation_umol_kg")
        if intensity is not None and v <= intensity:
            raise ValueError("deep_umol_kg must be above omz_intensity_umol_kg")
        if surface is not None and v > surface:
            raise ValueError("deep_umol_kg must not exceed surface_saturation_umol_kg")
        return v


class MacronutrientParameters(BaseModel):
    """Phosphate sigmoid, Redfield-like ratios and silicate regeneration."""

    model_config = ConfigDict(frozen=True)

    nutricline_depth_m: float = Field(..., ge=0, description="Inflection depth of the phosphacline.")
    phosphate_steepness: float = Field(..., gt=0, description="Steepness of the phosphacline (1/m).")
    phosphate_surface_umol_kg: float = Field(..., ge=0)
    phosphate_deep_umol_kg: float = Field(..., ge=0)
    n_to_p: float = Field(..., ge=0, description="N:P ratio used for potential nitrate.")
    si_to_p: float = Field(..., ge=0, description="Si:P ratio.")
    silicate_regeneration_depth_m: float = Field(
        ..., ge=0, description="Depth below which deep silicate regeneration applies (phosphate maximum)."
    )
    silicate_regeneration_slope: float = Field(..., ge=0, description="Deep silicate regeneration (umol/kg/m).")


class RedoxParameters(BaseModel):
    """Nitrogen, metal and sulfur speciation parameters."""

    model_config = ConfigDict(frozen=True)

    max_denitrification_fraction: float = Field(..., ge=0, le=1)
    # Primary nitrite maximum, near the base of the euphotic zone
    pnm_depth_m: float = Field(..., ge=0)
    pnm_width_m: float = Field(..., gt=0)
    pnm_yield: float = Field(..., ge=0, description="PNM height as a fraction of potential nitrate.")
    # Secondary nitrite maximum, just below the OMZ core
    snm_offset_m: float = Field(..., description="SNM depth relative to the OMZ core.")
    snm_width_scale: float = Field(..., gt=0, description="SNM width as a fraction of the OMZ width.")
    snm_yield: float = Field(..., ge=0, description="SNM height as a fraction of the nitrate deficit.")
    # Ammonium
    ammonium_surface_umol_kg: float = Field(..., ge=0)
    ammonium_peak_umol_kg: float = Field(..., ge=0, description="Ammonium at the shallow remineralization peak.")
    ammonium_peak_depth_m: float = Field(..., ge=0)
    ammonium_peak_width_m: float = Field(..., gt=0)
    ammonium_omz_umol_kg: float = Field(..., ge=0, description="Deep ammonium peak height under full inhibition.")
    # Metals, tabulated in nmol/kg
    iron_oxic_nmol_kg: float = Field(..., ge=0)
    iron_reducing_nmol_kg: float = Field(..., ge=0)
    manganese_oxic_nmol_kg: float = Field(..., ge=0)
    manganese_reducing_nmol_kg: float = Field(..., ge=0)
    # Sulfur
    sulfate_baseline_umol_kg: float = Field(..., ge=0)
    max_sulfate_reduction_fraction: float = Field(..., ge=0, le=1)

    @validator("ammonium_peak_umol_kg")
    def peak_above_surface(cls, v, values):
        surface = values.get("ammonium_surface_umol_kg")
        if surface is not None and v < surface:
            raise ValueError("ammonium_peak_umol_kg must not be below ammonium_surface_umol_kg")
        return v


class MicronutrientParameters(BaseModel):
    """Trace metal : phosphate ratios (mmol/mol) and vitamin concentrations (pM)."""

    model_config = ConfigDict(frozen=True)

    metal_to_phosphate_mmol_mol: Dict[str, float] = Field(...)
    vitamins_pm: Dict[str, float] = Field(...)

    @validator("metal_to_phosphate_mmol_mol")
    def known_metals(cls, v):
        expected = {"Zn", "Cd", "Ni", "Cu", "Co"}
        if set(v) != expected:
            raise ValueError(f"Metal ratios must cover exactly {sorted(expected)}")
        return v

    @validator("vitamins_pm")
    def known_vitamins(cls, v):
        expected = {"B1", "B12"}
        if set(v) != expected:
            raise ValueError(f"Vitamins must cover exactly {sorted(expected)}")
        return v


class OrganicPoolParameters(BaseModel):
    """Exponential decay of a bulk organic carbon pool (umol C/kg)."""

    model_config = ConfigDict(frozen=True)

    surface_umol_kg: float = Field(..., ge=0)
    deep_umol_kg: float = Field(..., ge=0, description="Refractory deep value.")
    efolding_depth_m: float = Field(..., gt=0)


class OrganicMatterParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    doc: OrganicPoolParameters
    poc: OrganicPoolParameters
    productivity: ProductivityGroup = Field(
        ..., description="Euphotic-zone composition group; deeper zones are uniform."
    )


class SeawaterParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    sst_celsius: float = Field(..., ge=-2.5, le=40, description="Sea surface temperature.")
    pco2_atm_uatm: float = Field(..., gt=0, description="Atmospheric CO2 partial pressure.")


# --- Canonical tables ---

OXYGEN_PARAMS = {
    "Polar": OxygenParameters(
        surface_saturation_umol_kg=340.0, omz_depth_m=1000.0, omz_intensity_umol_kg=180.0,
        deep_umol_kg=210.0, omz_width_m=500.0,
    ),  # weak OMZ
    "Westerlies": OxygenParameters(
        surface_saturation_umol_kg=280.0, omz_depth_m=800.0, omz_intensity_umol_kg=80.0,
        deep_umol_kg=150.0, omz_width_m=400.0,
    ),
    "Trade-Winds": OxygenParameters(
        surface_saturation_umol_kg=220.0, omz_depth_m=500.0, omz_intensity_umol_kg=5.0,
        deep_umol_kg=180.0, omz_width_m=300.0,
    ),  # intense OMZ
    "Coastal": OxygenParameters(
        surface_saturation_umol_kg=260.0, omz_depth_m=300.0, omz_intensity_umol_kg=20.0,
        deep_umol_kg=100.0, omz_width_m=150.0,
    ),  # shallow, intense OMZ
}

MACRONUTRIENT_PARAMS = {
    "Polar": MacronutrientParameters(
        nutricline_depth_m=45.0, phosphate_steepness=0.08, phosphate_surface_umol_kg=0.5,
        phosphate_deep_umol_kg=2.5, n_to_p=13.0, si_to_p=40.0,
        silicate_regeneration_depth_m=800.0, silicate_regeneration_slope=0.04,
    ),
    "Westerlies": MacronutrientParameters(
        nutricline_depth_m=60.0, phosphate_steepness=0.06, phosphate_surface_umol_kg=0.1,
        phosphate_deep_umol_kg=2.5, n_to_p=15.5, si_to_p=30.0,
        silicate_regeneration_depth_m=1000.0, silicate_regeneration_slope=0.03,
    ),
    "Trade-Winds": MacronutrientParameters(
        nutricline_depth_m=125.0, phosphate_steepness=0.03, phosphate_surface_umol_kg=0.01,
        phosphate_deep_umol_kg=2.5, n_to_p=23.0, si_to_p=3.0,
        silicate_regeneration_depth_m=1200.0, silicate_regeneration_slope=0.02,
    ),
    "Coastal": MacronutrientParameters(
        nutricline_depth_m=25.0, phosphate_steepness=0.1, phosphate_surface_umol_kg=0.3,
        phosphate_deep_umol_kg=2.5, n_to_p=15.5, si_to_p=20.0,
        silicate_regeneration_depth_m=500.0, silicate_regeneration_slope=0.05,
    ),
}

_REDOX_COMMON = dict(
    iron_oxic_nmol_kg=1.0,
    iron_reducing_nmol_kg=2000.0,
    manganese_oxic_nmol_kg=0.5,
    manganese_reducing_nmol_kg=5000.0,
    sulfate_baseline_umol_kg=28000.0,
    max_sulfate_reduction_fraction=0.1,
)

REDOX_PARAMS = {
    "Polar": RedoxParameters(
        max_denitrification_fraction=0.2,
        pnm_depth_m=60.0, pnm_width_m=20.0, pnm_yield=0.02,
        snm_offset_m=50.0, snm_width_scale=0.2, snm_yield=0.1,
        ammonium_surface_umol_kg=0.2, ammonium_peak_umol_kg=1.0,
        ammonium_peak_depth_m=60.0, ammonium_peak_width_m=25.0, ammonium_omz_umol_kg=0.1,
        **_REDOX_COMMON,
    ),
    "Westerlies": RedoxParameters(
        max_denitrification_fraction=0.5,
        pnm_depth_m=80.0, pnm_width_m=25.0, pnm_yield=0.03,
        snm_offset_m=75.0, snm_width_scale=0.375, snm_yield=0.2,
        ammonium_surface_umol_kg=0.1, ammonium_peak_umol_kg=0.8,
        ammonium_peak_depth_m=80.0, ammonium_peak_width_m=30.0, ammonium_omz_umol_kg=0.3,
        **_REDOX_COMMON,
    ),
    "Trade-Winds": RedoxParameters(
        max_denitrification_fraction=0.9,
        pnm_depth_m=120.0, pnm_width_m=30.0, pnm_yield=0.05,
        snm_offset_m=100.0, snm_width_scale=0.65, snm_yield=0.35,
        ammonium_surface_umol_kg=0.05, ammonium_peak_umol_kg=0.3,
        ammonium_peak_depth_m=120.0, ammonium_peak_width_m=40.0, ammonium_omz_umol_kg=0.8,
        **_REDOX_COMMON,
    ),
    "Coastal": RedoxParameters(
        max_denitrification_fraction=0.8,
        pnm_depth_m=40.0, pnm_width_m=15.0, pnm_yield=0.04,
        snm_offset_m=50.0, snm_width_scale=0.65, snm_yield=0.3,
        ammonium_surface_umol_kg=0.5, ammonium_peak_umol_kg=2.0,
        ammonium_peak_depth_m=50.0, ammonium_peak_width_m=20.0, ammonium_omz_umol_kg=1.0,
        **_REDOX_COMMON,
    ),
}

MICRONUTRIENT_PARAMS = {
    "Polar": MicronutrientParameters(
        metal_to_phosphate_mmol_mol={"Zn": 12.5, "Cd": 0.7, "Ni": 0.7, "Cu": 1.75, "Co": 0.15},
        vitamins_pm={"B1": 50.0, "B12": 0.8},
    ),
    "Westerlies": MicronutrientParameters(
        metal_to_phosphate_mmol_mol={"Zn": 6.5, "Cd": 0.3, "Ni": 1.2, "Cu": 0.4, "Co": 0.15},
        vitamins_pm={"B1": 40.0, "B12": 1.0},
    ),
    "Trade-Winds": MicronutrientParameters(
        metal_to_phosphate_mmol_mol={"Zn": 4.5, "Cd": 0.4, "Ni": 1.0, "Cu": 0.3, "Co": 0.15},
        vitamins_pm={"B1": 20.0, "B12": 2.0},
    ),
    "Coastal": MicronutrientParameters(
        metal_to_phosphate_mmol_mol={"Zn": 5.5, "Cd": 0.2, "Ni": 0.85, "Cu": 0.3, "Co": 0.15},
        vitamins_pm={"B1": 120.0, "B12": 20.0},
    ),
}

ORGANIC_PARAMS = {
    "Polar": OrganicMatterParameters(
        doc=OrganicPoolParameters(surface_umol_kg=60.0, deep_umol_kg=40.0, efolding_depth_m=100.0),
        poc=OrganicPoolParameters(surface_umol_kg=5.0, deep_umol_kg=0.1, efolding_depth_m=150.0),
        productivity="productive",
    ),
    "Westerlies": OrganicMatterParameters(
        doc=OrganicPoolParameters(surface_umol_kg=65.0, deep_umol_kg=40.0, efolding_depth_m=120.0),
        poc=OrganicPoolParameters(surface_umol_kg=6.0, deep_umol_kg=0.1, efolding_depth_m=180.0),
        productivity="productive",
    ),
    "Trade-Winds": OrganicMatterParameters(
        doc=OrganicPoolParameters(surface_umol_kg=50.0, deep_umol_kg=40.0, efolding_depth_m=200.0),
        poc=OrganicPoolParameters(surface_umol_kg=2.0, deep_umol_kg=0.1, efolding_depth_m=250.0),
        productivity="oligotrophic",
    ),
    "Coastal": OrganicMatterParameters(
        doc=OrganicPoolParameters(surface_umol_kg=80.0, deep_umol_kg=45.0, efolding_depth_m=80.0),
        poc=OrganicPoolParameters(surface_umol_kg=15.0, deep_umol_kg=0.2, efolding_depth_m=100.0),
        productivity="productive",
    ),
}

SEAWATER_PARAMS = {
    "Polar": SeawaterParameters(sst_celsius=-1.0, pco2_atm_uatm=410.0),
    "Westerlies": SeawaterParameters(sst_celsius=15.0, pco2_atm_uatm=420.0),
    "Trade-Winds": SeawaterParameters(sst_celsius=25.0, pco2_atm_uatm=415.0),
    "Coastal": SeawaterParameters(sst_celsius=18.0, pco2_atm_uatm=425.0),
}

# Table names, in cascade order
MODEL_TABLES = ("oxygen", "macronutrients", "redox", "micronutrients", "organic_matter", "seawater")


class ParameterStore:
    """
    Read-only lookup of per-biome parameter sets, one table per model.

    Example::

        store = ParameterStore({"oxygen": {"Polar": OxygenParameters(...)}, ...})
        params = store.get("oxygen", "Polar")   # None if absent
    """

    def __init__(self, tables: Mapping[str, Mapping[str, BaseModel]]):
        unknown = set(tables) - set(MODEL_TABLES)
        if unknown:
            raise ValueError(f"Unknown parameter tables: {sorted(unknown)}")
        self._tables = {name: dict(tables.get(name, {})) for name in MODEL_TABLES}

    def get(self, table: str, biome: str) -> Optional[BaseModel]:
        """Return the parameter set for ``biome`` in ``table``, or None (logged)."""
        params = self._tables.get(table, {}).get(biome)
        if params is None:
            logger.debug(f"No '{table}' parameters for biome: {biome}")
        return params

    def has(self, table: str, biome: str) -> bool:
        return biome in self._tables.get(table, {})

    def missing_tables(self, biome: str, tables=MODEL_TABLES) -> List[str]:
        """Tables (of those given) that have no entry for ``biome``."""
        return [name for name in tables if not self.has(name, biome)]

    def biomes(self) -> List[str]:
        """Biomes present in every table."""
        common = None
        for table in self._tables.values():
            common = set(table) if common is None else common & set(table)
        return sorted(common or [])

    def without_biome(self, table: str, biome: str) -> "ParameterStore":
        """Copy of this store with ``biome`` removed from one table."""
        tables = {name: dict(entries) for name, entries in self._tables.items()}
        tables[table].pop(biome, None)
        return ParameterStore(tables)


DEFAULT_PARAMETER_STORE = ParameterStore({
    "oxygen": OXYGEN_PARAMS,
    "macronutrients": MACRONUTRIENT_PARAMS,
    "redox": REDOX_PARAMS,
    "micronutrients": MICRONUTRIENT_PARAMS,
    "organic_matter": ORGANIC_PARAMS,
    "seawater": SEAWATER_PARAMS,
})
