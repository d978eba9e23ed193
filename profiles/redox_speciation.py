"""
Redox-sensitive speciation driven by dissolved oxygen.

Every anaerobic process is weighted by a continuous oxygen inhibition factor
f(O2, k) = k / (k + O2) with its own half-saturation constant, so nitrogen,
metal and sulfur species vary smoothly with oxygen. There is no discrete
oxic/suboxic/anoxic classification.

Nitrogen:
- Nitrate is potential nitrate (N:P times phosphate) minus a denitrification
  deficit centred on the OMZ core.
- Nitrite is a primary maximum near the base of the euphotic zone plus a
  secondary maximum below the OMZ core whose height scales with the deficit.
- Ammonium is a shallow remineralization peak plus an OMZ peak where
  nitrification is suppressed.
- Anammox consumes nitrite and ammonium jointly.
"""

import logging
from typing import Optional, Tuple

from utils.constants import (
    ANAMMOX_RATE_CONSTANT,
    K_DENITRIFICATION,
    K_METAL_REDUCTION,
    K_SULFATE_REDUCTION,
    NMOL_TO_UMOL,
)
from utils.helpers import clamp_depth, gaussian, inhibition_factor, non_negative
from utils.parameters import DEFAULT_PARAMETER_STORE, OxygenParameters, ParameterStore, RedoxParameters

from .schemas import RedoxState

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("macronutrients", "oxygen", "redox")


def nitrate_deficit(
    potential_nitrate: float, params: RedoxParameters, omz: OxygenParameters, f_denit: float, depth: float
) -> Tuple[float, float]:
    """
    Denitrification loss at depth.

    Returns:
        (deficit magnitude at the OMZ core, deficit at this depth)
    """
    magnitude = potential_nitrate * params.max_denitrification_fraction * f_denit
    return magnitude, magnitude * gaussian(depth, omz.omz_depth_m, omz.omz_width_m)


def nitrite_peaks(
    potential_nitrate: float, deficit_magnitude: float, params: RedoxParameters, omz: OxygenParameters, depth: float
) -> float:
    """Primary plus secondary nitrite maximum, before anammox."""
    primary = potential_nitrate * params.pnm_yield * gaussian(depth, params.pnm_depth_m, params.pnm_width_m)
    snm_depth = omz.omz_depth_m + params.snm_offset_m
    snm_width = params.snm_width_scale * omz.omz_width_m
    secondary = params.snm_yield * deficit_magnitude * gaussian(depth, snm_depth, snm_width)
    return primary + secondary


def ammonium_peaks(params: RedoxParameters, omz: OxygenParameters, f_denit: float, depth: float) -> float:
    """Shallow remineralization peak plus the OMZ peak, before anammox."""
    peak_height = params.ammonium_peak_umol_kg - params.ammonium_surface_umol_kg
    shallow = params.ammonium_surface_umol_kg + peak_height * gaussian(
        depth, params.ammonium_peak_depth_m, params.ammonium_peak_width_m
    )
    omz_peak = params.ammonium_omz_umol_kg * f_denit * gaussian(depth, omz.omz_depth_m, omz.omz_width_m)
    return shallow + omz_peak


def apply_anammox(
    nitrite: float, ammonium: float, f_denit: float, rate_constant: float = ANAMMOX_RATE_CONSTANT
) -> Tuple[float, float, float]:
    """
    Bimolecular anammox sink on nitrite and ammonium.

    The sink k * NO2 * NH4 * f(O2, k_denit) is subtracted from both pools,
    which are then clamped at zero.

    Returns:
        (nitrite, ammonium, sink)
    """
    sink = rate_constant * nitrite * ammonium * f_denit
    return non_negative(nitrite - sink), non_negative(ammonium - sink), sink


def reduced_metal(oxic_nmol_kg: float, reducing_nmol_kg: float, f_metal: float) -> float:
    """Dissolved reduced metal, interpolated by inhibition, in umol/kg."""
    return non_negative(oxic_nmol_kg + (reducing_nmol_kg - oxic_nmol_kg) * f_metal) * NMOL_TO_UMOL


def get_redox_sensitive_species(
    biome: str,
    oxygen: float,
    phosphate: float,
    depth: float,
    store: ParameterStore = DEFAULT_PARAMETER_STORE,
) -> Optional[RedoxState]:
    """
    Redox-sensitive species at depth from the oxygen and phosphate in force.

    Args:
        biome: Biome name
        oxygen: Dissolved O2 in umol/kg (modelled or measured)
        phosphate: Phosphate in umol/kg (modelled or measured)
        depth: Depth in m (negative depths are treated as 0)
        store: Parameter tables

    Returns:
        RedoxState, or None if the biome is missing from the macronutrient,
        oxygen or redox parameter tables
    """
    missing = store.missing_tables(biome, REQUIRED_TABLES)
    if missing:
        logger.error(f"Cannot calculate redox species: biome '{biome}' missing from {missing}")
        return None

    macro = store.get("macronutrients", biome)
    omz = store.get("oxygen", biome)
    params = store.get("redox", biome)
    z = clamp_depth(depth)

    f_denit = inhibition_factor(oxygen, K_DENITRIFICATION)
    f_metal = inhibition_factor(oxygen, K_METAL_REDUCTION)
    f_sulfate = inhibition_factor(oxygen, K_SULFATE_REDUCTION)

    potential_nitrate = macro.n_to_p * max(0.0, phosphate)
    deficit_magnitude, deficit = nitrate_deficit(potential_nitrate, params, omz, f_denit, z)
    nitrate = non_negative(potential_nitrate - deficit)

    nitrite, ammonium, sink = apply_anammox(
        nitrite_peaks(potential_nitrate, deficit_magnitude, params, omz, z),
        ammonium_peaks(params, omz, f_denit, z),
        f_denit,
    )

    sulfide = params.sulfate_baseline_umol_kg * params.max_sulfate_reduction_fraction * f_sulfate
    sulfate = non_negative(params.sulfate_baseline_umol_kg - sulfide)

    logger.debug(
        f"Redox at {z} m ({biome}): O2={oxygen:.3f}, f_denit={f_denit:.4f}, "
        f"NO3={nitrate:.3f}, NO2={nitrite:.4f}, NH4={ammonium:.4f}"
    )

    return RedoxState(
        nitrate=nitrate,
        nitrite=nitrite,
        ammonium=ammonium,
        iron=reduced_metal(params.iron_oxic_nmol_kg, params.iron_reducing_nmol_kg, f_metal),
        manganese=reduced_metal(params.manganese_oxic_nmol_kg, params.manganese_reducing_nmol_kg, f_metal),
        sulfate=sulfate,
        sulfide=non_negative(sulfide),
        potential_nitrate=potential_nitrate,
        nitrate_deficit=deficit,
        anammox_sink=sink,
    )
