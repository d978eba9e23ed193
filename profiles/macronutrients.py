"""
Macronutrient profiles: phosphate and silicate.

Phosphate follows a logistic nutricline from its surface to its deep value.
Silicate is always derived from the phosphate value in force (modelled or
measured) plus a deep regeneration term.
"""

import logging
from typing import Optional

from utils.helpers import DepthProfileFunction, clamp_depth, non_negative, normalized_logistic
from utils.parameters import DEFAULT_PARAMETER_STORE, MacronutrientParameters, ParameterStore

from .schemas import MacronutrientState

logger = logging.getLogger(__name__)


def phosphate_profile(params: MacronutrientParameters) -> DepthProfileFunction:
    """Build the depth -> phosphate (umol/kg) function for one biome."""
    surface = params.phosphate_surface_umol_kg
    deep = params.phosphate_deep_umol_kg

    def profile(depth: float) -> float:
        z = clamp_depth(depth)
        transition = normalized_logistic(z, params.phosphate_steepness, params.nutricline_depth_m)
        return non_negative(surface + (deep - surface) * transition)

    return profile


def calculate_silicate(params: MacronutrientParameters, phosphate: float, depth: float) -> float:
    """Si:P times phosphate, plus linear regeneration below the phosphate maximum."""
    z = clamp_depth(depth)
    regeneration = params.silicate_regeneration_slope * max(0.0, z - params.silicate_regeneration_depth_m)
    return non_negative(params.si_to_p * phosphate + regeneration)


def get_macronutrients(
    biome: str,
    depth: float,
    phosphate_override: Optional[float] = None,
    store: ParameterStore = DEFAULT_PARAMETER_STORE,
) -> Optional[MacronutrientState]:
    """
    Phosphate and silicate at depth for a biome.

    Args:
        biome: Biome name
        depth: Depth in m (negative depths are treated as 0)
        phosphate_override: Measured phosphate (umol/kg) used verbatim instead of the nutricline
        store: Parameter tables

    Returns:
        MacronutrientState, or None if the biome has no macronutrient parameters
    """
    params = store.get("macronutrients", biome)
    if params is None:
        logger.error(f"Cannot calculate macronutrients: unknown biome '{biome}'")
        return None

    if phosphate_override is not None:
        phosphate = non_negative(float(phosphate_override))
        logger.debug(f"Using phosphate override {phosphate} umol/kg for {biome}")
    else:
        phosphate = phosphate_profile(params)(depth)

    return MacronutrientState(phosphate=phosphate, silicate=calculate_silicate(params, phosphate, depth))
