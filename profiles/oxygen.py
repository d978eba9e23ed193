"""
Dissolved oxygen profile: the master variable of the cascade.

The profile is a smooth transition from surface saturation to the deep value,
completed at the oxygen minimum zone (OMZ) core, minus a Gaussian depression
centred on that core. The transition is lifted near the surface by the tail of
the depression so that the profile equals the surface saturation at 0 m and
the configured OMZ intensity at the core, both in closed form.

The baseline never drops below the deep value and the depression never exceeds
its height at the core, so the core is the minimum of the whole profile.
"""

import logging
from typing import Optional

from utils.helpers import DepthProfileFunction, clamp_depth, gaussian, non_negative, smoothstep
from utils.parameters import DEFAULT_PARAMETER_STORE, OxygenParameters, ParameterStore

logger = logging.getLogger(__name__)


def omz_depression_magnitude(params: OxygenParameters) -> float:
    """
    Height A of the Gaussian depression.

    Solves O2(z_omz) = omz_intensity for
    O2(z) = deep + (surface + A*G(0) - deep) * (1 - S(z)) - A*G(z),
    where S(z_omz) = 1 and G(z_omz) = 1.
    """
    return params.deep_umol_kg - params.omz_intensity_umol_kg


def oxygen_profile(params: OxygenParameters) -> DepthProfileFunction:
    """Build the depth -> O2 (umol/kg) function for one biome."""
    deep = params.deep_umol_kg
    z_omz = params.omz_depth_m
    width = params.omz_width_m
    magnitude = omz_depression_magnitude(params)
    lifted_surface = params.surface_saturation_umol_kg + magnitude * gaussian(0.0, z_omz, width)

    def profile(depth: float) -> float:
        z = clamp_depth(depth)
        baseline = deep + (lifted_surface - deep) * (1.0 - smoothstep(z, z_omz))
        return non_negative(baseline - magnitude * gaussian(z, z_omz, width))

    return profile


def calculate_oxygen(
    biome: str, depth: float, store: ParameterStore = DEFAULT_PARAMETER_STORE
) -> Optional[float]:
    """
    Dissolved oxygen at depth for a biome.

    Args:
        biome: Biome name
        depth: Depth in m (negative depths are treated as 0)
        store: Parameter tables

    Returns:
        O2 in umol/kg, or None if the biome has no oxygen parameters
    """
    params = store.get("oxygen", biome)
    if params is None:
        logger.error(f"Cannot calculate oxygen: unknown biome '{biome}'")
        return None
    return oxygen_profile(params)(depth)
