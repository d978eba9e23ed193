"""
Helper functions for depth-profile calculations.

Shape functions (logistic transitions, Gaussian peaks, oxygen inhibition) and
the small unit conversions shared by the profile models.
"""

import logging
import math
from typing import Callable, Dict, Mapping

from .constants import SEAWATER_DENSITY_KG_L

logger = logging.getLogger(__name__)

# A pure depth (m) -> concentration function closed over one parameter set
DepthProfileFunction = Callable[[float], float]


def clamp_depth(depth: float) -> float:
    """Negative depths are treated as the surface."""
    return max(0.0, float(depth))


def non_negative(value: float) -> float:
    return max(0.0, value)


def logistic(z: float, steepness: float, midpoint: float) -> float:
    """Standard logistic rising from 0 to 1 around ``midpoint``."""
    x = -steepness * (z - midpoint)
    # exp overflows for very shallow depths with steep transitions
    if x > 700.0:
        return 0.0
    return 1.0 / (1.0 + math.exp(x))


def normalized_logistic(z: float, steepness: float, midpoint: float) -> float:
    """
    Logistic transition rescaled so it is exactly 0 at the surface.

    T(z) = (s(z) - s(0)) / (1 - s(0)), with s the standard logistic. T(0) = 0
    and T tends to 1 at depth, so profiles built on it hit their surface
    constant exactly.

    Args:
        z: Depth in m (>= 0)
        steepness: Logistic steepness (1/m)
        midpoint: Inflection depth in m

    Returns:
        Transition fraction in [0, 1]
    """
    s0 = logistic(0.0, steepness, midpoint)
    return (logistic(z, steepness, midpoint) - s0) / (1.0 - s0)


def smoothstep(z: float, bottom: float) -> float:
    """
    Cubic transition from 0 at the surface to 1 at ``bottom``, flat beyond.

    S(u) = 3u^2 - 2u^3 with u = z / bottom clipped to [0, 1]. Monotonic, with
    zero slope at both ends.
    """
    u = min(max(z / bottom, 0.0), 1.0)
    return u * u * (3.0 - 2.0 * u)


def gaussian(z: float, center: float, width: float) -> float:
    """Unit-height Gaussian bump, exp(-(z - center)^2 / (2 width^2))."""
    return math.exp(-((z - center) ** 2) / (2.0 * width ** 2))


def inhibition_factor(oxygen: float, half_saturation: float) -> float:
    """
    Continuous oxygen inhibition factor for an anaerobic process.

    f = k / (k + O2): 0 in well-oxygenated water, approaching 1 as oxygen
    goes to zero. Replaces discrete oxic/suboxic/anoxic/sulfidic classes.

    Args:
        oxygen: Dissolved oxygen in umol/kg
        half_saturation: Process-specific half-saturation constant in umol/kg

    Returns:
        Factor in [0, 1]
    """
    o2 = max(0.0, oxygen)
    return half_saturation / (half_saturation + o2)


def picomolar_to_umol_kg(conc_pm: float) -> float:
    """Convert pmol/L to umol/kg assuming a seawater density of 1.025 kg/L."""
    conc_mol_kg = (conc_pm * 1e-12) / SEAWATER_DENSITY_KG_L
    return conc_mol_kg * 1e6


def mol_per_liter_to_umol_kg(conc_mol_l: float) -> float:
    return (conc_mol_l * 1e6) / SEAWATER_DENSITY_KG_L


def merge_chemical_states(*states: Mapping[str, float]) -> Dict[str, float]:
    """
    Merge per-model chemical states into one mapping.

    Each model owns a disjoint set of compound keys; a collision means two
    models claim the same compound and is treated as a programming error.

    Raises:
        ValueError: If a compound key appears in more than one state
    """
    merged: Dict[str, float] = {}
    for state in states:
        overlap = merged.keys() & state.keys()
        if overlap:
            raise ValueError(f"Chemical state key collision: {sorted(overlap)}")
        merged.update(state)
    return merged
