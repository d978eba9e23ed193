"""
Trace metals and vitamins.

Zn, Cd, Ni, Cu and Co are proxied from phosphate by per-biome metal:P ratios.
B1 and B12 are fixed per-biome concentrations converted from picomolar.
"""

import logging
from typing import Mapping, Optional

from utils.constants import MMOL_PER_MOL_TO_MOL_PER_MOL
from utils.helpers import non_negative, picomolar_to_umol_kg
from utils.parameters import DEFAULT_PARAMETER_STORE, ParameterStore

from .schemas import MicronutrientState

logger = logging.getLogger(__name__)


def get_micronutrients(
    biome: str, macronutrients: Mapping[str, float], store: ParameterStore = DEFAULT_PARAMETER_STORE
) -> Optional[MicronutrientState]:
    """
    Micronutrients from the macronutrient state in force.

    Args:
        biome: Biome name
        macronutrients: Chemical state containing a "phosphate" entry (umol/kg)
        store: Parameter tables

    Returns:
        MicronutrientState, or None for an unknown biome or a missing phosphate key
    """
    params = store.get("micronutrients", biome)
    if params is None:
        logger.error(f"Cannot calculate micronutrients: unknown biome '{biome}'")
        return None

    if "phosphate" not in macronutrients:
        logger.error("Cannot calculate micronutrients: macronutrient state has no 'phosphate' key")
        return None
    phosphate = macronutrients["phosphate"]

    values = {
        metal: non_negative(ratio * MMOL_PER_MOL_TO_MOL_PER_MOL * phosphate)
        for metal, ratio in params.metal_to_phosphate_mmol_mol.items()
    }
    for vitamin, conc_pm in params.vitamins_pm.items():
        values[vitamin] = picomolar_to_umol_kg(conc_pm)

    return MicronutrientState(**values)
