"""
Seawater carbonate chemistry: pH and dissolved CO2.

Dissolved CO2 is the Henry's-law equilibrium with atmospheric pCO2 plus CO2
released by respiration, estimated from apparent oxygen utilization (AOU).
pH is an empirical linear function of pCO2 and temperature.
"""

import logging
import math
from typing import Optional

from utils.constants import (
    HENRY_CO2_TEMPERATURE_SLOPE_K,
    HENRY_K0_CO2_298,
    KELVIN_OFFSET,
    PH_BASELINE,
    PH_PCO2_REFERENCE_UATM,
    PH_PCO2_SLOPE,
    PH_TEMPERATURE_REFERENCE_C,
    PH_TEMPERATURE_SLOPE,
    REFERENCE_TEMPERATURE_K,
    RESPIRATORY_C_TO_O2,
)
from utils.helpers import mol_per_liter_to_umol_kg
from utils.parameters import DEFAULT_PARAMETER_STORE, ParameterStore

from .schemas import SeawaterState

logger = logging.getLogger(__name__)


def henry_constant_co2(temperature_celsius: float) -> float:
    """CO2 solubility K0 in mol/L/atm (van't Hoff form around 25 C)."""
    temperature_k = temperature_celsius + KELVIN_OFFSET
    return HENRY_K0_CO2_298 * math.exp(
        HENRY_CO2_TEMPERATURE_SLOPE_K * (1.0 / temperature_k - 1.0 / REFERENCE_TEMPERATURE_K)
    )


def equilibrium_co2(temperature_celsius: float, pco2_uatm: float) -> float:
    """Dissolved CO2 (umol/kg) in equilibrium with the atmosphere."""
    return mol_per_liter_to_umol_kg(henry_constant_co2(temperature_celsius) * pco2_uatm * 1e-6)


def respired_co2(aou: float) -> float:
    """CO2 (umol/kg) produced by the respiration that consumed ``aou`` of oxygen."""
    return RESPIRATORY_C_TO_O2 * max(0.0, aou)


def calculate_ph(pco2_uatm: float, temperature_celsius: float) -> float:
    ph = (
        PH_BASELINE
        + PH_PCO2_SLOPE * (pco2_uatm - PH_PCO2_REFERENCE_UATM)
        + PH_TEMPERATURE_SLOPE * (temperature_celsius - PH_TEMPERATURE_REFERENCE_C)
    )
    return round(ph, 2)


def get_seawater_chemistry(
    biome: str,
    oxygen_at_depth: float,
    temperature: Optional[float] = None,
    store: ParameterStore = DEFAULT_PARAMETER_STORE,
) -> Optional[SeawaterState]:
    """
    pH and dissolved CO2 for a biome.

    Args:
        biome: Biome name
        oxygen_at_depth: O2 in force at the depth (umol/kg), used for AOU
        temperature: Temperature override in Celsius; defaults to the biome SST
        store: Parameter tables

    Returns:
        SeawaterState, or None if the biome is missing from the seawater or oxygen tables
    """
    params = store.get("seawater", biome)
    oxygen_params = store.get("oxygen", biome)
    if params is None or oxygen_params is None:
        logger.error(f"Cannot calculate seawater chemistry: unknown biome '{biome}'")
        return None

    temperature_c = params.sst_celsius if temperature is None else float(temperature)
    aou = oxygen_params.surface_saturation_umol_kg - oxygen_at_depth

    return SeawaterState(
        pH=calculate_ph(params.pco2_atm_uatm, temperature_c),
        dissolved_co2=equilibrium_co2(temperature_c, params.pco2_atm_uatm) + respired_co2(aou),
        temperature_celsius=temperature_c,
        pco2_uatm=params.pco2_atm_uatm,
        aou=aou,
    )
