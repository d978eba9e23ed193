"""
Tools for generating environmental seeds and depth profiles.

FAIL LOUDLY: This module raises typed exceptions on errors.
No silent fallbacks or returning {"error": ...} patterns.

The tools resolve locations with the process-wide province repository and run
the cascade with the default parameter tables.
"""

import logging
from typing import Any, Dict

from utils.exceptions import (
    EXCEPTIONS_BY_CATEGORY,
    InputValidationError,
    SeedGenerationError,
    UnknownBiomeError,
)
from utils.parameters import DEFAULT_PARAMETER_STORE
from utils import provinces

from .assembler import assemble_seed, generate_profile
from .schemas import GenerateProfileInput, GenerateSeedInput, SeedFailure, SeedRequest

logger = logging.getLogger(__name__)


def _raise_for_failure(failure: SeedFailure, request: SeedRequest) -> None:
    exc_class = EXCEPTIONS_BY_CATEGORY.get(failure.category.value, SeedGenerationError)
    kwargs = dict(
        stage=failure.stage,
        category=failure.category.value,
        biome=failure.biome,
        latitude=request.latitude,
        longitude=request.longitude,
        depth_m=request.depth,
    )
    if exc_class is UnknownBiomeError:
        missing = DEFAULT_PARAMETER_STORE.missing_tables(failure.biome) if failure.biome else []
        raise UnknownBiomeError(failure.message, missing_tables=missing, **kwargs)
    raise exc_class(failure.message, **kwargs)


async def generate_environmental_seed(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Generate a standardized marine chemistry seed for a location and depth.

    Args:
        input_data: Dictionary containing:
            - latitude (or lat): Latitude in decimal degrees
            - longitude (or lon): Longitude in decimal degrees
            - depth (or depth_m): Depth in m (optional, default 0)
            - overrides (or user_data): Measured values to use instead of the
              internal models, any of 'oxygen' (umol/kg), 'phosphate' (umol/kg)
              and 'temperature' (C) (optional)

    Returns:
        Dictionary of concentrations (umol/kg) keyed by canonical metabolite id,
        with a nested 'metadata' entry

    Raises:
        InputValidationError: If input validation fails
        LocationNotResolvedError: If the location is not in any province
        UnknownBiomeError: If the resolved biome has no parameters
        ProvinceDataError: If the province dataset cannot be loaded
    """
    logger.info("Running generate_environmental_seed tool...")

    try:
        input_model = GenerateSeedInput(**input_data)
    except Exception as e:
        raise InputValidationError(f"Input validation error: {e}")

    outcome = assemble_seed(input_model, provinces.province_manager, store=DEFAULT_PARAMETER_STORE)
    if outcome.failure is not None:
        _raise_for_failure(outcome.failure, input_model)

    logger.info("generate_environmental_seed tool finished successfully.")
    return outcome.seed.to_dict()


async def generate_depth_profile(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sample selected solutes over a depth sweep at one location.

    Args:
        input_data: Dictionary containing:
            - latitude (or lat), longitude (or lon): Location
            - solutes: Canonical ids (e.g. 'no3_e', 'o2_e') or numeric metadata
              fields (e.g. 'pH') to collect
            - max_depth: Deepest depth in m (optional, default 1000)
            - depth_step: Depth increment in m (optional, default 50)
            - overrides: As for generate_environmental_seed (optional)

    Returns:
        Dictionary with 'depths' and per-solute 'values' lists plus location,
        biome and province code

    Raises:
        InputValidationError: If input validation fails
        SeedGenerationError: If the seed fails at any depth
    """
    logger.info("Running generate_depth_profile tool...")

    try:
        input_model = GenerateProfileInput(**input_data)
    except Exception as e:
        raise InputValidationError(f"Input validation error: {e}")

    profile = generate_profile(
        input_model.latitude,
        input_model.longitude,
        provinces.province_manager,
        input_model.solutes,
        max_depth=input_model.max_depth,
        depth_step=input_model.depth_step,
        overrides=input_model.overrides,
        store=DEFAULT_PARAMETER_STORE,
    )
    if profile is None:
        # Re-run the surface seed to report why the sweep failed
        surface = SeedRequest(
            latitude=input_model.latitude, longitude=input_model.longitude, overrides=input_model.overrides
        )
        outcome = assemble_seed(surface, provinces.province_manager, store=DEFAULT_PARAMETER_STORE)
        if outcome.failure is not None:
            _raise_for_failure(outcome.failure, surface)
        raise SeedGenerationError(
            "Depth profile could not be generated",
            latitude=input_model.latitude,
            longitude=input_model.longitude,
        )

    logger.info(f"generate_depth_profile tool finished with {len(profile.depths)} depths.")
    return profile.model_dump()
