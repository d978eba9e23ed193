"""
Seed assembly: runs the biogeochemical cascade for one location and depth.

Stage order is fixed: province -> oxygen -> macronutrients -> redox ->
micronutrients -> organic matter -> seawater chemistry. Each stage consumes
the values already in force upstream (including overrides) and never
re-derives them. If any stage fails, no seed is produced.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional, Protocol, Tuple, Union

import numpy as np
from pydantic import ValidationError

from utils.constants import CANONICAL_SUFFIX, CURRENCY_METABOLITES, METABOLITE_NAME_MAP, PROTON_ID, SEED_UNITS
from utils.helpers import clamp_depth, merge_chemical_states
from utils.parameters import DEFAULT_PARAMETER_STORE, ParameterStore

from .macronutrients import get_macronutrients
from .micronutrients import get_micronutrients
from .organic_matter import get_organic_matter
from .oxygen import calculate_oxygen
from .redox_speciation import REQUIRED_TABLES as REDOX_TABLES
from .redox_speciation import get_redox_sensitive_species
from .schemas import (
    DepthProfile,
    FailureCategory,
    SeedFailure,
    SeedMetadata,
    SeedOutcome,
    SeedOverrides,
    SeedRequest,
    StandardizedSeed,
)
from .seawater_chemistry import get_seawater_chemistry

logger = logging.getLogger(__name__)

# Parameter tables each stage reads; a stage failure with all of them present
# for the biome is a missing upstream key rather than an unknown biome
STAGE_TABLES = {
    "oxygen": ("oxygen",),
    "macronutrients": ("macronutrients",),
    "redox": REDOX_TABLES,
    "micronutrients": ("micronutrients",),
    "organic_matter": ("organic_matter",),
    "seawater": ("seawater", "oxygen"),
}


class ProvinceSource(Protocol):
    def resolve_biome(self, lat: float, lon: float) -> Optional[Tuple[str, str]]:
        ...


def standardize_names(state: Mapping[str, float]) -> Dict[str, float]:
    """
    Translate internal compound keys to canonical metabolite ids.

    Keys in the name map are translated; keys that are already canonical
    (``*_e``) pass through; anything else is dropped.
    """
    standardized = {}
    for key, value in state.items():
        if key in METABOLITE_NAME_MAP:
            standardized[METABOLITE_NAME_MAP[key]] = value
        elif key.endswith(CANONICAL_SUFFIX):
            standardized[key] = value
        else:
            logger.debug(f"Dropping compound without a canonical id: {key}")
    return standardized


def remove_currency_metabolites(concentrations: Mapping[str, float]) -> Dict[str, float]:
    return {key: value for key, value in concentrations.items() if key not in CURRENCY_METABOLITES}


def _stage_failure(stage: str, biome: str, store: ParameterStore) -> SeedOutcome:
    missing = store.missing_tables(biome, STAGE_TABLES[stage])
    if missing:
        category = FailureCategory.UNKNOWN_BIOME
        message = f"Biome '{biome}' has no parameters in {', '.join(missing)}"
    else:
        category = FailureCategory.MISSING_DEPENDENCY_KEY
        message = f"Stage '{stage}' received upstream results without a required key"
    logger.error(f"Seed generation aborted at stage '{stage}': {message}")
    return SeedOutcome(failure=SeedFailure(stage=stage, category=category, message=message, biome=biome))


def _request_failure(error: ValidationError) -> SeedOutcome:
    fields = sorted({str(detail["loc"][0]) for detail in error.errors() if detail["loc"]})
    if {"latitude", "longitude"} & set(fields):
        category = FailureCategory.LOCATION_NOT_RESOLVED
    else:
        category = FailureCategory.INVALID_REQUEST
    message = f"Invalid seed request ({', '.join(fields) or 'request'}): {error.error_count()} validation error(s)"
    logger.error(f"Seed generation aborted at stage 'request': {message}")
    return SeedOutcome(failure=SeedFailure(stage="request", category=category, message=message))


def assemble_seed(
    request: SeedRequest,
    province_source: ProvinceSource,
    store: ParameterStore = DEFAULT_PARAMETER_STORE,
) -> SeedOutcome:
    """
    Generate a standardized seed for one location and depth.

    Args:
        request: Location, depth and overrides
        province_source: Resolves (lat, lon) to (biome, province_code) or None
        store: Parameter tables

    Returns:
        SeedOutcome with either a complete seed or the failure that aborted it
    """
    lat, lon = request.latitude, request.longitude
    depth = clamp_depth(request.depth)
    overrides = request.overrides

    resolved = province_source.resolve_biome(lat, lon)
    if resolved is None:
        message = f"Location ({lat}, {lon}) is not inside any biogeochemical province"
        logger.warning(message)
        return SeedOutcome(
            failure=SeedFailure(stage="province", category=FailureCategory.LOCATION_NOT_RESOLVED, message=message)
        )
    biome, province_code = resolved
    logger.info(f"Generating seed at ({lat}, {lon}), {depth} m: province {province_code}, biome {biome}")

    if overrides.oxygen is not None:
        oxygen = overrides.oxygen
        logger.debug(f"Using oxygen override {oxygen} umol/kg")
    else:
        oxygen = calculate_oxygen(biome, depth, store=store)
        if oxygen is None:
            return _stage_failure("oxygen", biome, store)

    macronutrients = get_macronutrients(biome, depth, phosphate_override=overrides.phosphate, store=store)
    if macronutrients is None:
        return _stage_failure("macronutrients", biome, store)

    redox = get_redox_sensitive_species(biome, oxygen, macronutrients.phosphate, depth, store=store)
    if redox is None:
        return _stage_failure("redox", biome, store)

    micronutrients = get_micronutrients(biome, macronutrients.as_chemical_state(), store=store)
    if micronutrients is None:
        return _stage_failure("micronutrients", biome, store)

    organic = get_organic_matter(biome, depth, store=store)
    if organic is None:
        return _stage_failure("organic_matter", biome, store)

    seawater = get_seawater_chemistry(biome, oxygen, temperature=overrides.temperature, store=store)
    if seawater is None:
        return _stage_failure("seawater", biome, store)

    state = merge_chemical_states(
        {"oxygen": oxygen},
        macronutrients.as_chemical_state(),
        redox.as_chemical_state(),
        micronutrients.as_chemical_state(),
        organic.as_chemical_state(),
        seawater.as_chemical_state(),
    )
    concentrations = standardize_names(state)
    concentrations[PROTON_ID] = 10.0 ** (-seawater.pH)

    metadata = SeedMetadata(
        latitude=lat,
        longitude=lon,
        depth_m=depth,
        province_code=province_code,
        biome=biome,
        pH=seawater.pH,
        DOC_total_umolC_kg=organic.DOC_total,
        POC_total_umolC_kg=organic.POC_total,
        units=SEED_UNITS,
    )
    seed = StandardizedSeed(concentrations=remove_currency_metabolites(concentrations), metadata=metadata)
    logger.info(f"Seed generated with {len(seed.concentrations)} compounds")
    return SeedOutcome(seed=seed)


def generate_seed_outcome(
    lat: float,
    lon: float,
    depth: float,
    province_source: ProvinceSource,
    overrides: Optional[Union[SeedOverrides, Mapping[str, float]]] = None,
    store: ParameterStore = DEFAULT_PARAMETER_STORE,
) -> SeedOutcome:
    """
    Validate a positional request and assemble it.

    Out-of-range coordinates fail as 'location_not_resolved', any other
    invalid field (e.g. a negative override) as 'invalid_request'.
    """
    try:
        request = SeedRequest(latitude=lat, longitude=lon, depth=depth, overrides=overrides)
    except ValidationError as e:
        return _request_failure(e)
    return assemble_seed(request, province_source, store=store)


def generate_seed(
    lat: float,
    lon: float,
    depth: float,
    province_source: ProvinceSource,
    overrides: Optional[Union[SeedOverrides, Mapping[str, float]]] = None,
    store: ParameterStore = DEFAULT_PARAMETER_STORE,
) -> Optional[StandardizedSeed]:
    """Positional form of :func:`assemble_seed`. Returns None on failure."""
    return generate_seed_outcome(lat, lon, depth, province_source, overrides=overrides, store=store).seed


def _solute_value(seed: StandardizedSeed, solute: str) -> float:
    if solute in seed:
        return seed[solute]
    value = getattr(seed.metadata, solute, None)
    if isinstance(value, (int, float)):
        return float(value)
    return 0.0


def generate_profile(
    lat: float,
    lon: float,
    province_source: ProvinceSource,
    solutes: Iterable[str],
    max_depth: float = 1000.0,
    depth_step: float = 50.0,
    overrides: Optional[Union[SeedOverrides, Mapping[str, float]]] = None,
    store: ParameterStore = DEFAULT_PARAMETER_STORE,
) -> Optional[DepthProfile]:
    """
    Sample selected solutes from the surface to ``max_depth`` (inclusive).

    Each solute is read from the seed concentrations, then from the numeric
    metadata fields (e.g. 'pH'), and is 0.0 when absent from both.

    Returns:
        DepthProfile, or None if the seed fails at any depth
    """
    if depth_step <= 0:
        raise ValueError("depth_step must be positive")
    if max_depth < 0:
        raise ValueError("max_depth must not be negative")
    solutes = list(solutes)
    depths = [float(d) for d in np.arange(0.0, max_depth + 1e-9, depth_step)]
    values: Dict[str, list] = {solute: [] for solute in solutes}
    biome = province_code = None

    for depth in depths:
        outcome = generate_seed_outcome(lat, lon, depth, province_source, overrides=overrides, store=store)
        if outcome.seed is None:
            logger.error(f"Depth profile aborted at {depth} m: {outcome.failure.message}")
            return None
        biome = outcome.seed.metadata.biome
        province_code = outcome.seed.metadata.province_code
        for solute in solutes:
            values[solute].append(_solute_value(outcome.seed, solute))

    return DepthProfile(
        latitude=lat, longitude=lon, biome=biome, province_code=province_code, depths=depths, values=values
    )
