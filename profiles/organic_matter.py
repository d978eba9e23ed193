"""
Organic matter: bulk DOC/POC pools, biochemical composition and DON/DOP.

Each bulk pool decays exponentially from its surface value to a refractory
deep value. Pool carbon is split into protein, carbohydrate and lipid by a
depth-zone composition table (productivity-dependent in the euphotic zone
only), and each class into monomers by fixed percentages. DON and DOP come
from DOC through zone-specific C:N and C:P ratios.
"""

import logging
import math
from typing import Dict, Mapping, Optional

from utils.constants import (
    BIOCHEMICAL_COMPOSITION,
    DOM_STOICHIOMETRY,
    EUPHOTIC_MAX_DEPTH_M,
    MESOPELAGIC_MAX_DEPTH_M,
    MONOMER_COMPOSITION,
)
from utils.helpers import DepthProfileFunction, clamp_depth, non_negative
from utils.parameters import DEFAULT_PARAMETER_STORE, OrganicPoolParameters, ParameterStore

from .schemas import OrganicMatterState

logger = logging.getLogger(__name__)


def organic_pool_profile(pool: OrganicPoolParameters) -> DepthProfileFunction:
    """Build the depth -> carbon (umol C/kg) function for one bulk pool."""

    def profile(depth: float) -> float:
        z = clamp_depth(depth)
        decay = math.exp(-z / pool.efolding_depth_m)
        return non_negative(pool.deep_umol_kg + (pool.surface_umol_kg - pool.deep_umol_kg) * decay)

    return profile


def depth_zone(depth: float) -> str:
    z = clamp_depth(depth)
    if z <= EUPHOTIC_MAX_DEPTH_M:
        return "euphotic"
    if z <= MESOPELAGIC_MAX_DEPTH_M:
        return "mesopelagic"
    return "deep"


def composition_rules(zone: str, productivity: str) -> Dict[str, Dict[str, float]]:
    """Class percentages per pool ("POM"/"DOM") for a zone and productivity group."""
    by_group = BIOCHEMICAL_COMPOSITION[zone]
    return by_group.get(productivity, by_group.get("all"))


def partition_classes(total: float, class_percentages: Mapping[str, float]) -> Dict[str, float]:
    return {name: total * pct / 100.0 for name, pct in class_percentages.items()}


def partition_monomers(class_totals: Mapping[str, float]) -> Dict[str, float]:
    monomers: Dict[str, float] = {}
    for class_name, class_total in class_totals.items():
        for monomer, pct in MONOMER_COMPOSITION[class_name].items():
            monomers[monomer] = monomers.get(monomer, 0.0) + class_total * pct / 100.0
    return monomers


def get_organic_matter(
    biome: str, depth: float, store: ParameterStore = DEFAULT_PARAMETER_STORE
) -> Optional[OrganicMatterState]:
    """
    Organic matter pools at depth for a biome.

    Args:
        biome: Biome name
        depth: Depth in m (negative depths are treated as 0)
        store: Parameter tables

    Returns:
        OrganicMatterState, or None if the biome has no organic matter parameters
    """
    params = store.get("organic_matter", biome)
    if params is None:
        logger.error(f"Cannot calculate organic matter: unknown biome '{biome}'")
        return None

    zone = depth_zone(depth)
    doc = organic_pool_profile(params.doc)(depth)
    poc = organic_pool_profile(params.poc)(depth)

    rules = composition_rules(zone, params.productivity)
    dissolved_classes = partition_classes(doc, rules["DOM"])
    particulate_classes = partition_classes(poc, rules["POM"])

    stoichiometry = DOM_STOICHIOMETRY[zone]

    return OrganicMatterState(
        zone=zone,
        DOC_total=doc,
        POC_total=poc,
        DON=doc / stoichiometry["CN"],
        DOP=doc / stoichiometry["CP"],
        dissolved_classes=dissolved_classes,
        particulate_classes=particulate_classes,
        dissolved_monomers=partition_monomers(dissolved_classes),
        particulate_monomers=partition_monomers(particulate_classes),
    )
