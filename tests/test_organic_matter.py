"""
Tests for organic matter pools and composition in profiles/organic_matter.py.
"""

import math
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from profiles.organic_matter import composition_rules, depth_zone, get_organic_matter
from utils.constants import BIOCHEMICAL_COMPOSITION, DOM_STOICHIOMETRY, MONOMER_COMPOSITION
from utils.parameters import ORGANIC_PARAMS

MONOMERS = {monomer for table in MONOMER_COMPOSITION.values() for monomer in table}


class TestBulkPools:

    def test_surface_values(self, biome):
        params = ORGANIC_PARAMS[biome]
        state = get_organic_matter(biome, 0.0)
        assert state.DOC_total == pytest.approx(params.doc.surface_umol_kg)
        assert state.POC_total == pytest.approx(params.poc.surface_umol_kg)

    def test_efolding_depth(self):
        pool = ORGANIC_PARAMS["Westerlies"].doc
        state = get_organic_matter("Westerlies", pool.efolding_depth_m)
        expected = pool.deep_umol_kg + (pool.surface_umol_kg - pool.deep_umol_kg) / math.e
        assert state.DOC_total == pytest.approx(expected)

    def test_decays_to_refractory_value(self, biome):
        params = ORGANIC_PARAMS[biome]
        state = get_organic_matter(biome, 6000.0)
        assert state.DOC_total == pytest.approx(params.doc.deep_umol_kg, rel=1e-6)
        assert state.POC_total == pytest.approx(params.poc.deep_umol_kg, rel=1e-6)

    def test_negative_depth_is_surface(self):
        assert get_organic_matter("Polar", -30.0) == get_organic_matter("Polar", 0.0)


class TestDepthZones:

    @pytest.mark.parametrize(
        "depth, zone",
        [(0.0, "euphotic"), (150.0, "euphotic"), (150.1, "mesopelagic"), (1000.0, "mesopelagic"),
         (1000.1, "deep"), (-10.0, "euphotic")],
    )
    def test_zone_boundaries(self, depth, zone):
        assert depth_zone(depth) == zone

    def test_euphotic_composition_depends_on_productivity(self):
        productive = get_organic_matter("Westerlies", 10.0)
        oligotrophic = get_organic_matter("Trade-Winds", 10.0)
        productive_share = productive.particulate_classes["protein"] / productive.POC_total
        oligotrophic_share = oligotrophic.particulate_classes["protein"] / oligotrophic.POC_total
        assert productive_share == pytest.approx(0.45)
        assert oligotrophic_share == pytest.approx(0.30)

    def test_deeper_zones_uniform_across_productivity(self):
        assert composition_rules("mesopelagic", "productive") == composition_rules("mesopelagic", "oligotrophic")
        assert composition_rules("deep", "productive") == BIOCHEMICAL_COMPOSITION["deep"]["all"]


class TestComposition:

    def test_classes_follow_percentages(self):
        state = get_organic_matter("Coastal", 500.0)
        rules = BIOCHEMICAL_COMPOSITION["mesopelagic"]["all"]
        for class_name, pct in rules["DOM"].items():
            assert state.dissolved_classes[class_name] == pytest.approx(state.DOC_total * pct / 100.0)
        for class_name, pct in rules["POM"].items():
            assert state.particulate_classes[class_name] == pytest.approx(state.POC_total * pct / 100.0)

    def test_monomers_conserve_class_carbon(self, biome):
        state = get_organic_matter(biome, 80.0)
        assert sum(state.dissolved_monomers.values()) == pytest.approx(sum(state.dissolved_classes.values()))
        assert sum(state.particulate_monomers.values()) == pytest.approx(
            sum(state.particulate_classes.values())
        )

    def test_glycine_share_of_protein(self):
        state = get_organic_matter("Polar", 50.0)
        assert state.dissolved_monomers["gly_e"] == pytest.approx(0.30 * state.dissolved_classes["protein"])

    def test_chemical_state_sums_both_pools(self):
        state = get_organic_matter("Polar", 50.0)
        chem = state.as_chemical_state()
        for monomer in MONOMERS:
            assert chem[monomer] == pytest.approx(
                state.dissolved_monomers[monomer] + state.particulate_monomers[monomer]
            )
        assert set(chem) == MONOMERS | {"DON", "DOP"}


class TestDissolvedNutrients:

    @pytest.mark.parametrize("depth, zone", [(0.0, "euphotic"), (600.0, "mesopelagic"), (2500.0, "deep")])
    def test_don_dop_stoichiometry(self, depth, zone):
        state = get_organic_matter("Trade-Winds", depth)
        assert state.DON == pytest.approx(state.DOC_total / DOM_STOICHIOMETRY[zone]["CN"])
        assert state.DOP == pytest.approx(state.DOC_total / DOM_STOICHIOMETRY[zone]["CP"])

    def test_stoichiometry_more_refractory_with_depth(self):
        ratios = [DOM_STOICHIOMETRY[zone]["CN"] for zone in ("euphotic", "mesopelagic", "deep")]
        assert ratios == sorted(ratios)


class TestOrganicMatterFailures:

    def test_unknown_biome_returns_none(self):
        assert get_organic_matter("Atlantis", 100.0) is None
