"""
End-to-end tests for seed assembly in profiles/assembler.py.

Tests:
- Reference scenarios (surface anchors, ammonium peak, oxygen override, land point)
- Name standardization and currency metabolite exclusion
- Override propagation to derived species
- Fail-closed behavior for unresolved locations and unknown biomes
- Depth profile sweeps
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import BIOME_POINTS, COASTAL_POINT, LAND_POINT, POLAR_POINT, TRADE_WINDS_POINT, UNMAPPED_POINT
from profiles.assembler import (
    assemble_seed,
    generate_profile,
    generate_seed,
    generate_seed_outcome,
    remove_currency_metabolites,
    standardize_names,
)
from profiles.schemas import FailureCategory, SeedRequest
from utils.constants import CURRENCY_METABOLITES, SEED_UNITS
from utils.parameters import (
    DEFAULT_PARAMETER_STORE,
    MACRONUTRIENT_PARAMS,
    MICRONUTRIENT_PARAMS,
    OXYGEN_PARAMS,
    REDOX_PARAMS,
)

EXPECTED_IDS = {
    "o2_e", "pi_e", "si_e", "no3_e", "no2_e", "nh4_e", "fe2_e", "mn2_e", "so4_e", "h2s_e",
    "zn2_e", "cd2_e", "ni2_e", "cu2_e", "cobalt2_e", "thm_e", "cbl1_e", "don_e", "dop_e", "co2_e",
    "gly_e", "ala_L_e", "leu_L_e", "ser_L_e", "thr_L_e",
    "glc_D_e", "fru_e", "xyl_D_e", "arab_L_e",
    "hdca_e", "hdcea_e", "ocdca_e",
}


class TestReferenceScenarios:

    def test_polar_surface(self, province_repository):
        seed = generate_seed(*POLAR_POINT, 0.0, province_repository)
        assert seed is not None
        assert seed.metadata.biome == "Polar"
        assert seed["o2_e"] == pytest.approx(OXYGEN_PARAMS["Polar"].surface_saturation_umol_kg)
        assert seed["pi_e"] == pytest.approx(MACRONUTRIENT_PARAMS["Polar"].phosphate_surface_umol_kg)

    def test_coastal_ammonium_peak(self, province_repository):
        params = REDOX_PARAMS["Coastal"]
        seed = generate_seed(*COASTAL_POINT, params.ammonium_peak_depth_m, province_repository)
        assert seed.metadata.biome == "Coastal"
        assert seed["nh4_e"] == pytest.approx(params.ammonium_peak_umol_kg, abs=0.05)

    def test_oxygen_override_suppresses_denitrification(self, province_repository):
        depth = OXYGEN_PARAMS["Trade-Winds"].omz_depth_m
        baseline = generate_seed(*TRADE_WINDS_POINT, depth, province_repository)
        oxygenated = generate_seed(*TRADE_WINDS_POINT, depth, province_repository, overrides={"oxygen": 300.0})
        assert baseline["o2_e"] == pytest.approx(OXYGEN_PARAMS["Trade-Winds"].omz_intensity_umol_kg)
        assert oxygenated["o2_e"] == 300.0
        assert oxygenated["no3_e"] > baseline["no3_e"]

    def test_land_point_returns_none(self, province_repository):
        assert generate_seed(*LAND_POINT, 0.0, province_repository) is None


class TestSeedContents:

    @pytest.mark.parametrize("depth", [0.0, 50.0, 300.0, 800.0, 1500.0])
    def test_expected_compounds(self, province_repository, biome, depth):
        seed = generate_seed(*BIOME_POINTS[biome], depth, province_repository)
        assert set(seed.concentrations) == EXPECTED_IDS

    @pytest.mark.parametrize("depth", [0.0, 120.0, 500.0, 2000.0])
    def test_no_currency_metabolites(self, province_repository, biome, depth):
        seed = generate_seed(*BIOME_POINTS[biome], depth, province_repository)
        assert not CURRENCY_METABOLITES & set(seed.concentrations)
        assert "h_e" not in seed

    @pytest.mark.parametrize("depth", [0.0, 75.0, 300.0, 550.0, 1000.0, 4000.0])
    def test_all_concentrations_non_negative(self, province_repository, biome, depth):
        seed = generate_seed(*BIOME_POINTS[biome], depth, province_repository)
        assert all(value >= 0.0 for value in seed.concentrations.values())

    def test_metadata(self, province_repository):
        seed = generate_seed(*COASTAL_POINT, 100.0, province_repository)
        meta = seed.metadata
        assert (meta.latitude, meta.longitude) == COASTAL_POINT
        assert meta.depth_m == 100.0
        assert meta.province_code == "CCAL"
        assert meta.biome == "Coastal"
        assert meta.pH == pytest.approx(8.09)
        assert meta.DOC_total_umolC_kg > meta.POC_total_umolC_kg > 0
        assert meta.units == SEED_UNITS

    def test_negative_depth_is_surface(self, province_repository):
        shallow = generate_seed(*POLAR_POINT, -15.0, province_repository)
        surface = generate_seed(*POLAR_POINT, 0.0, province_repository)
        assert dict(shallow.concentrations) == dict(surface.concentrations)
        assert shallow.metadata.depth_m == 0.0

    def test_to_dict(self, province_repository):
        result = generate_seed(*POLAR_POINT, 0.0, province_repository).to_dict()
        assert result["metadata"]["biome"] == "Polar"
        assert "no3_e" in result

    def test_mapping_access(self, province_repository):
        seed = generate_seed(*POLAR_POINT, 0.0, province_repository)
        assert "no3_e" in seed
        assert seed.get("atp_e") is None
        assert seed.get("atp_e", 0.0) == 0.0

    def test_concentrations_are_read_only(self, province_repository):
        seed = generate_seed(*POLAR_POINT, 0.0, province_repository)
        with pytest.raises(TypeError):
            seed.concentrations["no3_e"] = -1.0

    def test_to_dict_is_a_copy(self, province_repository):
        seed = generate_seed(*POLAR_POINT, 0.0, province_repository)
        result = seed.to_dict()
        result["no3_e"] = -1.0
        assert seed["no3_e"] >= 0.0

    def test_repeated_calls_are_identical(self, province_repository):
        first = generate_seed(*TRADE_WINDS_POINT, 420.0, province_repository)
        second = generate_seed(*TRADE_WINDS_POINT, 420.0, province_repository)
        assert first == second


class TestNameStandardization:

    def test_mapped_keys_translated(self):
        assert standardize_names({"phosphate": 1.0, "Co": 2.0}) == {"pi_e": 1.0, "cobalt2_e": 2.0}

    def test_canonical_keys_pass_through(self):
        assert standardize_names({"glc_D_e": 3.0}) == {"glc_D_e": 3.0}

    def test_unknown_keys_dropped(self):
        assert standardize_names({"redox_state": 1.0, "DOC_total": 50.0}) == {}

    def test_currency_removed(self):
        cleaned = remove_currency_metabolites({"atp_e": 1.0, "h_e": 1e-8, "h2o_e": 5.0, "no3_e": 2.0})
        assert cleaned == {"no3_e": 2.0}


class TestOverridePropagation:

    def test_phosphate_override_reaches_derived_species(self, province_repository):
        depth = 1500.0
        seed = generate_seed(*POLAR_POINT, depth, province_repository, overrides={"phosphate": 1.2})
        macro = MACRONUTRIENT_PARAMS["Polar"]
        deep_term = macro.silicate_regeneration_slope * (depth - macro.silicate_regeneration_depth_m)
        assert seed["pi_e"] == 1.2
        assert seed["si_e"] == pytest.approx(macro.si_to_p * 1.2 + deep_term)
        zinc = MICRONUTRIENT_PARAMS["Polar"].metal_to_phosphate_mmol_mol["Zn"]
        assert seed["zn2_e"] == pytest.approx(zinc * 1e-3 * 1.2)
        assert seed["no3_e"] <= macro.n_to_p * 1.2 + 1e-9

    def test_oxygen_override_drives_respired_co2(self, province_repository):
        saturation = OXYGEN_PARAMS["Westerlies"].surface_saturation_umol_kg
        at_saturation = generate_seed(*BIOME_POINTS["Westerlies"], 800.0, province_repository,
                                      overrides={"oxygen": saturation})
        depleted = generate_seed(*BIOME_POINTS["Westerlies"], 800.0, province_repository,
                                 overrides={"oxygen": saturation - 50.0})
        assert depleted["co2_e"] - at_saturation["co2_e"] == pytest.approx(0.77 * 50.0)

    def test_oxygen_override_drives_sulfide(self, province_repository):
        oxic = generate_seed(*COASTAL_POINT, 300.0, province_repository, overrides={"oxygen": 200.0})
        anoxic = generate_seed(*COASTAL_POINT, 300.0, province_repository, overrides={"oxygen": 0.0})
        assert anoxic["h2s_e"] > 500 * oxic["h2s_e"]

    def test_temperature_override_changes_ph(self, province_repository):
        default = generate_seed(*POLAR_POINT, 0.0, province_repository)
        warm = generate_seed(*POLAR_POINT, 0.0, province_repository, overrides={"temperature": 25.0})
        assert warm.metadata.pH < default.metadata.pH
        assert warm["co2_e"] < default["co2_e"]

    def test_unrecognized_override_ignored(self, province_repository):
        plain = generate_seed(*POLAR_POINT, 200.0, province_repository)
        extra = generate_seed(*POLAR_POINT, 200.0, province_repository, overrides={"salinity": 35.0})
        assert plain == extra


class TestFailClosed:

    def test_land_point_failure(self, province_repository):
        outcome = assemble_seed(SeedRequest(latitude=LAND_POINT[0], longitude=LAND_POINT[1]), province_repository)
        assert outcome.seed is None
        assert outcome.failure.category == FailureCategory.LOCATION_NOT_RESOLVED
        assert outcome.failure.stage == "province"

    def test_unmapped_province_is_unknown_biome(self, province_repository):
        request = SeedRequest(latitude=UNMAPPED_POINT[0], longitude=UNMAPPED_POINT[1], depth=100.0)
        outcome = assemble_seed(request, province_repository)
        assert outcome.seed is None
        assert outcome.failure.category == FailureCategory.UNKNOWN_BIOME
        assert outcome.failure.stage == "oxygen"
        assert outcome.failure.biome == "Unknown"

    @pytest.mark.parametrize(
        "table, stage",
        [
            ("oxygen", "oxygen"),
            ("macronutrients", "macronutrients"),
            ("redox", "redox"),
            ("micronutrients", "micronutrients"),
            ("organic_matter", "organic_matter"),
            ("seawater", "seawater"),
        ],
    )
    def test_any_missing_table_aborts_whole_seed(self, province_repository, table, stage):
        store = DEFAULT_PARAMETER_STORE.without_biome(table, "Westerlies")
        request = SeedRequest(latitude=BIOME_POINTS["Westerlies"][0], longitude=BIOME_POINTS["Westerlies"][1])
        outcome = assemble_seed(request, province_repository, store=store)
        assert outcome.seed is None
        assert outcome.failure.stage == stage
        assert outcome.failure.category == FailureCategory.UNKNOWN_BIOME

    def test_oxygen_override_does_not_mask_missing_oxygen_table(self, province_repository):
        store = DEFAULT_PARAMETER_STORE.without_biome("oxygen", "Westerlies")
        seed = generate_seed(*BIOME_POINTS["Westerlies"], 100.0, province_repository,
                             overrides={"oxygen": 200.0}, store=store)
        assert seed is None

    def test_latitude_out_of_range_returns_none(self, province_repository):
        assert generate_seed(95.0, 0.0, 0.0, province_repository) is None

    def test_negative_oxygen_override_returns_none(self, province_repository):
        assert generate_seed(*POLAR_POINT, 0.0, province_repository, overrides={"oxygen": -1.0}) is None

    def test_out_of_range_coordinates_are_unresolved(self, province_repository):
        outcome = generate_seed_outcome(0.0, 200.0, 0.0, province_repository)
        assert outcome.seed is None
        assert outcome.failure.stage == "request"
        assert outcome.failure.category == FailureCategory.LOCATION_NOT_RESOLVED

    def test_negative_override_is_invalid_request(self, province_repository):
        outcome = generate_seed_outcome(*POLAR_POINT, 0.0, province_repository, overrides={"phosphate": -0.5})
        assert outcome.failure.category == FailureCategory.INVALID_REQUEST
        assert "overrides" in outcome.failure.message

    def test_profile_with_invalid_latitude_returns_none(self, province_repository):
        assert generate_profile(-91.0, 0.0, province_repository, ["o2_e"]) is None


class TestDepthProfile:

    def test_sweep_depths(self, province_repository):
        profile = generate_profile(*POLAR_POINT, province_repository, ["o2_e"])
        assert len(profile.depths) == 21
        assert profile.depths[0] == 0.0
        assert profile.depths[-1] == 1000.0

    def test_values_match_single_seeds(self, province_repository):
        profile = generate_profile(*TRADE_WINDS_POINT, province_repository, ["no3_e", "o2_e"],
                                   max_depth=600.0, depth_step=100.0)
        for depth, nitrate in zip(profile.depths, profile.values["no3_e"]):
            assert nitrate == generate_seed(*TRADE_WINDS_POINT, depth, province_repository)["no3_e"]
        assert profile.values["o2_e"][0] == pytest.approx(OXYGEN_PARAMS["Trade-Winds"].surface_saturation_umol_kg)

    def test_metadata_and_missing_solutes(self, province_repository):
        profile = generate_profile(*COASTAL_POINT, province_repository, ["pH", "not_a_solute"],
                                   max_depth=100.0, depth_step=50.0)
        assert profile.values["pH"] == [pytest.approx(8.09)] * 3
        assert profile.values["not_a_solute"] == [0.0, 0.0, 0.0]
        assert profile.biome == "Coastal"
        assert profile.province_code == "CCAL"

    def test_records(self, province_repository):
        profile = generate_profile(*POLAR_POINT, province_repository, ["pi_e"], max_depth=50.0, depth_step=25.0)
        rows = profile.records()
        assert [row["depth"] for row in rows] == [0.0, 25.0, 50.0]
        assert set(rows[0]) == {"depth", "pi_e"}

    def test_overrides_apply_at_every_depth(self, province_repository):
        profile = generate_profile(*POLAR_POINT, province_repository, ["pi_e"], max_depth=200.0,
                                   overrides={"phosphate": 0.9})
        assert profile.values["pi_e"] == [0.9] * len(profile.depths)

    def test_sulfide_peaks_at_omz_core(self, province_repository):
        core = OXYGEN_PARAMS["Coastal"].omz_depth_m
        profile = generate_profile(*COASTAL_POINT, province_repository, ["o2_e", "h2s_e"],
                                   max_depth=800.0, depth_step=10.0)
        core_index = profile.depths.index(core)
        assert min(profile.values["o2_e"]) == profile.values["o2_e"][core_index]
        assert max(profile.values["h2s_e"]) == profile.values["h2s_e"][core_index]

    def test_land_point_returns_none(self, province_repository):
        assert generate_profile(*LAND_POINT, province_repository, ["o2_e"]) is None

    def test_invalid_step_rejected(self, province_repository):
        with pytest.raises(ValueError):
            generate_profile(*POLAR_POINT, province_repository, ["o2_e"], depth_step=0.0)
