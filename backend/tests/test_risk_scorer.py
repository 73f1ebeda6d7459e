"""
Tests for the heuristic risk score.
"""
import pytest

from models import CompoundProperties, EnvironmentalInfo, GHSInfo, ToxicityInfo
from risk_scorer import INSUFFICIENT_DATA_REASON, NO_HAZARDS_REASON, calculate_risk

HALOGENATED_INCHI = "InChI=1S/C12H4Cl6/c13-7-1-5(2-8(14)11(7)17)6-3-9(15)12(18)10(16)4-6/h1-4H"


def score(hazards=(), weight=None, inchi=None, toxicity=None, environmental=None):
    return calculate_risk(
        CompoundProperties(molecular_weight=weight, inchi=inchi),
        GHSInfo(hazard_statements=list(hazards)),
        toxicity or ToxicityInfo(),
        environmental or EnvironmentalInfo(),
    )


class TestGHSScoring:
    """Test suite for GHS hazard buckets."""

    def test_single_severe_code_is_low(self):
        result = score(["H300"])

        assert result.score == 15
        assert result.risk_level == "Low"
        assert result.reasons == ["GHS: Contains severe health hazards (e.g., H300...)."]

    def test_moderate_code(self):
        result = score(["H302: Harmful if swallowed"])

        assert result.score == 7
        assert result.reasons == ["GHS: Contains moderate health hazards (e.g., H302...)."]

    def test_health_contribution_is_capped(self):
        result = score(["H300", "H301", "H310", "H330"])

        assert result.score == 40
        assert result.risk_level == "Medium"

    def test_severe_and_moderate_share_cap(self):
        result = score(["H300", "H301", "H310", "H302"])

        assert result.score == 40
        assert result.reasons == [
            "GHS: Contains severe health hazards (e.g., H300...).",
            "GHS: Contains moderate health hazards (e.g., H302...).",
        ]

    @pytest.mark.parametrize("code,expected", [("H400", 15), ("H410", 15), ("H401", 10), ("H411", 10),
                                               ("H402", 5), ("H412", 5), ("H413", 5), ("H420", 0)])
    def test_environmental_tiers(self, code, expected):
        result = score([f"{code}: text"])

        assert result.score == expected
        assert result.reasons == [f"GHS: Classified as hazardous to the aquatic environment (e.g., {code}...)."]

    def test_environmental_contribution_is_capped(self):
        assert score(["H400", "H410"]).score == 25

    def test_corrosive_to_metals(self):
        result = score(["H290: May be corrosive to metals", "H412"])

        assert result.score == 20
        assert result.reasons == [
            "GHS: Classified as corrosive to metals and/or hazardous to the aquatic environment (e.g., H290...).",
        ]

    def test_unknown_codes_do_not_score(self):
        result = score(["H225: Highly flammable liquid and vapour"])

        assert result.score == 0
        assert result.risk_level == "Low"
        assert result.reasons == [NO_HAZARDS_REASON]


class TestPropertyAndExcerptScoring:
    """Test suite for weight, persistence, bioaccumulation and toxicity signals."""

    def test_heavy_halogenated_compound(self):
        result = score(["H410"], weight=560.7, inchi=HALOGENATED_INCHI)

        assert result.score == 25
        assert result.reasons[-1] == "High Molecular Weight (>500 Da) with halogenation suggests potential persistence."

    def test_very_heavy_compound(self):
        result = score(weight=812.0)

        assert result.score == 5
        assert result.risk_level == "Low"
        assert result.reasons == ["Very High Molecular Weight (>700 Da) may indicate persistence."]

    def test_heavy_without_descriptor_scores_nothing(self):
        assert score(["H302"], weight=600.0).score == 7

    def test_persistence(self):
        result = score(environmental=EnvironmentalInfo(biodegradability=["Not readily biodegradable (OECD 301F)"]))

        assert result.score == 10
        assert result.reasons == ["Data indicates persistence/low biodegradability."]

    def test_biodegradable_data_scores_two_without_reason(self):
        result = score(["H302"], environmental=EnvironmentalInfo(biodegradability=["Readily biodegradable"]))

        assert result.score == 9
        assert result.reasons == ["GHS: Contains moderate health hazards (e.g., H302...)."]

    def test_bioaccumulation(self):
        result = score(environmental=EnvironmentalInfo(bioaccumulation=["BCF 2400"]))

        assert result.score == 8
        assert result.reasons == ["Bioaccumulation potential indicated by data."]

    def test_toxicity_reason_when_ghs_health_score_low(self):
        result = score(["H302"], toxicity=ToxicityInfo(ld50=["LD50 rat oral 300 mg/kg"]))

        assert result.score == 12
        assert result.reasons[-1] == "Toxicity data found (check details/GHS)."

    def test_toxicity_reason_suppressed_when_ghs_health_score_high(self):
        result = score(["H300"], toxicity=ToxicityInfo(ld50=["LD50 rat oral 3 mg/kg"]))

        assert result.score == 20
        assert result.reasons == ["GHS: Contains severe health hazards (e.g., H300...)."]

    def test_animal_effects_count_as_toxicity(self):
        result = score(toxicity=ToxicityInfo(animal_effects=["Rats showed weight loss."]))

        assert result.score == 5
        assert result.reasons == ["Toxicity data found (check details/GHS)."]


class TestTiersAndOverrides:
    """Test suite for tiers, the Unknown override and reason ordering."""

    def test_no_evidence_is_unknown(self):
        result = score(weight=180.16, inchi="InChI=1S/C9H8O4")

        assert result.score == 0
        assert result.risk_level == "Unknown"
        assert result.reasons == [INSUFFICIENT_DATA_REASON]

    def test_unknown_discards_small_partial_score(self):
        result = score(environmental=EnvironmentalInfo(biodegradability=["Readily biodegradable"]))

        assert result.score == 2
        assert result.risk_level == "Unknown"
        assert result.reasons == [INSUFFICIENT_DATA_REASON]

    def test_aquatic_excerpts_alone_are_low(self):
        result = score(environmental=EnvironmentalInfo(aquatic_toxicity=["EC50 Daphnia 40 mg/L"]))

        assert result.score == 0
        assert result.risk_level == "Low"
        assert result.reasons == [NO_HAZARDS_REASON]

    def test_high_tier_and_reason_order(self):
        result = score(
            ["H300", "H301", "H310", "H351", "H410"],
            weight=640.0,
            inchi=HALOGENATED_INCHI,
            toxicity=ToxicityInfo(lc50=["LC50 fish 0.1 mg/L"]),
            environmental=EnvironmentalInfo(
                biodegradability=["Persistent in soil"],
                bioaccumulation=["High bioaccumulation potential"],
            ),
        )

        assert result.score == 40 + 15 + 10 + 10 + 8 + 5
        assert result.risk_level == "High"
        assert result.reasons == [
            "GHS: Contains severe health hazards (e.g., H300...).",
            "GHS: Contains moderate health hazards (e.g., H351...).",
            "GHS: Classified as hazardous to the aquatic environment (e.g., H410...).",
            "High Molecular Weight (>500 Da) with halogenation suggests potential persistence.",
            "Data indicates persistence/low biodegradability.",
            "Bioaccumulation potential indicated by data.",
        ]

    @pytest.mark.parametrize("hazards,level", [
        (["H300", "H310"], "Medium"),
        (["H300", "H310", "H330", "H400", "H410"], "High"),
    ])
    def test_tier_thresholds(self, hazards, level):
        assert score(hazards).risk_level == level

    def test_same_input_same_result(self):
        kwargs = dict(
            hazards=["H301", "H411"],
            weight=720.0,
            toxicity=ToxicityInfo(ld50=["LD50 5 mg/kg"]),
            environmental=EnvironmentalInfo(bioaccumulation=["BCF 500"]),
        )

        assert score(**kwargs) == score(**kwargs)
