"""
Unit tests for recommendation engine.
Tests baseline, sparse override merge and the generic adjustment fallback.
"""

import pytest

from pharmaguard.services.pharmacogenomics.models import (
    ClinicalRecommendation,
    Phenotype,
    RecommendationOverride,
)
from pharmaguard.services.pharmacogenomics.recommendation_engine import (
    BASELINE_RECOMMENDATION,
    RecommendationEngine,
    resolve_recommendation,
)


class TestRecommendationOverride:

    def test_partial_override_keeps_baseline_fields(self):
        override = RecommendationOverride(action="Avoid Use")
        merged = override.apply_to(BASELINE_RECOMMENDATION)

        assert merged.action == "Avoid Use"
        assert merged.dosing_guideline == BASELINE_RECOMMENDATION.dosing_guideline
        assert merged.monitoring_advice == BASELINE_RECOMMENDATION.monitoring_advice
        assert merged.evidence_level == "A"

    def test_empty_alternatives_override_is_applied(self):
        baseline = ClinicalRecommendation(
            action="x", dosing_guideline="x", monitoring_advice="x",
            alternative_drugs=("A",), cpic_guideline="x", evidence_level="B",
        )
        merged = RecommendationOverride(alternative_drugs=()).apply_to(baseline)
        assert merged.alternative_drugs == ()

    def test_baseline_is_not_mutated(self):
        RecommendationOverride(action="Changed").apply_to(BASELINE_RECOMMENDATION)
        assert BASELINE_RECOMMENDATION.action == "Standard Dosing"


class TestRecommendationEngine:

    @pytest.fixture
    def engine(self):
        return RecommendationEngine()

    def test_normal_metabolizer_gets_baseline(self, engine):
        assert engine.resolve("CODEINE", Phenotype.NM) == BASELINE_RECOMMENDATION

    def test_codeine_poor_metabolizer(self, engine):
        rec = engine.resolve("CODEINE", Phenotype.PM)

        assert rec.action == "Avoid Use"
        assert "Oxycodone" in rec.alternative_drugs
        assert rec.evidence_level == "A"

    def test_clopidogrel_partial_override(self, engine):
        rec = engine.resolve("CLOPIDOGREL", Phenotype.PM)

        assert rec.action == "Alternative Therapy"
        assert rec.alternative_drugs == ("Prasugrel", "Ticagrelor")
        # Not set by the override
        assert rec.monitoring_advice == BASELINE_RECOMMENDATION.monitoring_advice

    def test_azathioprine_poor_metabolizer(self, engine):
        rec = engine.resolve("AZATHIOPRINE", Phenotype.PM)
        assert rec.action == "Reduce Dose / Alternative"

    def test_generic_adjustment_fallback(self, engine):
        rec = engine.resolve("SIMVASTATIN", Phenotype.IM)

        assert rec.action == "Dose Adjustment Advised"
        assert rec.dosing_guideline == "Modify starting dose per metabolizer status."
        assert rec.cpic_guideline == BASELINE_RECOMMENDATION.cpic_guideline

    def test_custom_override_table(self):
        engine = RecommendationEngine(overrides={
            ("WARFARIN", Phenotype.IM): RecommendationOverride(monitoring_advice="Weekly INR."),
        })
        rec = engine.resolve("warfarin", Phenotype.IM)

        assert rec.monitoring_advice == "Weekly INR."
        assert rec.action == "Standard Dosing"

    def test_module_helper(self):
        assert resolve_recommendation("FLUOROURACIL", Phenotype.PM).action == "Avoid Use / Major Reduction"
