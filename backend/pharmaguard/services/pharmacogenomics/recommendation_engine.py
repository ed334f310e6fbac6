"""
Recommendation Engine - Structured clinical action for a (drug, phenotype) pair.

A baseline recommendation (standard dosing) is refined by sparse overrides
keyed on the exact pair. Overrides only replace the fields they set.
Any other non-normal pair gets a generic dose-adjustment recommendation,
so resolution never fails for a supported drug.
"""

from typing import Dict, Optional, Tuple

from .models import ClinicalRecommendation, Phenotype, RecommendationOverride


# ============================================================================
# Baseline & Fallback
# ============================================================================

BASELINE_RECOMMENDATION = ClinicalRecommendation(
    action="Standard Dosing",
    dosing_guideline="Prescribe standard starting dose according to package insert.",
    monitoring_advice="Routine monitoring required.",
    alternative_drugs=(),
    cpic_guideline="CPIC Level A evidence suggests normal metabolic activity.",
    evidence_level="A",
)

GENERIC_ADJUSTMENT = RecommendationOverride(
    action="Dose Adjustment Advised",
    dosing_guideline="Modify starting dose per metabolizer status.",
)


# ============================================================================
# Pair-specific overrides
# ============================================================================

RECOMMENDATION_OVERRIDES: Dict[Tuple[str, Phenotype], RecommendationOverride] = {
    ("CODEINE", Phenotype.PM): RecommendationOverride(
        action="Avoid Use",
        dosing_guideline="Poor metabolizer status results in lack of conversion to active morphine.",
        monitoring_advice="Monitor for lack of analgesic efficacy.",
        alternative_drugs=("Oxycodone", "Morphine", "NSAIDs"),
        cpic_guideline="Avoid codeine use in CYP2D6 Poor Metabolizers.",
    ),
    ("CODEINE", Phenotype.URM): RecommendationOverride(
        action="Avoid Use",
        dosing_guideline="High risk of opioid toxicity due to rapid conversion to morphine.",
        monitoring_advice="Respiratory monitoring required if used.",
        alternative_drugs=("Tramadol", "Morphine"),
        cpic_guideline="Avoid codeine due to risk of life-threatening respiratory depression.",
    ),
    ("WARFARIN", Phenotype.PM): RecommendationOverride(
        action="Major Dose Reduction",
        dosing_guideline="Reduce starting dose by 50-70% based on sensitivity.",
        monitoring_advice="Frequent INR checks until stable.",
        alternative_drugs=("Apixaban", "Rivaroxaban"),
        cpic_guideline="Significant reduction in warfarin clearance observed in CYP2C9 PMs.",
    ),
    ("CLOPIDOGREL", Phenotype.PM): RecommendationOverride(
        action="Alternative Therapy",
        dosing_guideline="Reduced active metabolite levels lead to increased cardiovascular event risk.",
        alternative_drugs=("Prasugrel", "Ticagrelor"),
        cpic_guideline="Recommend alternative antiplatelet therapy for CYP2C19 Poor Metabolizers.",
    ),
    ("AZATHIOPRINE", Phenotype.PM): RecommendationOverride(
        action="Reduce Dose / Alternative",
        dosing_guideline="Reduce starting dose by 90% or use alternative therapy.",
        monitoring_advice="Weekly CBC for myelosuppression risk.",
        cpic_guideline="TPMT Poor Metabolizers require drastic dose reduction or alternative agents.",
    ),
    ("FLUOROURACIL", Phenotype.PM): RecommendationOverride(
        action="Avoid Use / Major Reduction",
        dosing_guideline="Avoid or reduce starting dose by 50% or more.",
        monitoring_advice="Intensive monitoring for severe toxicity.",
        cpic_guideline="DPYD deficiency is associated with life-threatening 5-FU toxicity.",
    ),
}


# ============================================================================
# Recommendation Resolver
# ============================================================================

class RecommendationEngine:
    """Resolve a ClinicalRecommendation from baseline + sparse override."""

    def __init__(
        self,
        overrides: Optional[Dict[Tuple[str, Phenotype], RecommendationOverride]] = None,
        baseline: ClinicalRecommendation = BASELINE_RECOMMENDATION,
    ):
        self.overrides = overrides if overrides is not None else RECOMMENDATION_OVERRIDES
        self.baseline = baseline

    def resolve(self, drug: str, phenotype: Phenotype) -> ClinicalRecommendation:
        if phenotype == Phenotype.NM:
            return self.baseline

        override = self.overrides.get((drug.upper(), phenotype), GENERIC_ADJUSTMENT)
        return override.apply_to(self.baseline)


def resolve_recommendation(drug: str, phenotype: Phenotype) -> ClinicalRecommendation:
    return RecommendationEngine().resolve(drug, phenotype)
