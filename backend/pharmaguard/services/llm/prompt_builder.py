from pharmaguard.services.pharmacogenomics.models import (
    ClinicalRecommendation,
    GeneProfile,
    RiskAssessment,
)

SYSTEM_INSTRUCTION = (
    "You are a clinical pharmacogenomics assistant. "
    "Generate drug-specific pharmacogenomic risk explanations from the genetic data provided. "
    "Follow CPIC guidelines strictly. Cite specific rsIDs. "
    "Explain the molecular mechanism of the enzyme activity change. "
    "Respond with a single JSON object with the keys summary, mechanism, clinicalImpact, "
    "variantDetails (strings) and references (list of strings)."
)


def describe_variants(profile: GeneProfile) -> str:
    if not profile.detected_variants:
        return "No actionable variants found (Wild-type)"
    return ", ".join(f"{v.rsid} (Genotype: {v.genotype})" for v in profile.detected_variants)


def build_prompt(
    drug: str,
    profile: GeneProfile,
    risk: RiskAssessment,
    recommendation: ClinicalRecommendation,
) -> str:
    """
    Constructs the rationale prompt from already-computed structured fields.

    Args:
        drug: The drug name.
        profile: Gene profile for the drug's primary gene.
        risk: Risk classification.
        recommendation: Resolved clinical recommendation.

    Returns:
        A formatted prompt string.
    """
    return f"""Analyze risk for medication: {drug}

PATIENT GENOMIC DATA:
- Primary Gene: {profile.primary_gene}
- Phenotype: {profile.phenotype.value}
- Diplotype: {profile.diplotype}
- Detected Variants: {describe_variants(profile)}

CLINICAL PARAMETERS:
- Risk Label: {risk.risk_label.value}
- Severity: {risk.severity.value}
- Action: {recommendation.action}
- Dosing Guideline: {recommendation.dosing_guideline}
- Evidence Level: {recommendation.evidence_level}

TASKS:
1. Generate a professional summary including the phenotype and dosing rationale.
2. Explain the molecular mechanism (enzyme activity change) citing the rsIDs provided.
3. Detail the drug metabolism impact and clinical consequence.
4. Provide specific notes on the cited variants.
"""
