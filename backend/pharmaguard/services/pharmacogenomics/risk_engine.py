"""
Risk Engine - Maps (drug, phenotype) to a risk label, severity and confidence.

Rules depend on the drug's pharmacological class:
- prodrug: the gene activates the drug, so PM means no effect and RM/URM
  means over-activation
- active: the gene clears the active drug, so PM means accumulation
- metabolic shunt: the gene detoxifies the drug; an Unknown phenotype is
  treated like PM because absence of the protective allele can't be ruled out

Confidence is a static heuristic (0.99 for NM, 0.95 otherwise), not a
statistical estimate.
"""

from typing import Dict, Tuple

from .knowledge_base import DRUG_CLASS_MAP
from .models import DrugClass, Phenotype, RiskAssessment, RiskLabel, Severity


NORMAL_CONFIDENCE = 0.99
DEFAULT_CONFIDENCE = 0.95


# ---------------------------------------------------------------------------
# Class-level label rules
# ---------------------------------------------------------------------------

CLASS_RISK_RULES: Dict[DrugClass, Dict[Phenotype, RiskLabel]] = {
    DrugClass.PRODRUG: {
        Phenotype.PM:  RiskLabel.INEFFECTIVE,
        Phenotype.IM:  RiskLabel.ADJUST_DOSAGE,
        Phenotype.RM:  RiskLabel.TOXIC,
        Phenotype.URM: RiskLabel.TOXIC,
    },
    DrugClass.ACTIVE: {
        Phenotype.PM: RiskLabel.TOXIC,
        Phenotype.IM: RiskLabel.ADJUST_DOSAGE,
    },
    DrugClass.METABOLIC_SHUNT: {
        Phenotype.PM:      RiskLabel.TOXIC,
        Phenotype.UNKNOWN: RiskLabel.TOXIC,
        Phenotype.IM:      RiskLabel.ADJUST_DOSAGE,
    },
}


# ---------------------------------------------------------------------------
# Per-drug severity table
# ---------------------------------------------------------------------------

DRUG_SEVERITY_TABLE: Dict[Tuple[str, Phenotype], Severity] = {
    ("CODEINE", Phenotype.PM):  Severity.MODERATE,
    ("CODEINE", Phenotype.IM):  Severity.LOW,
    ("CODEINE", Phenotype.RM):  Severity.CRITICAL,
    ("CODEINE", Phenotype.URM): Severity.CRITICAL,

    # Only PM/IM carry a rule for clopidogrel; the gain-of-function
    # phenotypes fall through to Safe.
    ("CLOPIDOGREL", Phenotype.PM): Severity.HIGH,
    ("CLOPIDOGREL", Phenotype.IM): Severity.MODERATE,

    ("WARFARIN", Phenotype.PM): Severity.HIGH,
    ("WARFARIN", Phenotype.IM): Severity.MODERATE,

    ("SIMVASTATIN", Phenotype.PM): Severity.HIGH,
    ("SIMVASTATIN", Phenotype.IM): Severity.LOW,

    ("AZATHIOPRINE", Phenotype.PM):      Severity.CRITICAL,
    ("AZATHIOPRINE", Phenotype.UNKNOWN): Severity.CRITICAL,
    ("AZATHIOPRINE", Phenotype.IM):      Severity.HIGH,

    ("FLUOROURACIL", Phenotype.PM):      Severity.CRITICAL,
    ("FLUOROURACIL", Phenotype.UNKNOWN): Severity.CRITICAL,
    ("FLUOROURACIL", Phenotype.IM):      Severity.HIGH,
}


class RiskEngine:
    """Deterministic drug-class aware risk classifier."""

    def __init__(
        self,
        class_rules: Dict[DrugClass, Dict[Phenotype, RiskLabel]] = None,
        severity_table: Dict[Tuple[str, Phenotype], Severity] = None,
    ):
        self.class_rules = class_rules if class_rules is not None else CLASS_RISK_RULES
        self.severity_table = severity_table if severity_table is not None else DRUG_SEVERITY_TABLE

    def classify(self, drug: str, phenotype: Phenotype) -> RiskAssessment:
        if phenotype == Phenotype.NM:
            return RiskAssessment(RiskLabel.SAFE, Severity.NONE, NORMAL_CONFIDENCE)

        drug_upper = drug.upper()
        severity = self.severity_table.get((drug_upper, phenotype))
        drug_class = DRUG_CLASS_MAP.get(drug_upper)
        label = self.class_rules.get(drug_class, {}).get(phenotype)

        if severity is None or label is None:
            return RiskAssessment(RiskLabel.SAFE, Severity.NONE, DEFAULT_CONFIDENCE)
        return RiskAssessment(label, severity, DEFAULT_CONFIDENCE)


def classify_risk(drug: str, phenotype: Phenotype) -> RiskAssessment:
    return RiskEngine().classify(drug, phenotype)
