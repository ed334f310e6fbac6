"""
Internal data models for the pharmacogenomics service.

These are the intermediate structures passed between the VCF parser, the
diplotype inferencer, the risk classifier and the recommendation resolver.
All of them are immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Phenotype(str, Enum):
    """CPIC metabolizer status."""
    PM = "PM"
    IM = "IM"
    NM = "NM"
    RM = "RM"
    URM = "URM"
    UNKNOWN = "Unknown"


class RiskLabel(str, Enum):
    SAFE = "Safe"
    ADJUST_DOSAGE = "Adjust Dosage"
    TOXIC = "Toxic"
    INEFFECTIVE = "Ineffective"
    UNKNOWN = "Unknown"


class Severity(str, Enum):
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class DrugClass(str, Enum):
    """How the target gene product acts on the drug."""
    PRODRUG = "prodrug"                  # needs bioactivation
    ACTIVE = "active"                    # gene affects clearance of the active drug
    METABOLIC_SHUNT = "metabolic_shunt"  # gene detoxifies the drug or a metabolite


# Genotype tokens as they appear in the GT field
HOM_REF = "0/0"
HET = "0/1"
HET_REVERSED = "1/0"
HOM_ALT = "1/1"

WILDTYPE_ALLELE = "*1"
UNKNOWN_ALLELE = "*X"


def is_heterozygous(genotype: Optional[str]) -> bool:
    return genotype in (HET, HET_REVERSED)


def is_homozygous_alt(genotype: Optional[str]) -> bool:
    return genotype == HOM_ALT


@dataclass(frozen=True)
class VariantRecord:
    """A single detected variant in one of the target pharmacogenes."""
    rsid: str
    gene: str
    position: int
    ref: str
    alt: str
    star_allele: str = WILDTYPE_ALLELE
    significance: str = "Wild-type"
    genotype: str = HOM_REF
    chromosome: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rsid": self.rsid,
            "gene": self.gene,
            "position": self.position,
            "ref": self.ref,
            "alt": self.alt,
            "starAllele": self.star_allele,
            "significance": self.significance,
            "genotype": self.genotype,
            "chromosome": self.chromosome,
        }


@dataclass(frozen=True)
class GeneProfile:
    """Diplotype/phenotype call for the primary gene of one drug."""
    primary_gene: str
    diplotype: str
    phenotype: Phenotype
    detected_variants: Tuple[VariantRecord, ...] = ()


@dataclass(frozen=True)
class RiskAssessment:
    risk_label: RiskLabel
    severity: Severity
    confidence_score: float


@dataclass(frozen=True)
class ClinicalRecommendation:
    action: str
    dosing_guideline: str
    monitoring_advice: str
    alternative_drugs: Tuple[str, ...]
    cpic_guideline: str
    evidence_level: str


@dataclass(frozen=True)
class RecommendationOverride:
    """Sparse counterpart of ClinicalRecommendation; None means 'keep baseline'."""
    action: Optional[str] = None
    dosing_guideline: Optional[str] = None
    monitoring_advice: Optional[str] = None
    alternative_drugs: Optional[Tuple[str, ...]] = None
    cpic_guideline: Optional[str] = None
    evidence_level: Optional[str] = None

    def apply_to(self, baseline: ClinicalRecommendation) -> ClinicalRecommendation:
        changes = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return replace(baseline, **changes)


@dataclass(frozen=True)
class DrugEvaluation:
    """Everything computed for one drug before the rationale is attached."""
    drug: str
    profile: GeneProfile
    risk: RiskAssessment
    recommendation: ClinicalRecommendation
