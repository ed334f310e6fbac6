"""
Pharmacogenomics Service

CPIC-aligned pharmacogenomic decision engine for drug risk assessment.
Deterministic, rule-based phenotype inference, risk classification and
clinical recommendations.
"""

from .models import (
    ClinicalRecommendation,
    DrugClass,
    GeneProfile,
    Phenotype,
    RecommendationOverride,
    RiskAssessment,
    RiskLabel,
    Severity,
    VariantRecord,
)
from .knowledge_base import (
    DRUG_GENE_MAP,
    SUPPORTED_DRUGS,
    TARGET_GENES,
    VARIANT_KNOWLEDGE_BASE,
)
from .phenotype_mapper import PhenotypeMapper, infer_gene_profile
from .risk_engine import RiskEngine, classify_risk
from .recommendation_engine import RecommendationEngine, resolve_recommendation

__all__ = [
    # Models
    'ClinicalRecommendation',
    'DrugClass',
    'GeneProfile',
    'Phenotype',
    'RecommendationOverride',
    'RiskAssessment',
    'RiskLabel',
    'Severity',
    'VariantRecord',

    # Knowledge base
    'DRUG_GENE_MAP',
    'SUPPORTED_DRUGS',
    'TARGET_GENES',
    'VARIANT_KNOWLEDGE_BASE',

    # Phenotype Mapping
    'PhenotypeMapper',
    'infer_gene_profile',

    # Risk Engine
    'RiskEngine',
    'classify_risk',

    # Recommendations
    'RecommendationEngine',
    'resolve_recommendation',
]
