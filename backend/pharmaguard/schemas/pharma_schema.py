from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime

from pharmaguard.services.pharmacogenomics.models import (
    ClinicalRecommendation as ClinicalRecommendationData,
    GeneProfile,
    RiskAssessment as RiskAssessmentData,
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class DetectedVariant(_Frozen):
    rsid: str
    gene: str
    position: int
    ref: str
    alt: str
    starAllele: str
    significance: str
    genotype: str
    chromosome: Optional[str] = None


class RiskAssessment(_Frozen):
    risk_label: str
    severity: str
    confidence_score: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def from_assessment(cls, risk: RiskAssessmentData) -> "RiskAssessment":
        return cls(
            risk_label=risk.risk_label.value,
            severity=risk.severity.value,
            confidence_score=risk.confidence_score,
        )


class PharmacogenomicProfile(_Frozen):
    primary_gene: str
    diplotype: str
    phenotype: str
    detected_variants: List[DetectedVariant] = []

    @classmethod
    def from_profile(cls, profile: GeneProfile) -> "PharmacogenomicProfile":
        return cls(
            primary_gene=profile.primary_gene,
            diplotype=profile.diplotype,
            phenotype=profile.phenotype.value,
            detected_variants=[DetectedVariant(**v.to_dict()) for v in profile.detected_variants],
        )


class ClinicalRecommendation(_Frozen):
    action: str
    dosingGuideline: str
    monitoringAdvice: str
    alternativeDrugs: List[str] = []
    cpicGuideline: str
    evidenceLevel: str

    @classmethod
    def from_recommendation(cls, rec: ClinicalRecommendationData) -> "ClinicalRecommendation":
        return cls(
            action=rec.action,
            dosingGuideline=rec.dosing_guideline,
            monitoringAdvice=rec.monitoring_advice,
            alternativeDrugs=list(rec.alternative_drugs),
            cpicGuideline=rec.cpic_guideline,
            evidenceLevel=rec.evidence_level,
        )


class LLMExplanation(_Frozen):
    summary: str
    mechanism: str
    clinicalImpact: str
    variantDetails: str
    references: List[str] = []


class QualityMetrics(_Frozen):
    vcf_parsing_success: bool = True
    variantsAnalyzed: int = Field(..., ge=0)
    pharmacogenomicVariantsFound: int = Field(..., ge=0)
    annotationCompleteness: float = Field(..., ge=0.0, le=1.0)
    timestamp: str


class PharmaGuardResponse(_Frozen):
    """One report per drug; field names are fixed for EHR ingestion."""
    patient_id: str
    drug: str
    timestamp: str
    risk_assessment: RiskAssessment
    pharmacogenomic_profile: PharmacogenomicProfile
    clinical_recommendation: ClinicalRecommendation
    llm_generated_explanation: LLMExplanation
    quality_metrics: QualityMetrics

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v):
        try:
            datetime.fromisoformat(v.replace('Z', '+00:00'))
            return v
        except ValueError:
            raise ValueError("Timestamp must be a valid ISO 8601 string")


class DrugInfo(BaseModel):
    drug: str
    gene: str
    risk_type: str
    drug_class: str


class SampleVcf(BaseModel):
    name: str
    vcf: str
    drugs: str


class HistoryStats(BaseModel):
    totalAnalyses: int
    highRiskCount: int
    topDrug: str
    lastAnalysis: Optional[str] = None
    riskDistribution: dict
    recentAnalyses: List[dict] = []
