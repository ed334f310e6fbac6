"""
Analysis Pipeline - Orchestrates VCF → phenotype → risk → recommendation → LLM → reports.

The VCF is parsed once; every requested drug is then evaluated independently
against the shared, read-only variant set. Rationale requests for all drugs
run concurrently and are joined before the reports are assembled.
"""
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import List, Optional, Union

from pharmaguard.schemas.pharma_schema import (
    ClinicalRecommendation,
    LLMExplanation,
    PharmaGuardResponse,
    PharmacogenomicProfile,
    QualityMetrics,
    RiskAssessment,
)
from pharmaguard.services.history.store import HistoryStore
from pharmaguard.services.llm.explanation_service import (
    RationaleGenerator,
    generate_rationale,
    get_rationale_generator,
)
from pharmaguard.services.pharmacogenomics.knowledge_base import (
    ANNOTATION_COMPLETENESS,
    DRUG_GENE_MAP,
)
from pharmaguard.services.pharmacogenomics.models import DrugEvaluation
from pharmaguard.services.pharmacogenomics.phenotype_mapper import PhenotypeMapper
from pharmaguard.services.pharmacogenomics.recommendation_engine import RecommendationEngine
from pharmaguard.services.pharmacogenomics.risk_engine import RiskEngine
from pharmaguard.services.vcf.parser import VcfParseResult, parse_vcf

logger = logging.getLogger(__name__)


class UnsupportedDrugError(ValueError):
    """None of the requested drug names map to a supported gene."""


def normalize_drug_list(drugs_csv: str) -> List[str]:
    """
    Split, trim and upper-case a comma-separated drug list, keeping only
    supported drugs (first occurrence order, no duplicates).

    Raises:
        UnsupportedDrugError: nothing in the list is supported.
    """
    requested = [d.strip().upper() for d in (drugs_csv or "").split(",")]
    requested = [d for d in requested if d]

    resolved: List[str] = []
    for name in requested:
        if name not in DRUG_GENE_MAP:
            logger.warning("Dropping unsupported drug %r", name)
            continue
        if name not in resolved:
            resolved.append(name)

    if not resolved:
        raise UnsupportedDrugError(
            f'Medication(s) "{drugs_csv}" not found in our genomic database.'
        )
    return resolved


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AnalysisPipeline:
    """Drives one analysis run; collaborators are injectable for tests."""

    def __init__(
        self,
        generator: Optional[RationaleGenerator] = None,
        history: Optional[HistoryStore] = None,
        mapper: Optional[PhenotypeMapper] = None,
        risk_engine: Optional[RiskEngine] = None,
        recommendation_engine: Optional[RecommendationEngine] = None,
    ):
        self.generator = generator or get_rationale_generator()
        self.history = history
        self.mapper = mapper or PhenotypeMapper()
        self.risk_engine = risk_engine or RiskEngine()
        self.recommendation_engine = recommendation_engine or RecommendationEngine()

    def evaluate_drug(self, drug: str, parsed: VcfParseResult) -> DrugEvaluation:
        """Profile, risk and recommendation for one drug. Total for supported drugs."""
        gene = DRUG_GENE_MAP[drug]
        profile = self.mapper.infer(gene, parsed.variants_for_gene(gene))
        risk = self.risk_engine.classify(drug, profile.phenotype)
        recommendation = self.recommendation_engine.resolve(drug, profile.phenotype)

        logger.info(
            "Evaluated %s / %s: %s %s -> %s (%s)",
            drug, gene, profile.diplotype, profile.phenotype.value,
            risk.risk_label.value, risk.severity.value,
        )
        return DrugEvaluation(drug=drug, profile=profile, risk=risk, recommendation=recommendation)

    def build_report(
        self,
        patient_id: str,
        evaluation: DrugEvaluation,
        explanation: LLMExplanation,
        lines_scanned: int,
    ) -> PharmaGuardResponse:
        return PharmaGuardResponse(
            patient_id=patient_id,
            drug=evaluation.drug,
            timestamp=_utc_now_iso(),
            risk_assessment=RiskAssessment.from_assessment(evaluation.risk),
            pharmacogenomic_profile=PharmacogenomicProfile.from_profile(evaluation.profile),
            clinical_recommendation=ClinicalRecommendation.from_recommendation(evaluation.recommendation),
            llm_generated_explanation=explanation,
            quality_metrics=QualityMetrics(
                vcf_parsing_success=True,
                variantsAnalyzed=lines_scanned,
                pharmacogenomicVariantsFound=len(evaluation.profile.detected_variants),
                annotationCompleteness=ANNOTATION_COMPLETENESS,
                timestamp=_utc_now_iso(),
            ),
        )

    async def run(self, raw_vcf: Union[str, bytes], drugs_csv: str) -> List[PharmaGuardResponse]:
        """
        Full pipeline for one VCF and a comma-separated drug list.

        Raises:
            FormatError: the VCF can't be parsed.
            UnsupportedDrugError: no requested drug is supported.
        """
        start_time = time.time()

        # ── 1. Parse VCF (once) ───────────────────────────────────────────
        parsed = parse_vcf(raw_vcf)

        # ── 2. Resolve drugs ──────────────────────────────────────────────
        drugs = normalize_drug_list(drugs_csv)
        logger.info(
            "Starting analysis for patient %s, drugs %s (%d lines scanned, %d PGx variants)",
            parsed.patient_id, ",".join(drugs), parsed.lines_scanned, len(parsed.variants),
        )

        # ── 3. Evaluate each drug independently ───────────────────────────
        evaluations = [self.evaluate_drug(drug, parsed) for drug in drugs]

        # ── 4. Rationale, concurrently ────────────────────────────────────
        explanations = await asyncio.gather(*(
            generate_rationale(self.generator, e.drug, e.profile, e.risk, e.recommendation)
            for e in evaluations
        ))

        # ── 5. Assemble reports ───────────────────────────────────────────
        reports = [
            self.build_report(parsed.patient_id, e, explanation, parsed.lines_scanned)
            for e, explanation in zip(evaluations, explanations)
        ]

        if self.history is not None and reports:
            try:
                self.history.save(reports)
            except OSError:
                # History is best effort once the reports exist
                logger.exception("Failed to save %d report(s) to history", len(reports))

        logger.info("Pipeline execution time: %.2fs", time.time() - start_time)
        return reports


async def run_analysis_pipeline(
    raw_vcf: Union[str, bytes],
    drugs_csv: str,
    *,
    generator: Optional[RationaleGenerator] = None,
    history: Optional[HistoryStore] = None,
) -> List[PharmaGuardResponse]:
    pipeline = AnalysisPipeline(generator=generator, history=history)
    return await pipeline.run(raw_vcf, drugs_csv)


def analyze_vcf(
    raw_vcf: Union[str, bytes],
    drugs_csv: str,
    *,
    generator: Optional[RationaleGenerator] = None,
    history: Optional[HistoryStore] = None,
) -> List[PharmaGuardResponse]:
    """Synchronous wrapper for scripts and the CLI."""
    return asyncio.run(run_analysis_pipeline(raw_vcf, drugs_csv, generator=generator, history=history))
