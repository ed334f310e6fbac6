from fastapi import APIRouter, Depends, UploadFile, File, Form, HTTPException, status
from typing import List
import logging

from pharmaguard.api.deps import get_generator, get_history_store
from pharmaguard.core.config import get_settings
from pharmaguard.schemas.pharma_schema import PharmaGuardResponse
from pharmaguard.services.history.store import HistoryStore
from pharmaguard.services.llm.explanation_service import RationaleGenerator
from pharmaguard.services.pipeline.analysis_pipeline import UnsupportedDrugError, run_analysis_pipeline
from pharmaguard.services.vcf.parser import FormatError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/analyze",
    response_model=List[PharmaGuardResponse],
    status_code=status.HTTP_200_OK,
    summary="Analyze Pharmacogenomic Risk",
    description="Upload a VCF file and a comma-separated drug list to receive one risk report per drug."
)
async def analyze_pharmacogenomics(
    vcf: UploadFile = File(..., description="Patient's VCF file containing genetic variants"),
    drugs: str = Form(..., description="Comma-separated drug names (e.g., CODEINE, WARFARIN)"),
    generator: RationaleGenerator = Depends(get_generator),
    history: HistoryStore = Depends(get_history_store),
) -> List[PharmaGuardResponse]:
    """
    Endpoint to trigger the pharmacogenomic analysis pipeline.

    - **vcf**: Genetic data file (.vcf)
    - **drugs**: Drugs to evaluate against the patient's genotype
    """
    if not (vcf.filename or "").lower().endswith(".vcf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file format. Please upload a .vcf file."
        )

    max_bytes = get_settings().max_upload_mb * 1024 * 1024
    content = await vcf.read()
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"VCF exceeds the {get_settings().max_upload_mb} MB upload limit."
        )

    try:
        return await run_analysis_pipeline(content, drugs, generator=generator, history=history)

    except (FormatError, UnsupportedDrugError) as e:
        logger.error("Validation error in pipeline: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.exception("Unexpected error in analysis pipeline: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during the analysis pipeline."
        )
