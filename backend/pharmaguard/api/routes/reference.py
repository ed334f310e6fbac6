from fastapi import APIRouter, HTTPException, status
from typing import List

from pharmaguard.schemas.pharma_schema import DrugInfo, SampleVcf
from pharmaguard.services.pharmacogenomics.knowledge_base import (
    DRUG_CLASS_MAP,
    DRUG_GENE_MAP,
    MEDICATION_RISK_TYPE,
    SUPPORTED_DRUGS,
)
from pharmaguard.services.vcf.samples import SAMPLES

router = APIRouter()


@router.get("/drugs", response_model=List[DrugInfo])
async def list_supported_drugs():
    """Drugs the engine can evaluate, with their governing gene."""
    return [
        DrugInfo(
            drug=drug,
            gene=DRUG_GENE_MAP[drug],
            risk_type=MEDICATION_RISK_TYPE[drug],
            drug_class=DRUG_CLASS_MAP[drug].value,
        )
        for drug in SUPPORTED_DRUGS
    ]


@router.get("/samples", response_model=List[SampleVcf])
async def list_samples():
    return [SampleVcf(name=name, vcf=s.vcf, drugs=s.drugs) for name, s in SAMPLES.items()]


@router.get("/samples/{name}", response_model=SampleVcf)
async def get_sample(name: str):
    sample = SAMPLES.get(name)
    if sample is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown sample '{name}'")
    return SampleVcf(name=name, vcf=sample.vcf, drugs=sample.drugs)
