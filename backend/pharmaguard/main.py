import logging as std_logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pharmaguard.api.router import api_router
from pharmaguard.core import logging  # Initialize logging
from pharmaguard.core.config import get_settings
from pharmaguard.services.pharmacogenomics.knowledge_base import SUPPORTED_DRUGS

logger = std_logging.getLogger(__name__)

app = FastAPI(
    title="PharmaGuard API",
    description="Pharmacogenomic risk reports from patient VCF files",
    version="1.0.0"
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    settings = get_settings()
    logger.info(
        "PharmaGuard starting: %d supported drugs, rationale provider=%s, history=%s",
        len(SUPPORTED_DRUGS), settings.llm.provider, settings.history_path,
    )


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "PharmaGuard"}
