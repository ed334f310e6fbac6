"""
Explanation Service - free-text rationale for a single drug evaluation.

The rationale backend is injected: anything with an async ``generate`` method
taking (drug, profile, risk, recommendation) and returning an LLMExplanation.
``generate_rationale`` never raises; failures degrade to a deterministic
template built from the same structured inputs.
"""
import json
import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from pharmaguard.core.config import Settings, get_settings
from pharmaguard.schemas.pharma_schema import LLMExplanation
from pharmaguard.services.llm.groq_client import GroqClient
from pharmaguard.services.llm.ollama_client import OllamaClient
from pharmaguard.services.llm.prompt_builder import SYSTEM_INSTRUCTION, build_prompt
from pharmaguard.services.pharmacogenomics.models import (
    ClinicalRecommendation,
    GeneProfile,
    RiskAssessment,
)

logger = logging.getLogger(__name__)

DEFAULT_REFERENCES = ["CPIC Pharmacogenetic Guidelines", "PharmGKB Database"]
REQUIRED_KEYS = ("summary", "mechanism", "clinicalImpact", "variantDetails")


class RationaleGenerationError(RuntimeError):
    """The text generator failed or produced output we can't use."""


class TextClient(Protocol):
    async def generate_text(self, prompt: str, system: Optional[str] = None) -> Optional[str]:
        ...


class RationaleGenerator(Protocol):
    async def generate(
        self,
        drug: str,
        profile: GeneProfile,
        risk: RiskAssessment,
        recommendation: ClinicalRecommendation,
    ) -> LLMExplanation:
        ...


# ── Deterministic fallback ────────────────────────────────────────────────

def build_template_explanation(
    drug: str,
    profile: GeneProfile,
    risk: RiskAssessment,
    recommendation: ClinicalRecommendation,
) -> LLMExplanation:
    gene = profile.primary_gene
    return LLMExplanation(
        summary=(
            f"Guidance for {drug} based on {gene} {profile.phenotype.value} status. "
            f"{recommendation.dosing_guideline}"
        ),
        mechanism=(
            f"Variation in {gene} affects the conversion or clearance of {drug}, "
            f"altering therapeutic plasma levels."
        ),
        clinicalImpact=(
            f"Patient is at {risk.risk_label.value} risk for adverse therapy outcomes "
            f"or therapeutic failure."
        ),
        variantDetails=f"Detected diplotype {profile.diplotype} indicates modified enzymatic function.",
        references=list(DEFAULT_REFERENCES),
    )


class TemplateRationaleGenerator:
    """Offline generator; also the fallback for every other backend."""

    async def generate(self, drug, profile, risk, recommendation) -> LLMExplanation:
        return build_template_explanation(drug, profile, risk, recommendation)


# ── LLM backed ────────────────────────────────────────────────────────────

def parse_explanation(text: Optional[str]) -> LLMExplanation:
    """
    Parse the JSON object in an LLM response into an LLMExplanation.

    Raises:
        RationaleGenerationError: empty, non-JSON, or missing required keys.
    """
    if not text or not text.strip():
        raise RationaleGenerationError("Empty response from text generator")

    # Models sometimes wrap the object in prose or code fences
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        raise RationaleGenerationError("No JSON object in generator response")

    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise RationaleGenerationError(f"Malformed JSON from generator: {e}") from e

    if not isinstance(data, dict):
        raise RationaleGenerationError("Generator JSON is not an object")

    missing = [k for k in REQUIRED_KEYS if not isinstance(data.get(k), str) or not data[k].strip()]
    if missing:
        raise RationaleGenerationError(f"Generator response missing keys: {', '.join(missing)}")

    references = data.get("references") or []
    if isinstance(references, str):
        references = [references]

    try:
        return LLMExplanation(
            summary=data["summary"].strip(),
            mechanism=data["mechanism"].strip(),
            clinicalImpact=data["clinicalImpact"].strip(),
            variantDetails=data["variantDetails"].strip(),
            references=[str(r) for r in references],
        )
    except ValidationError as e:
        raise RationaleGenerationError(str(e)) from e


class LLMRationaleGenerator:
    def __init__(self, client: TextClient):
        self.client = client

    async def generate(self, drug, profile, risk, recommendation) -> LLMExplanation:
        prompt = build_prompt(drug, profile, risk, recommendation)
        text = await self.client.generate_text(prompt, system=SYSTEM_INSTRUCTION)
        if text is None:
            raise RationaleGenerationError("No response from text generator")
        return parse_explanation(text)


async def generate_rationale(
    generator: RationaleGenerator,
    drug: str,
    profile: GeneProfile,
    risk: RiskAssessment,
    recommendation: ClinicalRecommendation,
) -> LLMExplanation:
    """Ask the generator for a rationale; fall back to the template on any failure."""
    try:
        return await generator.generate(drug, profile, risk, recommendation)
    except Exception as e:
        # Explanation quality may degrade, the structured risk data never does
        logger.warning("Rationale generation failed for %s, using template: %s", drug, e)
        return build_template_explanation(drug, profile, risk, recommendation)


def get_rationale_generator(settings: Settings = None) -> RationaleGenerator:
    settings = settings or get_settings()
    llm = settings.llm

    if llm.provider == "template":
        return TemplateRationaleGenerator()
    if llm.provider == "groq":
        return LLMRationaleGenerator(
            GroqClient(api_key=llm.groq_api_key, model=llm.groq_model, timeout=llm.timeout_seconds)
        )
    if llm.provider != "ollama":
        logger.warning("Unknown LLM provider %r, defaulting to ollama", llm.provider)
    return LLMRationaleGenerator(
        OllamaClient(base_url=llm.ollama_url, model=llm.ollama_model, timeout=llm.timeout_seconds)
    )
