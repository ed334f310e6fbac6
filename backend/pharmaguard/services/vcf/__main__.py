from __future__ import annotations

import json
import sys
from pathlib import Path

from pharmaguard.core.logging import configure_logging
from pharmaguard.services.history.store import get_history_store
from pharmaguard.services.llm.explanation_service import TemplateRationaleGenerator, get_rationale_generator
from pharmaguard.services.pharmacogenomics.knowledge_base import SUPPORTED_DRUGS
from pharmaguard.services.pipeline.analysis_pipeline import UnsupportedDrugError, analyze_vcf
from pharmaguard.services.vcf.parser import FormatError

USAGE = "Usage: python -m pharmaguard.services.vcf <path-to.vcf> [--drugs CODEINE,WARFARIN] [--offline] [--no-history]"


def main(argv: list[str]) -> int:
    if len(argv) < 2 or "--help" in argv:
        print(USAGE)
        return 0

    configure_logging()

    path = Path(argv[1])
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        return 2

    drugs = ",".join(SUPPORTED_DRUGS)
    if "--drugs" in argv:
        try:
            drugs = argv[argv.index("--drugs") + 1]
        except IndexError:
            print("Error: --drugs requires a comma-separated list", file=sys.stderr)
            return 2

    # --offline skips the LLM and uses the deterministic template
    generator = TemplateRationaleGenerator() if "--offline" in argv else get_rationale_generator()
    history = None if "--no-history" in argv else get_history_store()

    try:
        reports = analyze_vcf(path.read_bytes(), drugs, generator=generator, history=history)
    except (FormatError, UnsupportedDrugError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps([r.model_dump(mode="json") for r in reports], indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
