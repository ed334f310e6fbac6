"""Shared fixtures: VCF builders and offline rationale generators."""

import pytest

from pharmaguard.services.history.store import HistoryStore
from pharmaguard.services.llm.explanation_service import TemplateRationaleGenerator
from pharmaguard.services.vcf.samples import VCF_HEADER


def _variant_line(rsid, gene, genotype, chrom="chr1", pos=1000, ref="A", alt="G"):
    return "\t".join([chrom, str(pos), rsid, ref, alt, "100", "PASS", f"GENE={gene}", "GT", genotype])


def _make_vcf(*records, patient_id="PATIENT_TEST"):
    return VCF_HEADER.format(patient_id=patient_id) + "\n" + "\n".join(records) + "\n"


@pytest.fixture
def variant_line():
    """Build one tab-separated VCF data line."""
    return _variant_line


@pytest.fixture
def make_vcf():
    """Build a full VCF document from data lines."""
    return _make_vcf


@pytest.fixture
def template_generator():
    return TemplateRationaleGenerator()


@pytest.fixture
def history_store(tmp_path):
    return HistoryStore(tmp_path / "analysis_history.json", max_entries=100)
