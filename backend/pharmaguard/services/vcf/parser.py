from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from pharmaguard.services.pharmacogenomics.knowledge_base import is_target_gene, lookup_variant
from pharmaguard.services.pharmacogenomics.models import HOM_REF, WILDTYPE_ALLELE, VariantRecord

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Constants
# ----------------------------------------------------------------------

FILEFORMAT_MARKER = "##fileformat=VCF"
META_PREFIX = "##"
COLUMN_HEADER_PREFIX = "#CHROM"

DEFAULT_PATIENT_ID = "PATIENT_PROFILED"
MIN_DATA_COLUMNS = 8
SAMPLE_COLUMN_INDEX = 9


class FormatError(ValueError):
    """The input is not a VCF document we can read."""


@dataclass
class VcfParseResult:
    patient_id: str
    variants: List[VariantRecord] = field(default_factory=list)
    lines_scanned: int = 0

    def variants_for_gene(self, gene: str) -> Tuple[VariantRecord, ...]:
        """Read-only view of the variants that belong to ``gene``, input order kept."""
        return tuple(v for v in self.variants if v.gene == gene)


def parse_vcf(content: Union[str, bytes]) -> VcfParseResult:
    """
    Parse a VCF document and keep the variants that fall in the target
    pharmacogenes: CYP2D6, CYP2C19, CYP2C9, SLCO1B1, TPMT, DPYD.

    Every non-empty line after the #CHROM header is counted in
    ``lines_scanned`` whether or not it is retained.

    Raises:
        FormatError: the ##fileformat=VCF declaration is missing.
    """
    text = _decode(content)
    if not text or FILEFORMAT_MARKER not in text:
        raise FormatError("Invalid VCF format: Standard header missing.")

    patient_id = DEFAULT_PATIENT_ID
    header_found = False
    lines_scanned = 0
    variants: List[VariantRecord] = []

    for line in _iter_lines(text):
        if line.startswith(META_PREFIX):
            continue

        if line.startswith(COLUMN_HEADER_PREFIX):
            header_found = True
            cols = line.split("\t")
            if len(cols) > SAMPLE_COLUMN_INDEX:
                patient_id = cols[SAMPLE_COLUMN_INDEX].strip()
            continue

        if not header_found:
            continue

        lines_scanned += 1
        record = _parse_variant_line(line)
        if record is not None:
            variants.append(record)

    logger.debug(
        "Parsed VCF for %s: %d lines scanned, %d pharmacogenomic variants",
        patient_id, lines_scanned, len(variants),
    )
    return VcfParseResult(patient_id=patient_id, variants=variants, lines_scanned=lines_scanned)


def _decode(content: Union[str, bytes, None]) -> str:
    if content is None:
        return ""
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def _iter_lines(text: str) -> Iterator[str]:
    for raw in text.splitlines():
        line = raw.strip()
        if line:
            yield line


def _parse_info_field(info: str) -> dict:
    out = {}
    if info in (".", ""):
        return out
    for item in info.split(";"):
        if not item:
            continue
        if "=" not in item:
            out[item] = True
            continue
        k, v = item.split("=", 1)
        out[k] = v
    return out


def _parse_position(pos_s: str) -> int:
    try:
        return int(pos_s)
    except ValueError:
        return 0


def _genotype_from_columns(cols: List[str]) -> str:
    if len(cols) > SAMPLE_COLUMN_INDEX:
        return cols[SAMPLE_COLUMN_INDEX].split(":")[0].strip() or HOM_REF
    return HOM_REF


def _parse_variant_line(line: str) -> Optional[VariantRecord]:
    cols = line.split("\t")
    if len(cols) < MIN_DATA_COLUMNS:
        # Malformed line → skip gracefully
        return None

    chrom, pos_s, vid, ref, alt, _qual, _flt, info_s = cols[:MIN_DATA_COLUMNS]

    # ── Gene resolution: knowledge base first, then INFO GENE= ──────────────
    meta = lookup_variant(vid)
    gene = meta.gene if meta else _parse_info_field(info_s).get("GENE")
    if not isinstance(gene, str) or not is_target_gene(gene):
        return None

    pos = _parse_position(pos_s)
    return VariantRecord(
        rsid=f"snp_{pos_s}" if vid == "." else vid,
        gene=gene,
        position=pos,
        ref=ref,
        alt=alt,
        star_allele=meta.star_allele if meta else WILDTYPE_ALLELE,
        significance=meta.significance if meta else "Wild-type",
        genotype=_genotype_from_columns(cols),
        chromosome=chrom,
    )

