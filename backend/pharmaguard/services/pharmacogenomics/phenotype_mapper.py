"""
Phenotype Mapper - Diplotype and phenotype inference for a single gene.

Uses a single driving variant per gene: the first homozygous-alternate or
heterozygous call wins. Multiple loss-of-function variants on the same gene
are NOT combined into a compound diplotype.
"""

from typing import Optional, Sequence
import logging

from .knowledge_base import INCREASED_FUNCTION_MARKER, lookup_variant
from .models import (
    HOM_REF,
    UNKNOWN_ALLELE,
    WILDTYPE_ALLELE,
    GeneProfile,
    Phenotype,
    VariantRecord,
    is_heterozygous,
    is_homozygous_alt,
)

logger = logging.getLogger(__name__)

WILDTYPE_DIPLOTYPE = f"{WILDTYPE_ALLELE}/{WILDTYPE_ALLELE}"


def select_driving_variant(variants: Sequence[VariantRecord]) -> Optional[VariantRecord]:
    """First non-reference call in list order, else the first variant."""
    if not variants:
        return None
    for v in variants:
        if is_homozygous_alt(v.genotype) or is_heterozygous(v.genotype):
            return v
    return variants[0]


class PhenotypeMapper:
    """Maps the variant calls of one gene to a GeneProfile."""

    def infer(self, gene: str, variants: Sequence[VariantRecord]) -> GeneProfile:
        phenotype = Phenotype.NM
        diplotype = WILDTYPE_DIPLOTYPE

        driver = select_driving_variant(variants)
        if driver is not None:
            meta = lookup_variant(driver.rsid)

            if is_homozygous_alt(driver.genotype):
                phenotype = meta.phenotype if meta else Phenotype.PM
                star = meta.star_allele if meta else UNKNOWN_ALLELE
                diplotype = f"{star}/{star}"
            elif is_heterozygous(driver.genotype):
                # One functional copy left, whatever the allele's own category
                phenotype = Phenotype.IM
                star = meta.star_allele if meta else UNKNOWN_ALLELE
                diplotype = f"{WILDTYPE_ALLELE}/{star}"

            if driver.rsid == INCREASED_FUNCTION_MARKER and driver.genotype != HOM_REF:
                phenotype = Phenotype.URM if is_homozygous_alt(driver.genotype) else Phenotype.RM

            logger.debug(
                "%s driving variant %s (%s) -> %s %s",
                gene, driver.rsid, driver.genotype, diplotype, phenotype.value,
            )

        return GeneProfile(
            primary_gene=gene,
            diplotype=diplotype,
            phenotype=phenotype,
            detected_variants=tuple(variants),
        )


def infer_gene_profile(gene: str, variants: Sequence[VariantRecord]) -> GeneProfile:
    return PhenotypeMapper().infer(gene, variants)
