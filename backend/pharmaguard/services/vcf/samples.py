"""
Demo VCF documents, one per clinically interesting scenario, each with the
drug list it is meant to be analysed against.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, NamedTuple

VCF_HEADER = "\n".join([
    "##fileformat=VCFv4.2",
    '##FILTER=<ID=PASS,Description="All filters passed">',
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
    '##INFO=<ID=GENE,Number=1,Type=String,Description="Gene Symbol">',
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\t{patient_id}",
])


class VcfSample(NamedTuple):
    vcf: str
    drugs: str


def _sample(patient_id: str, record: str, drugs: str) -> VcfSample:
    return VcfSample(vcf=VCF_HEADER.format(patient_id=patient_id) + "\n" + record, drugs=drugs)


SAMPLES: Mapping[str, VcfSample] = MappingProxyType({
    "Normal Metabolizer": _sample(
        "PATIENT_NM",
        "chr1\t123456\t.\tA\tG\t100\tPASS\tGENE=NONE\tGT\t0/0",
        "CODEINE, WARFARIN, SIMVASTATIN",
    ),
    "CYP2D6 PM (Codeine)": _sample(
        "PATIENT_D6_PM",
        "chr22\t42123456\trs3892097\tC\tT\t100\tPASS\tGENE=CYP2D6\tGT\t1/1",
        "CODEINE",
    ),
    "CYP2C19 PM (Clopidogrel)": _sample(
        "PATIENT_C19_PM",
        "chr10\t94942290\trs4244285\tG\tA\t100\tPASS\tGENE=CYP2C19\tGT\t1/1",
        "CLOPIDOGREL",
    ),
    "Warfarin Sensitive (CYP2C9)": _sample(
        "PATIENT_C9_PM",
        "chr10\t94942290\trs1057910\tA\tC\t100\tPASS\tGENE=CYP2C9\tGT\t1/1",
        "WARFARIN",
    ),
    "Simvastatin Risk (SLCO1B1)": _sample(
        "PATIENT_SLCO_PM",
        "chr12\t21345678\trs4149056\tT\tC\t100\tPASS\tGENE=SLCO1B1\tGT\t1/1",
        "SIMVASTATIN",
    ),
    "Azathioprine Toxicity (TPMT)": _sample(
        "PATIENT_TPMT_PM",
        "chr6\t18123456\trs1142345\tG\tA\t100\tPASS\tGENE=TPMT\tGT\t1/1",
        "AZATHIOPRINE",
    ),
    "Fluorouracil Toxicity (DPYD)": _sample(
        "PATIENT_DPYD_PM",
        "chr1\t9754321\trs3918290\tG\tA\t100\tPASS\tGENE=DPYD\tGT\t1/1",
        "FLUOROURACIL",
    ),
})
