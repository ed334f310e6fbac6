"""
Unit tests for the JSON-file history store.
"""

from datetime import datetime, timezone

import pytest

from pharmaguard.schemas.pharma_schema import (
    ClinicalRecommendation,
    LLMExplanation,
    PharmaGuardResponse,
    PharmacogenomicProfile,
    QualityMetrics,
    RiskAssessment,
)
from pharmaguard.services.history.store import HistoryStore, get_history_store


def _report(drug="CODEINE", risk_label="Safe", severity="none", patient_id="P1"):
    now = datetime.now(timezone.utc).isoformat()
    return PharmaGuardResponse(
        patient_id=patient_id,
        drug=drug,
        timestamp=now,
        risk_assessment=RiskAssessment(risk_label=risk_label, severity=severity, confidence_score=0.95),
        pharmacogenomic_profile=PharmacogenomicProfile(primary_gene="CYP2D6", diplotype="*1/*1", phenotype="NM"),
        clinical_recommendation=ClinicalRecommendation(
            action="Standard Dosing",
            dosingGuideline="Standard dose.",
            monitoringAdvice="Routine.",
            cpicGuideline="CPIC",
            evidenceLevel="A",
        ),
        llm_generated_explanation=LLMExplanation(
            summary="s", mechanism="m", clinicalImpact="c", variantDetails="v",
        ),
        quality_metrics=QualityMetrics(
            variantsAnalyzed=1,
            pharmacogenomicVariantsFound=0,
            annotationCompleteness=0.99,
            timestamp=now,
        ),
    )


class TestHistoryStore:

    def test_missing_file_is_empty(self, history_store):
        assert history_store.load() == []

    def test_corrupt_file_is_empty(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("{not json", encoding="utf-8")
        assert HistoryStore(path).load() == []

    def test_non_list_file_is_empty(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        assert HistoryStore(path).load() == []

    def test_non_dict_entries_are_dropped(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text('["oops", 1, {"drug": "CODEINE"}]', encoding="utf-8")

        assert HistoryStore(path).load() == [{"drug": "CODEINE"}]

    def test_save_creates_parent_dirs(self, tmp_path):
        store = HistoryStore(tmp_path / "nested" / "dir" / "history.json")
        store.save([_report()])
        assert len(store.load()) == 1

    def test_most_recent_batch_first(self, history_store):
        history_store.save([_report(drug="CODEINE")])
        history_store.save([_report(drug="WARFARIN"), _report(drug="SIMVASTATIN")])

        drugs = [r["drug"] for r in history_store.load()]
        assert drugs == ["WARFARIN", "SIMVASTATIN", "CODEINE"]

    def test_cap_drops_oldest(self, tmp_path):
        store = HistoryStore(tmp_path / "history.json", max_entries=3)
        store.save([_report(patient_id="OLD")])
        store.save([_report(patient_id=f"NEW{i}") for i in range(3)])

        ids = [r["patient_id"] for r in store.load()]
        assert ids == ["NEW0", "NEW1", "NEW2"]

    def test_failed_write_raises_and_leaves_no_temp_file(self, tmp_path):
        target = tmp_path / "history.json"
        target.mkdir()
        store = HistoryStore(target)

        with pytest.raises(OSError):
            store.save([_report()])
        assert not (tmp_path / "history.json.tmp").exists()

    def test_save_empty_is_noop(self, history_store):
        history_store.save([])
        assert not history_store.file_path.exists()

    def test_recent(self, history_store):
        history_store.save([_report(drug=d) for d in ("CODEINE", "WARFARIN", "SIMVASTATIN")])

        assert [r["drug"] for r in history_store.recent(2)] == ["CODEINE", "WARFARIN"]
        assert history_store.recent(0) == []

    def test_clear(self, history_store):
        history_store.save([_report()])
        history_store.clear()

        assert history_store.load() == []
        history_store.clear()  # idempotent


class TestHistoryStats:

    def test_empty_stats(self, history_store):
        stats = history_store.stats()

        assert stats["totalAnalyses"] == 0
        assert stats["highRiskCount"] == 0
        assert stats["topDrug"] == "N/A"
        assert stats["lastAnalysis"] is None
        assert stats["recentAnalyses"] == []
        assert set(stats["riskDistribution"]) == {"Safe", "Adjust Dosage", "Toxic", "Ineffective", "Unknown"}
        assert all(v == 0 for v in stats["riskDistribution"].values())

    def test_stats_counts(self, history_store):
        history_store.save([
            _report(drug="CODEINE", risk_label="Toxic", severity="critical"),
            _report(drug="CODEINE", risk_label="Ineffective", severity="moderate"),
            _report(drug="WARFARIN", risk_label="Toxic", severity="high"),
            _report(drug="SIMVASTATIN"),
        ])
        stats = history_store.stats()

        assert stats["totalAnalyses"] == 4
        assert stats["highRiskCount"] == 2
        assert stats["topDrug"] == "CODEINE"
        assert stats["riskDistribution"]["Toxic"] == 2
        assert stats["riskDistribution"]["Safe"] == 1
        assert stats["lastAnalysis"] == history_store.load()[0]["timestamp"]

    @pytest.mark.parametrize("count, expected", [(5, 5), (15, 10)])
    def test_recent_analyses_capped_at_ten(self, history_store, count, expected):
        history_store.save([_report() for _ in range(count)])
        assert len(history_store.stats()["recentAnalyses"]) == expected

    def test_stats_with_malformed_entries(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text('["oops", 1, {"drug": "WARFARIN", "risk_assessment": "bad"}]', encoding="utf-8")
        stats = HistoryStore(path).stats()

        assert stats["totalAnalyses"] == 1
        assert stats["highRiskCount"] == 0
        assert stats["topDrug"] == "WARFARIN"


class TestSharedStore:

    def test_store_is_shared_across_calls(self):
        get_history_store.cache_clear()
        try:
            assert get_history_store() is get_history_store()
        finally:
            get_history_store.cache_clear()
