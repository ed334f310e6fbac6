"""
Analysis history - append-only, most-recent-first list of past reports
persisted as a JSON file, with dashboard statistics.
"""

import json
import logging
import threading
from collections import Counter
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from pharmaguard.core.config import get_settings
from pharmaguard.schemas.pharma_schema import PharmaGuardResponse
from pharmaguard.services.pharmacogenomics.models import RiskLabel, Severity

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100
HIGH_RISK_SEVERITIES = (Severity.HIGH.value, Severity.CRITICAL.value)


def _risk_field(report: Dict[str, Any], key: str) -> Any:
    risk = report.get("risk_assessment")
    return risk.get(key) if isinstance(risk, dict) else None


class HistoryStore:
    """Manage loading/saving of the report history."""

    def __init__(
        self,
        file_path: Union[str, Path] = Path("data/analysis_history.json"),
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.file_path = Path(file_path)
        self.max_entries = max_entries
        self._lock = threading.Lock()

    def load(self) -> List[Dict[str, Any]]:
        """Load history from disk; missing or unreadable files give an empty history."""
        if not self.file_path.exists():
            return []

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load history from %s: %s", self.file_path, e)
            return []

        if not isinstance(data, list):
            logger.error("History file %s does not hold a list; ignoring it", self.file_path)
            return []

        entries = [e for e in data if isinstance(e, dict)]
        if len(entries) != len(data):
            logger.warning(
                "Ignoring %d malformed entries in history file %s",
                len(data) - len(entries), self.file_path,
            )
        return entries

    def save(self, reports: Sequence[PharmaGuardResponse]) -> None:
        """Prepend one run's reports as a batch and drop the oldest beyond max_entries."""
        if not reports:
            return

        batch = [r.model_dump(mode="json") for r in reports]
        with self._lock:
            updated = (batch + self.load())[: self.max_entries]
            self._write(updated)
        logger.info("Saved %d report(s) to history (%d retained)", len(batch), len(updated))

    def recent(self, n: int = 10) -> List[Dict[str, Any]]:
        return self.load()[: max(n, 0)]

    def clear(self) -> None:
        with self._lock:
            if self.file_path.exists():
                self.file_path.unlink()

    def stats(self) -> Dict[str, Any]:
        history = self.load()

        high_risk_count = sum(
            1 for r in history
            if _risk_field(r, "severity") in HIGH_RISK_SEVERITIES
        )

        drug_freq = Counter(r.get("drug") for r in history if r.get("drug"))
        top_drug = drug_freq.most_common(1)[0][0] if drug_freq else "N/A"

        labels = Counter(_risk_field(r, "risk_label") for r in history)
        risk_distribution = {label.value: labels.get(label.value, 0) for label in RiskLabel}

        return {
            "totalAnalyses": len(history),
            "highRiskCount": high_risk_count,
            "topDrug": top_drug,
            "lastAnalysis": history[0].get("timestamp") if history else None,
            "riskDistribution": risk_distribution,
            "recentAnalyses": history[:10],
        }

    def _write(self, entries: List[Dict[str, Any]]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(entries, f, indent=2)
            tmp_path.replace(self.file_path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise


@lru_cache(maxsize=1)
def get_history_store() -> HistoryStore:
    """Process-wide store so every writer shares one lock."""
    settings = get_settings()
    return HistoryStore(settings.history_path, max_entries=settings.history_max_entries)
