"""Request-scoped collaborators; overridden in tests via app.dependency_overrides."""

from pharmaguard.core.config import get_settings
from pharmaguard.services.history import store
from pharmaguard.services.history.store import HistoryStore
from pharmaguard.services.llm.explanation_service import RationaleGenerator, get_rationale_generator


def get_history_store() -> HistoryStore:
    return store.get_history_store()


def get_generator() -> RationaleGenerator:
    return get_rationale_generator(get_settings())
