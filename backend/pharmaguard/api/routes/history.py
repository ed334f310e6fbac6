from fastapi import APIRouter, Depends, Query, status
from typing import List

from pharmaguard.api.deps import get_history_store
from pharmaguard.schemas.pharma_schema import HistoryStats
from pharmaguard.services.history.store import HistoryStore

router = APIRouter()


@router.get("/history", response_model=List[dict])
async def get_history(
    limit: int = Query(10, ge=1, le=1000, description="Number of most recent reports"),
    history: HistoryStore = Depends(get_history_store),
):
    return history.recent(limit)


@router.get("/history/stats", response_model=HistoryStats)
async def get_history_stats(history: HistoryStore = Depends(get_history_store)):
    return history.stats()


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(history: HistoryStore = Depends(get_history_store)):
    history.clear()
