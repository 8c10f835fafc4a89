from typing import List

from fastapi import APIRouter, Depends, Query

from ..schemas.analytics import BatchPerformance, ClubSummary
from ..schemas.leaderboard import LeaderboardEntry
from ..services import leaderboard
from ..services.analysis.ranking import TOP_PERFORMERS
from ..services.store import DocumentStore
from .deps import get_store

router = APIRouter()


@router.get("/analytics/batches", response_model=List[BatchPerformance])
async def batch_performance_endpoint(store: DocumentStore = Depends(get_store)):
    """
    Average problems solved per batch, best batch first.
    """
    return leaderboard.batch_performance(store)


@router.get("/analytics/top-performers", response_model=List[LeaderboardEntry])
async def top_performers_endpoint(
    n: int = Query(TOP_PERFORMERS, gt=0, le=100),
    store: DocumentStore = Depends(get_store),
):
    return leaderboard.top_performers(store, n)


@router.get("/analytics/summary", response_model=ClubSummary)
async def club_summary_endpoint(store: DocumentStore = Depends(get_store)):
    return leaderboard.club_summary(store)
