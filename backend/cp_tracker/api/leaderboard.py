from typing import List

from fastapi import APIRouter, Depends, Query

from ..schemas.leaderboard import LeaderboardEntry, Timeframe
from ..services import leaderboard
from ..services.store import DocumentStore
from .deps import get_store

router = APIRouter()


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard_endpoint(
    timeframe: Timeframe = Query(Timeframe.ALL),
    store: DocumentStore = Depends(get_store),
):
    """
    Approved members ranked for the selected timeframe.
    """
    return leaderboard.leaderboard(store, timeframe)
