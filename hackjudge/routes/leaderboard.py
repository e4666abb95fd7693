"""
hackjudge/routes/leaderboard.py
Leaderboard reads

Rankings are recomputed from committed scores on every request.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.config.feature_flags import feature_flags
from hackjudge.database import get_db
from hackjudge.schemas.leaderboard import LeaderboardCompareRequest, LeaderboardResponse
from hackjudge.services import leaderboard_service as lb_svc

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/events", tags=["leaderboard"])


def _leaderboard_payload(event_id: str, entries, project_id: Optional[str]) -> dict:
    return {
        "success": True,
        "event_id": event_id,
        "entries": [entry.to_dict() for entry in entries],
        "own_rank": lb_svc.find_project_rank(entries, project_id) if project_id else None,
    }


@router.get("/{event_id}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    event_id: str,
    project_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """
    Ranked projects of an event.

    Pass project_id to also receive that project's rank as own_rank.
    """
    entries = await lb_svc.get_leaderboard(
        event_id,
        db,
        include_breakdown=feature_flags.FEATURE_LEADERBOARD_BREAKDOWN,
    )
    return _leaderboard_payload(event_id, entries, project_id)


@router.post("/{event_id}/leaderboard/compare", response_model=LeaderboardResponse)
async def compare_leaderboard(
    event_id: str,
    payload: LeaderboardCompareRequest,
    project_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """Ranked projects with movement against the caller's previous snapshot."""
    entries = await lb_svc.get_leaderboard(
        event_id,
        db,
        previous_ranks=payload.previous_ranks,
        include_breakdown=feature_flags.FEATURE_LEADERBOARD_BREAKDOWN,
    )
    return _leaderboard_payload(event_id, entries, project_id)


@router.get("/{event_id}/leaderboard/stats")
async def get_leaderboard_stats(event_id: str, db: AsyncSession = Depends(get_db)):
    stats = await lb_svc.get_leaderboard_stats(event_id, db)
    return {"success": True, **stats.to_dict()}
