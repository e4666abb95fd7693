"""
hackjudge/routes/judge.py
Judge progress and queue
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.database import get_db
from hackjudge.services.judge_progress_service import get_judge_progress, get_judge_queue

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/events", tags=["judge"])


@router.get("/{event_id}/judges/{judge_id}/progress")
async def judge_progress(event_id: str, judge_id: str, db: AsyncSession = Depends(get_db)):
    progress = await get_judge_progress(judge_id, event_id, db)
    return {"success": True, **progress.to_dict()}


@router.get("/{event_id}/judges/{judge_id}/queue")
async def judge_queue(event_id: str, judge_id: str, db: AsyncSession = Depends(get_db)):
    """Submitted projects in submission order, with the judge's own scores."""
    queue = await get_judge_queue(judge_id, event_id, db)
    return {"success": True, **queue.to_dict()}
