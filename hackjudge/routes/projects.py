"""
hackjudge/routes/projects.py
Project feed ingestion, per-project aggregate and admin overview
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.database import get_db
from hackjudge.errors import from_scoring_error
from hackjudge.exceptions import ScoringError
from hackjudge.orm.project import ProjectStatus
from hackjudge.schemas.scoring import ProjectStatusRequest
from hackjudge.services.aggregation_engine import get_project_aggregate, get_project_scores
from hackjudge.services.project_feed_service import upsert_project_status

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["projects"])


@router.put("/events/{event_id}/projects/{project_id}/status")
async def sync_project_status(
    event_id: str,
    project_id: str,
    payload: ProjectStatusRequest,
    db: AsyncSession = Depends(get_db)
):
    """Apply one project status feed message."""
    project = await upsert_project_status(
        project_id=project_id,
        event_id=event_id,
        status=payload.status,
        submitted_at=payload.submitted_at,
        title=payload.title,
        db=db,
    )
    return {"success": True, "project": project.to_dict()}


@router.get("/projects/{project_id}/aggregate")
async def project_aggregate(project_id: str, db: AsyncSession = Depends(get_db)):
    """
    Average score and judge count of a project.

    average_score is null until the first judge has scored it.
    """
    try:
        aggregate = await get_project_aggregate(project_id, db)
    except ScoringError as e:
        raise from_scoring_error(e)
    return {"success": True, **aggregate.to_dict()}


@router.get("/events/{event_id}/projects/scores")
async def event_project_scores(
    event_id: str,
    status: Optional[ProjectStatus] = None,
    db: AsyncSession = Depends(get_db)
):
    """Every project of the event with its aggregate, newest submission first."""
    projects = await get_project_scores(event_id, db, status=status)
    return {"success": True, "event_id": event_id, "projects": projects}
