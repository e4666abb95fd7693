"""
hackjudge/routes/criteria.py
Read-only criteria listing per event
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.database import get_db
from hackjudge.schemas.scoring import CriteriaListResponse
from hackjudge.services.criteria_registry import (
    DEFAULT_CRITERIA_VERSION, get_configured_criteria, default_criteria
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/events", tags=["criteria"])


@router.get("/{event_id}/criteria", response_model=CriteriaListResponse)
async def list_criteria(event_id: str, db: AsyncSession = Depends(get_db)):
    """
    Ordered criteria of an event.

    Events without configured criteria report the default template and
    its version.
    """
    configured = await get_configured_criteria(event_id, db)
    criteria = configured or default_criteria()
    return {
        "success": True,
        "event_id": event_id,
        "uses_default": not configured,
        "default_version": DEFAULT_CRITERIA_VERSION,
        "criteria": [c.to_dict() for c in criteria],
    }
