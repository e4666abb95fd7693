"""
hackjudge/routes/scoring.py
Score submission, judge drafts and total verification

The caller (gateway) has already checked that judge_id holds the judge
role for the event.
"""
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.config.feature_flags import feature_flags, SCORE_SUBMIT_RATE_LIMIT
from hackjudge.database import get_db
from hackjudge.errors import ConflictError, ErrorCode, ErrorResponse, from_scoring_error
from hackjudge.exceptions import ScoringError
from hackjudge.rate_limit import limiter
from hackjudge.schemas.scoring import ScoreSubmitRequest, ScoreSubmitResponse
from hackjudge.services.score_draft import load_draft
from hackjudge.services.score_integrity_service import verify_score_total
from hackjudge.services.score_submission import submit_score

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["scoring"])


@router.post(
    "/events/{event_id}/projects/{project_id}/scores",
    response_model=ScoreSubmitResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)
@limiter.limit(SCORE_SUBMIT_RATE_LIMIT)
async def submit_project_score(
    request: Request,  # Required by slowapi
    event_id: str,
    project_id: str,
    payload: ScoreSubmitRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Create or replace the judge's score for a project.

    Rejections (400) name the offending field in details.field and leave
    any earlier score untouched.
    """
    try:
        result = await submit_score(
            judge_id=payload.judge_id,
            project_id=project_id,
            event_id=event_id,
            per_criterion_scores=payload.scores,
            comments=payload.comments,
            private_notes=payload.private_notes,
            db=db,
        )
    except ScoringError as e:
        raise from_scoring_error(e)

    return {"success": True, **result.to_dict()}


@router.get("/events/{event_id}/judges/{judge_id}/projects/{project_id}/draft")
async def judge_draft(
    event_id: str,
    judge_id: str,
    project_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Editable ratings for the judge form, seeded from any earlier submission."""
    try:
        draft = await load_draft(judge_id, project_id, event_id, db)
    except ScoringError as e:
        raise from_scoring_error(e)
    return {"success": True, "draft": draft.to_dict()}


@router.get("/scores/{score_id}/verify")
async def verify_score(score_id: int, db: AsyncSession = Depends(get_db)):
    """Compare a stored judge total with its re-derivation."""
    try:
        verification = await verify_score_total(score_id, db)
    except ScoringError as e:
        raise from_scoring_error(e)

    if not verification.matches and feature_flags.FEATURE_STRICT_SCORE_TOTALS:
        raise ConflictError(
            f"Stored total of score {score_id} does not match its ratings",
            code=ErrorCode.TOTAL_MISMATCH,
            details=verification.to_dict(),
        )
    return {"success": True, **verification.to_dict()}
