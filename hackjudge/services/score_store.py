"""
hackjudge/services/score_store.py
Score Record Store

Exactly one Score per (judge_id, project_id) and one ScoreDetail per
(score_id, criteria_id). Both writes are single INSERT ... ON CONFLICT DO
UPDATE statements on those unique constraints, so two concurrent
submissions for the same pair can never produce a second row.

These functions do not commit; the caller owns the transaction.
"""
import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.database import dialect_insert
from hackjudge.orm.base import utcnow
from hackjudge.orm.scoring import Score, ScoreDetail

logger = logging.getLogger(__name__)


async def upsert_score(
    judge_id: str,
    project_id: str,
    event_id: str,
    total_score: float,
    comments: Optional[str],
    db: AsyncSession,
    private_notes: Optional[str] = None
) -> int:
    """
    Insert or update the judge's Score row for a project.

    On conflict total_score, comments, private_notes and updated_at are
    replaced; created_at is kept.

    Returns:
        id of the (single) Score row for the pair
    """
    now = utcnow()
    stmt = dialect_insert(db, Score).values(
        judge_id=judge_id,
        project_id=project_id,
        event_id=event_id,
        total_score=total_score,
        comments=comments,
        private_notes=private_notes,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Score.judge_id, Score.project_id],
        set_={
            "event_id": stmt.excluded.event_id,
            "total_score": stmt.excluded.total_score,
            "comments": stmt.excluded.comments,
            "private_notes": stmt.excluded.private_notes,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    await db.execute(stmt)

    result = await db.execute(
        select(Score.id).where(
            Score.judge_id == judge_id,
            Score.project_id == project_id,
        )
    )
    return result.scalar_one()


async def upsert_score_detail(
    score_id: int,
    criteria_id: str,
    score: float,
    db: AsyncSession
) -> None:
    """Insert or replace the raw rating of one criterion."""
    stmt = dialect_insert(db, ScoreDetail).values(
        score_id=score_id,
        criteria_id=criteria_id,
        score=score,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[ScoreDetail.score_id, ScoreDetail.criteria_id],
        set_={"score": stmt.excluded.score},
    )
    await db.execute(stmt)


# =============================================================================
# Reads
# =============================================================================

async def get_score(judge_id: str, project_id: str, db: AsyncSession) -> Optional[Score]:
    """The judge's Score for a project, details loaded, or None."""
    result = await db.execute(
        select(Score)
        .where(Score.judge_id == judge_id, Score.project_id == project_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_score_by_id(score_id: int, db: AsyncSession) -> Optional[Score]:
    result = await db.execute(
        select(Score)
        .where(Score.id == score_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_event_scores(event_id: str, db: AsyncSession) -> List[Score]:
    """All Score rows of an event, oldest id first."""
    result = await db.execute(
        select(Score)
        .where(Score.event_id == event_id)
        .order_by(Score.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def list_judge_scores(
    judge_id: str,
    event_id: str,
    db: AsyncSession,
    project_ids: Optional[Sequence[str]] = None
) -> Dict[str, Score]:
    """
    The judge's Score rows in an event keyed by project id.

    Args:
        project_ids: Restrict to these projects when given
    """
    query = select(Score).where(Score.judge_id == judge_id, Score.event_id == event_id)
    if project_ids is not None:
        if not project_ids:
            return {}
        query = query.where(Score.project_id.in_(list(project_ids)))

    result = await db.execute(query.execution_options(populate_existing=True))
    return {score.project_id: score for score in result.scalars().all()}
