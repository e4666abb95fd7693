"""
hackjudge/services/score_integrity_service.py
Re-derivation of stored judge totals

A stored Score.total_score must equal what the aggregation engine computes
from its ScoreDetail rows under the event's current criteria. Drift appears
when criteria are edited after judging started.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.exceptions import ScoreNotFoundError
from hackjudge.orm.scoring import Score
from hackjudge.services.aggregation_engine import compute_judge_total
from hackjudge.services.criteria_registry import CriterionSpec, get_criteria
from hackjudge.services.score_store import get_score_by_id, list_event_scores

logger = logging.getLogger(__name__)

TOTAL_TOLERANCE = 1e-9


@dataclass
class TotalVerification:
    score_id: int
    project_id: str
    judge_id: str
    stored_total: float
    derived_total: float

    @property
    def matches(self) -> bool:
        return abs(self.stored_total - self.derived_total) <= TOTAL_TOLERANCE

    def to_dict(self) -> Dict:
        return {
            "score_id": self.score_id,
            "project_id": self.project_id,
            "judge_id": self.judge_id,
            "stored_total": self.stored_total,
            "derived_total": self.derived_total,
            "matches": self.matches,
        }


def verify_loaded_score(score: Score, criteria: List[CriterionSpec]) -> TotalVerification:
    verification = TotalVerification(
        score_id=score.id,
        project_id=score.project_id,
        judge_id=score.judge_id,
        stored_total=float(score.total_score),
        derived_total=compute_judge_total(criteria, score.ratings()),
    )
    if not verification.matches:
        logger.error(
            f"Score {score.id} total drift: stored={verification.stored_total} "
            f"derived={verification.derived_total}"
        )
    return verification


async def verify_score_total(score_id: int, db: AsyncSession) -> TotalVerification:
    """
    Compare one stored total with its re-derivation.

    Raises:
        ScoreNotFoundError: Unknown score id
    """
    score = await get_score_by_id(score_id, db)
    if score is None:
        raise ScoreNotFoundError(score_id)

    criteria = await get_criteria(score.event_id, db)
    return verify_loaded_score(score, criteria)


async def verify_event_totals(event_id: str, db: AsyncSession) -> List[TotalVerification]:
    """Verification of every Score row in an event."""
    criteria = await get_criteria(event_id, db)
    return [verify_loaded_score(s, criteria) for s in await list_event_scores(event_id, db)]


async def recompute_event_totals(event_id: str, db: AsyncSession, dry_run: bool = False) -> int:
    """
    Rewrite every drifting total of an event with its re-derived value.

    Args:
        event_id: Event identifier
        db: Database session
        dry_run: Count drifting rows without writing

    Returns:
        Number of rows whose total differs (and, unless dry_run, was rewritten)
    """
    criteria = await get_criteria(event_id, db)
    changed = 0
    try:
        for score in await list_event_scores(event_id, db):
            derived = compute_judge_total(criteria, score.ratings())
            if abs(float(score.total_score) - derived) <= TOTAL_TOLERANCE:
                continue
            changed += 1
            if not dry_run:
                score.total_score = derived

        if dry_run:
            await db.rollback()
        else:
            await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"Recomputed totals for event {event_id}: {changed} changed{' (dry run)' if dry_run else ''}")
    return changed
