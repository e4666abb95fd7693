"""
hackjudge/services/score_submission.py
SubmitScore: validate a judge's full rating set, then upsert it atomically

VALIDATION (all must pass before anything is written):
1. Project exists in the project feed
2. Project belongs to the given event
3. Project status is submitted
4. Every rated criterion belongs to the event (configured or default template)
5. Every rating is a finite number in [0, max_score]

WRITE:
- Judge total computed by the aggregation engine
- One Score upsert on (judge_id, project_id)
- One ScoreDetail upsert per active criterion; unrated criteria are stored as 0
- Single commit; any failure rolls the whole submission back
"""
import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.exceptions import (
    ProjectNotFoundError, ProjectNotScorableError, EventMismatchError,
    CriterionNotInEventError, ScoreOutOfRangeError, ScoringError
)
from hackjudge.orm.project import Project
from hackjudge.services.aggregation_engine import compute_judge_total
from hackjudge.services.criteria_registry import CriterionSpec, get_criteria, index_criteria
from hackjudge.services.score_store import get_score, upsert_score, upsert_score_detail

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    score_id: int
    total_score: float
    created: bool

    def to_dict(self) -> Dict:
        return {
            "score_id": self.score_id,
            "total_score": self.total_score,
            "created": self.created,
        }


def validate_ratings(
    event_id: str,
    criteria: List[CriterionSpec],
    ratings: Mapping[str, object]
) -> Dict[str, float]:
    """
    Check a rating map against the event's criteria.

    Criterion ids are checked in sorted order so the same bad input always
    reports the same field.

    Returns:
        Ratings as floats, one entry per active criterion (missing ones as 0.0)

    Raises:
        CriterionNotInEventError: Unknown criterion id
        ScoreOutOfRangeError: Non-numeric, non-finite or out-of-range rating
    """
    by_id = index_criteria(criteria)
    cleaned: Dict[str, float] = {}

    for criteria_id in sorted(ratings):
        criterion = by_id.get(criteria_id)
        if criterion is None:
            raise CriterionNotInEventError(criteria_id, event_id)

        value = ratings[criteria_id]
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ScoreOutOfRangeError(criteria_id, value, criterion.max_score)

        value = float(value)
        if not math.isfinite(value) or value < 0 or value > criterion.max_score:
            raise ScoreOutOfRangeError(criteria_id, value, criterion.max_score)
        cleaned[criteria_id] = value

    return {c.id: cleaned.get(c.id, 0.0) for c in criteria}


async def load_scorable_project(project_id: str, event_id: str, db: AsyncSession) -> Project:
    project = await db.get(Project, project_id, populate_existing=True)
    if project is None:
        raise ProjectNotFoundError(project_id)
    if project.event_id != event_id:
        raise EventMismatchError(project_id, event_id, project.event_id)
    if not project.is_scorable:
        raise ProjectNotScorableError(project_id, project.status.value)
    return project


async def submit_score(
    judge_id: str,
    project_id: str,
    event_id: str,
    per_criterion_scores: Mapping[str, object],
    comments: Optional[str],
    db: AsyncSession,
    private_notes: Optional[str] = None
) -> SubmissionResult:
    """
    Record a judge's score for a project.

    A repeated submission by the same judge replaces the previous one; it
    is never a second row. The caller has already authorized the judge.

    Args:
        judge_id: Judge identifier
        project_id: Project being scored
        event_id: Event the judge is scoring in
        per_criterion_scores: Raw rating per criterion id
        comments: Feedback visible to the team
        db: Database session
        private_notes: Judge-only notes

    Returns:
        SubmissionResult with the score id and stored total

    Raises:
        ProjectNotFoundError: Unknown project
        ScoreValidationError: Any rejected input; nothing was written
    """
    try:
        await load_scorable_project(project_id, event_id, db)
        criteria = await get_criteria(event_id, db)
        ratings = validate_ratings(event_id, criteria, per_criterion_scores)
        total = compute_judge_total(criteria, ratings)

        existing = await get_score(judge_id, project_id, db)

        score_id = await upsert_score(
            judge_id=judge_id,
            project_id=project_id,
            event_id=event_id,
            total_score=total,
            comments=comments,
            private_notes=private_notes,
            db=db,
        )
        for criteria_id, value in ratings.items():
            await upsert_score_detail(score_id, criteria_id, value, db)

        await db.commit()
    except ScoringError as e:
        await db.rollback()
        logger.warning(
            f"Rejected score from judge {judge_id} for project {project_id}: "
            f"{e.code} ({e.details.get('field')})"
        )
        raise
    except Exception:
        await db.rollback()
        raise

    created = existing is None
    logger.info(
        f"Score {score_id} {'created' if created else 'updated'}: "
        f"judge={judge_id} project={project_id} total={total:.4f}"
    )
    return SubmissionResult(score_id=score_id, total_score=total, created=created)
