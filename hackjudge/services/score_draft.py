"""
hackjudge/services/score_draft.py
In-progress judge ratings, merged into the store only on submit
"""
import math
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.exceptions import CriterionNotInEventError, EventMismatchError, ProjectNotFoundError
from hackjudge.orm.project import Project
from hackjudge.services.aggregation_engine import compute_judge_total
from hackjudge.services.criteria_registry import CriterionSpec, get_criteria, index_criteria
from hackjudge.services.score_store import get_score
from hackjudge.services.score_submission import SubmissionResult, submit_score


def default_rating(max_score: float) -> float:
    """Midpoint of the scale, half rounded up."""
    return float(math.floor(max_score / 2 + 0.5))


class ScoreDraft:
    """
    A judge's unsaved ratings for one project.

    Values are not range-checked while editing; submit() runs the full
    validation and writes everything in one transaction or nothing.
    """

    def __init__(
        self,
        judge_id: str,
        project_id: str,
        event_id: str,
        criteria: List[CriterionSpec],
        ratings: Optional[Dict[str, float]] = None,
        comments: Optional[str] = None,
        private_notes: Optional[str] = None,
        score_id: Optional[int] = None
    ):
        self.judge_id = judge_id
        self.project_id = project_id
        self.event_id = event_id
        self.criteria = list(criteria)
        self._by_id = index_criteria(self.criteria)
        self.comments = comments
        self.private_notes = private_notes
        self.score_id = score_id

        seeded = ratings or {}
        self.ratings: Dict[str, float] = {
            c.id: seeded.get(c.id, default_rating(c.max_score)) for c in self.criteria
        }

    @property
    def is_resubmission(self) -> bool:
        return self.score_id is not None

    def set_rating(self, criteria_id: str, value: float) -> None:
        if criteria_id not in self._by_id:
            raise CriterionNotInEventError(criteria_id, self.event_id)
        self.ratings[criteria_id] = value

    def preview_total(self) -> float:
        """Total the judge would get if the draft were submitted now."""
        return compute_judge_total(self.criteria, self.ratings)

    def to_dict(self) -> Dict:
        return {
            "judge_id": self.judge_id,
            "project_id": self.project_id,
            "event_id": self.event_id,
            "score_id": self.score_id,
            "ratings": dict(self.ratings),
            "comments": self.comments,
            "private_notes": self.private_notes,
            "preview_total": self.preview_total(),
            "criteria": [c.to_dict() for c in self.criteria],
        }

    async def submit(self, db: AsyncSession) -> SubmissionResult:
        result = await submit_score(
            judge_id=self.judge_id,
            project_id=self.project_id,
            event_id=self.event_id,
            per_criterion_scores=self.ratings,
            comments=self.comments,
            private_notes=self.private_notes,
            db=db,
        )
        self.score_id = result.score_id
        return result


async def load_draft(
    judge_id: str,
    project_id: str,
    event_id: str,
    db: AsyncSession
) -> ScoreDraft:
    """
    Draft seeded from the judge's stored ratings, or scale midpoints when the
    judge has not scored this project yet.

    Raises:
        ProjectNotFoundError: If the project feed never published this id
        EventMismatchError: If the project belongs to another event
    """
    project = await db.get(Project, project_id, populate_existing=True)
    if project is None:
        raise ProjectNotFoundError(project_id)
    if project.event_id != event_id:
        raise EventMismatchError(project_id, event_id, project.event_id)

    criteria = await get_criteria(event_id, db)
    existing = await get_score(judge_id, project_id, db)
    if existing is None:
        return ScoreDraft(judge_id, project_id, event_id, criteria)

    return ScoreDraft(
        judge_id,
        project_id,
        event_id,
        criteria,
        ratings=existing.ratings(),
        comments=existing.comments,
        private_notes=existing.private_notes,
        score_id=existing.id,
    )
