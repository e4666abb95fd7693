"""
hackjudge/services/aggregation_engine.py
Judge totals and per-project aggregates

This module is the only place the scoring formulas live. Submission, the
judge draft preview, the leaderboard, the admin project list and total
verification all call into it.

FORMULAS:
    normalized_i = (raw_i / max_score_i) * 10
    judge_total  = sum(normalized_i * weight_i) / sum(weight_i)     (0..10)
    average      = mean(judge_total over judges)                    (None if no judge)

Sums go through math.fsum, which is exactly rounded and therefore does not
depend on the order the judges' rows come back in.
"""
import math
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.orm.project import Project, ProjectStatus
from hackjudge.orm.scoring import Score
from hackjudge.services.criteria_registry import CriterionSpec, get_criteria
from hackjudge.exceptions import ProjectNotFoundError

MAX_TOTAL = 10.0


def normalize_rating(raw_score: float, max_score: float) -> float:
    """Rescale a raw rating to 0..10."""
    if max_score <= 0:
        return 0.0
    return (float(raw_score) / float(max_score)) * MAX_TOTAL


def compute_judge_total(
    criteria: Sequence[CriterionSpec],
    ratings: Mapping[str, float]
) -> float:
    """
    Weighted average of one judge's normalized ratings.

    Criteria without a rating count as raw 0. Ratings for ids that are not
    in `criteria` are ignored. A zero total weight yields 0.

    Args:
        criteria: Active criteria of the event
        ratings: Raw ratings keyed by criterion id

    Returns:
        Judge total in [0, 10]
    """
    total_weight = math.fsum(c.weight for c in criteria)
    if total_weight <= 0:
        return 0.0

    weighted_sum = math.fsum(
        normalize_rating(ratings.get(c.id, 0.0) or 0.0, c.max_score) * c.weight
        for c in criteria
    )
    total = weighted_sum / total_weight
    return min(max(total, 0.0), MAX_TOTAL)


def mean_or_none(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return math.fsum(values) / len(values)


@dataclass
class ProjectAggregate:
    """Aggregate of all judges' totals for one project."""
    project_id: str
    average_score: Optional[float]
    judge_count: int
    criteria_breakdown: Dict[str, Optional[float]] = field(default_factory=dict)

    @property
    def is_scored(self) -> bool:
        return self.average_score is not None

    def to_dict(self) -> Dict:
        return {
            "project_id": self.project_id,
            "average_score": self.average_score,
            "judge_count": self.judge_count,
            "criteria_breakdown": dict(self.criteria_breakdown),
        }


def compute_criteria_breakdown(
    criteria: Sequence[CriterionSpec],
    ratings_by_judge: Iterable[Mapping[str, float]]
) -> Dict[str, Optional[float]]:
    """
    Mean normalized rating per criterion across the judges who rated it.
    """
    collected: Dict[str, List[float]] = OrderedDict((c.id, []) for c in criteria)
    max_scores = {c.id: c.max_score for c in criteria}

    for ratings in ratings_by_judge:
        for criteria_id, raw in ratings.items():
            if criteria_id in collected and raw is not None:
                collected[criteria_id].append(normalize_rating(raw, max_scores[criteria_id]))

    return {criteria_id: mean_or_none(values) for criteria_id, values in collected.items()}


def aggregate_project(
    project_id: str,
    scores: Iterable[Score],
    criteria: Optional[Sequence[CriterionSpec]] = None
) -> ProjectAggregate:
    """
    Aggregate stored Score rows of one project.

    Uses the stored total_score of each judge; one entry per distinct judge.
    The breakdown is only computed when criteria are given.
    """
    per_judge: Dict[str, Score] = {}
    for score in scores:
        per_judge[score.judge_id] = score

    totals = [float(s.total_score) for s in per_judge.values()]
    breakdown: Dict[str, Optional[float]] = {}
    if criteria is not None:
        breakdown = compute_criteria_breakdown(criteria, (s.ratings() for s in per_judge.values()))

    return ProjectAggregate(
        project_id=project_id,
        average_score=mean_or_none(totals),
        judge_count=len(per_judge),
        criteria_breakdown=breakdown,
    )


# =============================================================================
# DB-backed reads
# =============================================================================

async def load_scores_by_project(
    project_ids: Sequence[str],
    db: AsyncSession
) -> Dict[str, List[Score]]:
    """Committed Score rows (details loaded) grouped by project id."""
    grouped: Dict[str, List[Score]] = {pid: [] for pid in project_ids}
    if not project_ids:
        return grouped

    result = await db.execute(
        select(Score)
        .where(Score.project_id.in_(list(project_ids)))
        .order_by(Score.project_id, Score.judge_id)
        .execution_options(populate_existing=True)
    )
    for score in result.scalars().all():
        grouped.setdefault(score.project_id, []).append(score)
    return grouped


async def get_project_aggregate(
    project_id: str,
    db: AsyncSession,
    include_breakdown: bool = True
) -> ProjectAggregate:
    """
    Average score and judge count of one project.

    A project nobody has scored yet has average_score None; that is not an
    error.

    Raises:
        ProjectNotFoundError: If the project feed never published this id
    """
    project = await db.get(Project, project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)

    scores = (await load_scores_by_project([project_id], db))[project_id]
    criteria = await get_criteria(project.event_id, db) if include_breakdown else None
    return aggregate_project(project_id, scores, criteria)


async def get_project_scores(
    event_id: str,
    db: AsyncSession,
    status: Optional[ProjectStatus] = None
) -> List[Dict]:
    """
    Every project of an event with its aggregate, for the admin overview.

    Any status is listed unless `status` filters it. Newest submission
    first; never-submitted projects last, then by id.
    """
    query = select(Project).where(Project.event_id == event_id)
    if status is not None:
        query = query.where(Project.status == status)
    result = await db.execute(query.execution_options(populate_existing=True))
    projects = list(result.scalars().all())

    projects.sort(key=lambda p: p.id)
    projects.sort(key=lambda p: p.submitted_at or datetime.min, reverse=True)

    scores = await load_scores_by_project([p.id for p in projects], db)

    overview = []
    for project in projects:
        aggregate = aggregate_project(project.id, scores.get(project.id, []))
        row = project.to_dict()
        row["average_score"] = aggregate.average_score
        row["judge_count"] = aggregate.judge_count
        overview.append(row)
    return overview
