"""
hackjudge/services/leaderboard_service.py
Leaderboard Ranking Service

Rankings are computed fresh from committed Score rows on every read; nothing
here is persisted. Snapshots for rank movement are held by the caller.

RANKING ALGORITHM:
1. Scored projects (average_score not null) before unscored ones
2. average_score DESC
3. Tie-breaker 1: submitted_at ASC (missing timestamp sorts last)
4. Tie-breaker 2: project_id ASC (deterministic)
5. Rank = 1-based position; ties never share a rank
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.orm.project import Project, RANKABLE_STATUSES
from hackjudge.orm.scoring import Score
from hackjudge.services.aggregation_engine import (
    ProjectAggregate, aggregate_project, load_scores_by_project
)
from hackjudge.services.criteria_registry import get_criteria

logger = logging.getLogger(__name__)


class RankMovement(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"
    NEW = "new"


@dataclass
class LeaderboardEntry:
    """One ranked project; derived on read, never stored."""
    project_id: str
    rank: int
    average_score: Optional[float]
    judge_count: int
    submitted_at: Optional[datetime] = None
    title: Optional[str] = None
    previous_rank: Optional[int] = None
    criteria_breakdown: Dict[str, Optional[float]] = field(default_factory=dict)

    @property
    def rank_delta(self) -> Optional[int]:
        """Positive when the project moved up since the previous snapshot."""
        if self.previous_rank is None:
            return None
        return self.previous_rank - self.rank

    @property
    def movement(self) -> RankMovement:
        delta = self.rank_delta
        if delta is None:
            return RankMovement.NEW
        if delta > 0:
            return RankMovement.UP
        if delta < 0:
            return RankMovement.DOWN
        return RankMovement.SAME

    def to_dict(self) -> Dict:
        return {
            "project_id": self.project_id,
            "rank": self.rank,
            "average_score": self.average_score,
            "judge_count": self.judge_count,
            "title": self.title,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "previous_rank": self.previous_rank,
            "rank_delta": self.rank_delta,
            "movement": self.movement.value,
            "criteria_breakdown": dict(self.criteria_breakdown),
        }


@dataclass
class LeaderboardStats:
    event_id: str
    eligible_projects: int
    projects_judged: int
    total_scores: int
    active_judges: int

    def to_dict(self) -> Dict:
        return {
            "event_id": self.event_id,
            "eligible_projects": self.eligible_projects,
            "projects_judged": self.projects_judged,
            "total_scores": self.total_scores,
            "active_judges": self.active_judges,
        }


# =============================================================================
# Pure ranking
# =============================================================================

def ranking_key(project: Project, aggregate: ProjectAggregate):
    scored = aggregate.average_score is not None
    return (
        0 if scored else 1,
        -aggregate.average_score if scored else 0.0,
        project.submitted_at or datetime.max,
        project.id,
    )


def rank_projects(
    projects: Sequence[Project],
    aggregates: Mapping[str, ProjectAggregate],
    previous_ranks: Optional[Mapping[str, int]] = None
) -> List[LeaderboardEntry]:
    """
    Order projects and assign ranks.

    Args:
        projects: Eligible projects of one event
        aggregates: Aggregate per project id; missing means unscored
        previous_ranks: Prior snapshot of project_id -> rank, if any

    Returns:
        Entries in rank order
    """
    previous_ranks = previous_ranks or {}

    def aggregate_for(project: Project) -> ProjectAggregate:
        return aggregates.get(project.id) or ProjectAggregate(project.id, None, 0)

    ordered = sorted(projects, key=lambda p: ranking_key(p, aggregate_for(p)))

    entries = []
    for position, project in enumerate(ordered, start=1):
        aggregate = aggregate_for(project)
        entries.append(LeaderboardEntry(
            project_id=project.id,
            rank=position,
            average_score=aggregate.average_score,
            judge_count=aggregate.judge_count,
            submitted_at=project.submitted_at,
            title=project.title,
            previous_rank=previous_ranks.get(project.id),
            criteria_breakdown=aggregate.criteria_breakdown,
        ))
    return entries


def find_project_rank(entries: Sequence[LeaderboardEntry], project_id: str) -> Optional[int]:
    """Rank of one project in a computed leaderboard, or None if it is not on it."""
    for entry in entries:
        if entry.project_id == project_id:
            return entry.rank
    return None


def snapshot_ranks(entries: Sequence[LeaderboardEntry]) -> Dict[str, int]:
    """project_id -> rank, suitable as previous_ranks of a later call."""
    return {entry.project_id: entry.rank for entry in entries}


# =============================================================================
# DB-backed reads
# =============================================================================

async def get_rankable_projects(event_id: str, db: AsyncSession) -> List[Project]:
    result = await db.execute(
        select(Project)
        .where(
            Project.event_id == event_id,
            Project.status.in_(RANKABLE_STATUSES),
        )
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_leaderboard(
    event_id: str,
    db: AsyncSession,
    previous_ranks: Optional[Mapping[str, int]] = None,
    include_breakdown: bool = True
) -> List[LeaderboardEntry]:
    """
    Ranked leaderboard of an event.

    Never fails for missing data: an event without eligible projects yields
    an empty list, unscored projects rank after scored ones.

    Args:
        event_id: Event identifier
        db: Database session
        previous_ranks: Caller-held snapshot used for rank movement
        include_breakdown: Compute per-criterion averages per entry

    Returns:
        Entries in rank order
    """
    projects = await get_rankable_projects(event_id, db)
    scores = await load_scores_by_project([p.id for p in projects], db)
    criteria = await get_criteria(event_id, db) if include_breakdown else None

    aggregates = {
        p.id: aggregate_project(p.id, scores.get(p.id, []), criteria)
        for p in projects
    }
    entries = rank_projects(projects, aggregates, previous_ranks)

    logger.debug(f"Leaderboard for event {event_id}: {len(entries)} projects ranked")
    return entries


async def get_leaderboard_stats(event_id: str, db: AsyncSession) -> LeaderboardStats:
    eligible = (
        select(Project.id)
        .where(Project.event_id == event_id, Project.status.in_(RANKABLE_STATUSES))
    )

    eligible_projects = (await db.execute(
        select(func.count()).select_from(eligible.subquery())
    )).scalar_one()

    projects_judged = (await db.execute(
        select(func.count(func.distinct(Score.project_id)))
        .where(Score.project_id.in_(eligible))
    )).scalar_one()

    total_scores = (await db.execute(
        select(func.count(Score.id)).where(Score.project_id.in_(eligible))
    )).scalar_one()

    active_judges = (await db.execute(
        select(func.count(func.distinct(Score.judge_id))).where(Score.event_id == event_id)
    )).scalar_one()

    return LeaderboardStats(
        event_id=event_id,
        eligible_projects=eligible_projects,
        projects_judged=projects_judged,
        total_scores=total_scores,
        active_judges=active_judges,
    )
