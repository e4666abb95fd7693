"""
hackjudge/services/judge_progress_service.py
Judge Progress Tracker and judge queue

Both are derived from the project feed and the Score rows on every call;
the tracker holds no state of its own.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.orm.project import Project, ProjectStatus
from hackjudge.orm.scoring import Score
from hackjudge.services.score_store import list_judge_scores

logger = logging.getLogger(__name__)


@dataclass
class JudgeProgress:
    judge_id: str
    event_id: str
    completed: int
    total: int

    @property
    def remaining(self) -> int:
        return max(self.total - self.completed, 0)

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return min(self.completed / self.total, 1.0) * 100

    def to_dict(self) -> Dict:
        return {
            "judge_id": self.judge_id,
            "event_id": self.event_id,
            "completed": self.completed,
            "total": self.total,
            "remaining": self.remaining,
            "percent": round(self.percent, 1),
        }


async def get_judge_progress(judge_id: str, event_id: str, db: AsyncSession) -> JudgeProgress:
    """
    How much of the event's queue a judge has scored.

    total counts the event's submitted projects; completed counts the
    distinct projects this judge has a Score row for in the event.
    """
    total = (await db.execute(
        select(func.count(Project.id)).where(
            Project.event_id == event_id,
            Project.status == ProjectStatus.SUBMITTED,
        )
    )).scalar_one()

    completed = (await db.execute(
        select(func.count(func.distinct(Score.project_id))).where(
            Score.judge_id == judge_id,
            Score.event_id == event_id,
        )
    )).scalar_one()

    logger.debug(f"Judge {judge_id} progress in event {event_id}: {completed}/{total}")
    return JudgeProgress(judge_id=judge_id, event_id=event_id, completed=completed, total=total)


# =============================================================================
# Judge queue
# =============================================================================

@dataclass
class QueueItem:
    project_id: str
    title: Optional[str]
    submitted_at: Optional[datetime]
    scored: bool
    total_score: Optional[float] = None
    ratings: Dict[str, float] = field(default_factory=dict)
    comments: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "project_id": self.project_id,
            "title": self.title,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "scored": self.scored,
            "total_score": self.total_score,
            "ratings": dict(self.ratings),
            "comments": self.comments,
        }


@dataclass
class JudgeQueue:
    judge_id: str
    event_id: str
    items: List[QueueItem]

    @property
    def next_project_id(self) -> Optional[str]:
        """First project in queue order the judge has not scored."""
        for item in self.items:
            if not item.scored:
                return item.project_id
        return None

    def to_dict(self) -> Dict:
        return {
            "judge_id": self.judge_id,
            "event_id": self.event_id,
            "next_project_id": self.next_project_id,
            "items": [item.to_dict() for item in self.items],
        }


async def get_judge_queue(judge_id: str, event_id: str, db: AsyncSession) -> JudgeQueue:
    """Submitted projects of the event in submission order, with the judge's own scores."""
    result = await db.execute(
        select(Project).where(
            Project.event_id == event_id,
            Project.status == ProjectStatus.SUBMITTED,
        ).execution_options(populate_existing=True)
    )
    projects = sorted(
        result.scalars().all(),
        key=lambda p: (p.submitted_at or datetime.max, p.id)
    )

    own_scores = await list_judge_scores(judge_id, event_id, db, [p.id for p in projects])

    items = []
    for project in projects:
        score = own_scores.get(project.id)
        items.append(QueueItem(
            project_id=project.id,
            title=project.title,
            submitted_at=project.submitted_at,
            scored=score is not None,
            total_score=score.total_score if score else None,
            ratings=score.ratings() if score else {},
            comments=score.comments if score else None,
        ))

    return JudgeQueue(judge_id=judge_id, event_id=event_id, items=items)
