"""
hackjudge/services/criteria_registry.py
Ordered scoring criteria per event, with the built-in fallback template

Every code path that needs criteria (submission, draft preview, leaderboard
breakdown, offline recomputation) goes through get_criteria() so they all
see the same list, including the fallback.
"""
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.orm.criteria import Criterion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CriterionSpec:
    """Immutable view of a criterion used by the aggregation engine."""
    id: str
    name: str
    weight: float
    max_score: float
    order: int
    description: Optional[str] = None
    event_id: Optional[str] = None

    @classmethod
    def from_orm(cls, criterion: Criterion) -> "CriterionSpec":
        return cls(
            id=criterion.id,
            name=criterion.name,
            weight=float(criterion.weight),
            max_score=float(criterion.max_score),
            order=int(criterion.order),
            description=criterion.description,
            event_id=criterion.event_id,
        )

    def to_dict(self) -> Dict:
        return asdict(self)


# Bump when the template changes; totals computed under different versions
# are not comparable.
DEFAULT_CRITERIA_VERSION = "1"

DEFAULT_CRITERIA: Tuple[CriterionSpec, ...] = (
    CriterionSpec(
        id="innovation", name="Innovation", weight=25.0, max_score=10.0, order=1,
        description="How novel and creative is the solution?",
    ),
    CriterionSpec(
        id="technical", name="Technical Complexity", weight=25.0, max_score=10.0, order=2,
        description="How technically challenging?",
    ),
    CriterionSpec(
        id="design", name="Design & UX", weight=20.0, max_score=10.0, order=3,
        description="How polished and user-friendly?",
    ),
    CriterionSpec(
        id="impact", name="Impact", weight=20.0, max_score=10.0, order=4,
        description="How useful and impactful?",
    ),
    CriterionSpec(
        id="presentation", name="Presentation", weight=10.0, max_score=10.0, order=5,
        description="How well presented?",
    ),
)


def order_criteria(criteria: Iterable[CriterionSpec]) -> List[CriterionSpec]:
    """Display/iteration order: `order` ascending, then id ascending."""
    return sorted(criteria, key=lambda c: (c.order, c.id))


def default_criteria() -> List[CriterionSpec]:
    return order_criteria(DEFAULT_CRITERIA)


def index_criteria(criteria: Iterable[CriterionSpec]) -> Dict[str, CriterionSpec]:
    return {c.id: c for c in criteria}


async def get_configured_criteria(event_id: str, db: AsyncSession) -> List[CriterionSpec]:
    """Criteria rows stored for the event, without fallback."""
    result = await db.execute(
        select(Criterion)
        .where(Criterion.event_id == event_id)
        .execution_options(populate_existing=True)
    )
    return order_criteria(CriterionSpec.from_orm(c) for c in result.scalars().all())


async def get_criteria(event_id: str, db: AsyncSession) -> List[CriterionSpec]:
    """
    Ordered criteria for an event.

    An event with no configured criteria gets the default template. This is
    a configuration gap, not an error.

    Args:
        event_id: Event identifier
        db: Database session

    Returns:
        Criteria sorted by (order, id)
    """
    configured = await get_configured_criteria(event_id, db)
    if configured:
        return configured

    logger.debug(f"Event {event_id} has no criteria configured - using default template v{DEFAULT_CRITERIA_VERSION}")
    return default_criteria()


async def uses_default_criteria(event_id: str, db: AsyncSession) -> bool:
    return not await get_configured_criteria(event_id, db)
