"""
hackjudge/services/project_feed_service.py
Ingestion of the project status feed

The project service owns projects; this table only mirrors the fields
judging depends on. Each feed message replaces the stored values.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.database import dialect_insert
from hackjudge.orm.base import utcnow
from hackjudge.orm.project import Project, ProjectStatus

logger = logging.getLogger(__name__)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; offsets from the feed are resolved first."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


async def upsert_project_status(
    project_id: str,
    event_id: str,
    status: ProjectStatus,
    db: AsyncSession,
    submitted_at: Optional[datetime] = None,
    title: Optional[str] = None
) -> Project:
    """
    Insert or update the mirrored project.

    Args:
        project_id: Project identifier from the feed
        event_id: Event the project belongs to
        status: Current lifecycle status
        db: Database session
        submitted_at: Submission timestamp, None while in draft. Aware
            values are converted to naive UTC
        title: Display title

    Returns:
        The stored Project
    """
    status = ProjectStatus(status)
    submitted_at = to_naive_utc(submitted_at)
    now = utcnow()
    stmt = dialect_insert(db, Project).values(
        id=project_id,
        event_id=event_id,
        status=status,
        submitted_at=submitted_at,
        title=title,
        synced_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Project.id],
        set_={
            "event_id": stmt.excluded.event_id,
            "status": stmt.excluded.status,
            "submitted_at": stmt.excluded.submitted_at,
            "title": stmt.excluded.title,
            "synced_at": stmt.excluded.synced_at,
        },
    )
    try:
        await db.execute(stmt)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    result = await db.execute(
        select(Project)
        .where(Project.id == project_id)
        .execution_options(populate_existing=True)
    )
    project = result.scalar_one()
    logger.info(f"Project {project_id} synced: event={event_id} status={status.value}")
    return project
