"""
hackjudge/orm/project.py
Read model of projects, fed by the project status feed
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum

from hackjudge.orm.base import Base, utcnow


class ProjectStatus(str, PyEnum):
    """Project lifecycle status as published by the project service"""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    FINALIST = "finalist"
    WINNER = "winner"
    DISQUALIFIED = "disqualified"


# Submitted or further along; drafts and disqualified projects never rank
RANKABLE_STATUSES = (
    ProjectStatus.SUBMITTED,
    ProjectStatus.UNDER_REVIEW,
    ProjectStatus.FINALIST,
    ProjectStatus.WINNER,
)

SCORABLE_STATUSES = (ProjectStatus.SUBMITTED,)


class Project(Base):
    """
    Fields of an externally owned project that judging depends on.
    """
    __tablename__ = "projects"

    id = Column(String(64), primary_key=True)
    event_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    status = Column(SQLEnum(ProjectStatus), default=ProjectStatus.DRAFT, nullable=False, index=True)
    submitted_at = Column(DateTime, nullable=True)

    synced_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Project(id={self.id}, event={self.event_id}, status={self.status})>"

    @property
    def is_rankable(self) -> bool:
        return self.status in RANKABLE_STATUSES

    @property
    def is_scorable(self) -> bool:
        return self.status in SCORABLE_STATUSES

    def to_dict(self):
        return {
            "id": self.id,
            "event_id": self.event_id,
            "title": self.title,
            "status": self.status.value if self.status else None,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }
