from .base import Base

from .criteria import Criterion
from .project import Project, ProjectStatus, RANKABLE_STATUSES, SCORABLE_STATUSES
from .scoring import Score, ScoreDetail


__all__ = [
    "Base",
    "Criterion",
    "Project",
    "ProjectStatus",
    "RANKABLE_STATUSES",
    "SCORABLE_STATUSES",
    "Score",
    "ScoreDetail",
]
