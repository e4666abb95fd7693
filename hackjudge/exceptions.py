"""
hackjudge/exceptions.py
Typed exceptions raised by the scoring services

Routers translate these into API errors (see hackjudge/errors.py).
"""
from typing import Any, Dict, Optional


class ScoringError(Exception):
    """Base exception for the scoring engine."""
    code: str = "SCORING_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        if code:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ProjectNotFoundError(ScoringError):
    """No project with this id has been published by the project feed."""
    code = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project '{project_id}' not found", details={"field": "project_id", "value": project_id})


class ScoreNotFoundError(ScoringError):
    code = "SCORE_NOT_FOUND"

    def __init__(self, score_id: int):
        super().__init__(f"Score {score_id} not found", details={"field": "score_id", "value": score_id})


class ScoreValidationError(ScoringError):
    """
    A submission was rejected; nothing was written.

    details["field"] names the input the judge has to correct.
    """
    code = "VALIDATION_ERROR"


class ProjectNotScorableError(ScoreValidationError):
    code = "PROJECT_NOT_SCORABLE"

    def __init__(self, project_id: str, status: str):
        super().__init__(
            f"Project '{project_id}' has status '{status}' and cannot be scored",
            details={"field": "project_id", "value": project_id, "status": status}
        )


class EventMismatchError(ScoreValidationError):
    code = "EVENT_MISMATCH"

    def __init__(self, project_id: str, event_id: str, project_event_id: str):
        super().__init__(
            f"Project '{project_id}' does not belong to event '{event_id}'",
            details={"field": "event_id", "value": event_id, "project_event_id": project_event_id}
        )


class CriterionNotInEventError(ScoreValidationError):
    code = "CRITERION_NOT_IN_EVENT"

    def __init__(self, criteria_id: str, event_id: str):
        super().__init__(
            f"Criterion '{criteria_id}' is not a scoring criterion of event '{event_id}'",
            details={"field": criteria_id, "event_id": event_id}
        )


class ScoreOutOfRangeError(ScoreValidationError):
    code = "SCORE_OUT_OF_RANGE"

    def __init__(self, criteria_id: str, value: Any, max_score: float):
        super().__init__(
            f"Score for '{criteria_id}' must be between 0 and {max_score:g}",
            details={"field": criteria_id, "value": value, "min": 0, "max": max_score}
        )
