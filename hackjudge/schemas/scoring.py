"""
hackjudge/schemas/scoring.py
Pydantic schemas for score submission and project feed endpoints
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from hackjudge.orm.project import ProjectStatus


class ScoreSubmitRequest(BaseModel):
    """A judge's complete rating set for one project"""
    judge_id: str = Field(..., min_length=1, max_length=64)
    # Values are checked per criterion by the service so that a bad rating
    # is reported with its criterion id rather than as a body error
    scores: Dict[str, Any] = Field(default_factory=dict)
    comments: Optional[str] = None
    private_notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "judge_id": "judge-7",
                "scores": {
                    "innovation": 8,
                    "technical": 9,
                    "design": 7,
                    "impact": 8,
                    "presentation": 9
                },
                "comments": "Strong demo, clear architecture.",
                "private_notes": "Compare with team 12 before finals"
            }
        }


class ScoreSubmitResponse(BaseModel):
    success: bool = True
    score_id: int
    total_score: float
    created: bool


class ProjectStatusRequest(BaseModel):
    """One message of the project status feed"""
    status: ProjectStatus
    submitted_at: Optional[datetime] = None
    title: Optional[str] = Field(None, max_length=255)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "submitted",
                "submitted_at": "2025-03-01T14:05:00",
                "title": "Campus Carpool"
            }
        }


class CriterionResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    weight: float
    max_score: float
    order: int


class CriteriaListResponse(BaseModel):
    success: bool = True
    event_id: str
    uses_default: bool
    default_version: str
    criteria: List[CriterionResponse]
