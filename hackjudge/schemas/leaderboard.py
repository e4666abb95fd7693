"""
hackjudge/schemas/leaderboard.py
Pydantic schemas for leaderboard endpoints
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class LeaderboardCompareRequest(BaseModel):
    """Caller-held snapshot of an earlier leaderboard"""
    previous_ranks: Dict[str, int] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "previous_ranks": {"proj-a": 1, "proj-b": 2}
            }
        }


class LeaderboardEntryResponse(BaseModel):
    project_id: str
    rank: int
    average_score: Optional[float] = None
    judge_count: int
    title: Optional[str] = None
    submitted_at: Optional[str] = None
    previous_rank: Optional[int] = None
    rank_delta: Optional[int] = None
    movement: str
    criteria_breakdown: Dict[str, Optional[float]] = Field(default_factory=dict)


class LeaderboardResponse(BaseModel):
    success: bool = True
    event_id: str
    entries: List[LeaderboardEntryResponse]
    own_rank: Optional[int] = None
