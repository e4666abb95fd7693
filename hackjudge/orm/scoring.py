"""
hackjudge/orm/scoring.py
Judge scores: one aggregate row per (judge, project) plus one detail row per criterion
"""
from sqlalchemy import (
    Column, Integer, String, Text, Float, ForeignKey,
    CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship

from hackjudge.orm.base import Base, BaseModel


class Score(BaseModel):
    """
    A judge's aggregate score for one project.

    The (judge_id, project_id) pair is unique: re-scoring goes through an
    upsert on that constraint and updates the existing row in place.
    """
    __tablename__ = "scores"

    project_id = Column(String(64), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    judge_id = Column(String(64), nullable=False, index=True)
    event_id = Column(String(64), nullable=False, index=True)

    # Weighted average of normalized ratings, 0-10
    total_score = Column(Float, nullable=False, default=0.0)

    comments = Column(Text, nullable=True)
    private_notes = Column(Text, nullable=True)  # visible to the judge only

    details = relationship(
        "ScoreDetail",
        back_populates="parent",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("judge_id", "project_id", name="uq_scores_judge_project"),
        CheckConstraint("total_score >= 0 AND total_score <= 10", name="ck_scores_total_range"),
    )

    def __repr__(self):
        return f"<Score(id={self.id}, judge={self.judge_id}, project={self.project_id}, total={self.total_score})>"

    def ratings(self):
        """Raw ratings keyed by criterion id."""
        return {detail.criteria_id: detail.score for detail in self.details}

    def to_dict(self, include_private=False):
        data = {
            "id": self.id,
            "project_id": self.project_id,
            "judge_id": self.judge_id,
            "event_id": self.event_id,
            "total_score": self.total_score,
            "comments": self.comments,
            "criteria_scores": [
                {"criteria_id": d.criteria_id, "score": d.score}
                for d in sorted(self.details, key=lambda d: d.criteria_id)
            ],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_private:
            data["private_notes"] = self.private_notes
        return data


class ScoreDetail(Base):
    """
    Raw rating of one criterion inside a Score.

    criteria_id is not a foreign key: events without configured criteria
    are scored against the built-in template, which has no rows.
    """
    __tablename__ = "score_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    score_id = Column(Integer, ForeignKey("scores.id", ondelete="CASCADE"), nullable=False, index=True)
    criteria_id = Column(String(64), nullable=False)
    score = Column(Float, nullable=False)

    parent = relationship("Score", back_populates="details")

    __table_args__ = (
        UniqueConstraint("score_id", "criteria_id", name="uq_score_details_score_criteria"),
        CheckConstraint("score >= 0", name="ck_score_details_non_negative"),
    )

    def __repr__(self):
        return f"<ScoreDetail(score={self.score_id}, criteria={self.criteria_id}, value={self.score})>"
