"""
hackjudge/orm/criteria.py
Scoring criteria configured per event by event admins (read-only here)
"""
from sqlalchemy import Column, String, Text, Float, Integer, CheckConstraint, UniqueConstraint

from hackjudge.orm.base import Base


class Criterion(Base):
    """
    One weighted axis of evaluation for an event.

    Rows are written by the criteria configuration screens; the scoring
    engine only reads them.
    """
    __tablename__ = "criteria"

    id = Column(String(64), primary_key=True)
    event_id = Column(String(64), nullable=False, index=True)

    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)

    weight = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False)
    order = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("event_id", "order", name="uq_criteria_event_order"),
        CheckConstraint("weight > 0", name="ck_criteria_weight_positive"),
        CheckConstraint("max_score > 0", name="ck_criteria_max_score_positive"),
    )

    def __repr__(self):
        return f"<Criterion(id={self.id}, event={self.event_id}, name={self.name!r}, order={self.order})>"

    def to_dict(self):
        return {
            "id": self.id,
            "event_id": self.event_id,
            "name": self.name,
            "description": self.description,
            "weight": self.weight,
            "max_score": self.max_score,
            "order": self.order,
        }
