"""Offline test score model definitions."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String
from vocab_trainer.database import Base


class OfflineScore(Base):
    """Represents a grade a teacher recorded for a test taken outside the app."""
    __tablename__ = "offline_scores"
    __table_args__ = (
        Index("idx_offline_scores_student_date", "student_id", "date"),
        CheckConstraint("score IN (2, 3, 4, 5)", name="ck_offline_scores_score"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String, nullable=False)
    teacher_id = Column(String, nullable=False)
    score = Column(Integer, nullable=False)
    notes = Column(String)
    date = Column(DateTime(timezone=True), nullable=False)
