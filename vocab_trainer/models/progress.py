"""Per-round practice progress model definitions."""

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, Index, Integer, JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from vocab_trainer.database import Base


class StudentProgress(Base):
    """One row per (student, unit, round); rewritten in place by every upsert."""
    __tablename__ = "student_progress"
    __table_args__ = (
        Index("uq_student_progress_key", "student_id", "unit_id", "round_id", unique=True),
        CheckConstraint("score >= 0 AND score <= 100", name="ck_student_progress_score"),
    )

    id = Column(Integer, primary_key=True)
    student_id = Column(String, nullable=False, index=True)
    unit_id = Column(String, nullable=False)
    round_id = Column(String, nullable=False)
    score = Column(Integer, nullable=False)
    attempts = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)
    completed = Column(Boolean, nullable=False, default=False)
    timestamp = Column(BigInteger, nullable=False)  # epoch milliseconds, client supplied
