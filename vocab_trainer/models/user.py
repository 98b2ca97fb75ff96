"""User model definitions."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, String
from vocab_trainer.database import Base

ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"
ROLES = (ROLE_TEACHER, ROLE_STUDENT)


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Represents a teacher or student account."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('teacher', 'student')", name="ck_users_role"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String)
    role = Column(String, nullable=False)  # teacher/student
    name = Column(String, nullable=False)
    email = Column(String)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
