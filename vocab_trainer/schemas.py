"""Typed payloads exchanged between the auth components, the stores and the routes."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["teacher", "student"]
OfflineGrade = Literal[2, 3, 4, 5]

ALLOWED_OFFLINE_SCORES = (2, 3, 4, 5)
MAX_NOTES_LENGTH = 600


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Identity(CamelModel):
    """Public-safe projection of a user; never carries credential material."""

    id: str
    username: str
    role: Role
    name: str

    def claims(self) -> "SessionClaims":
        return SessionClaims(id=self.id, username=self.username, role=self.role)


class SessionClaims(CamelModel):
    """The identity fields embedded in a session token."""

    id: str
    username: str
    role: Role


class UserRecord(CamelModel):
    id: str
    username: str
    password_hash: str | None = None
    role: Role
    name: str
    email: str | None = None
    created_at: datetime | None = None

    def to_identity(self) -> Identity:
        return Identity(id=self.id, username=self.username, role=self.role, name=self.name)


class Attempt(CamelModel):
    word_id: str
    user_answer: str
    correct: bool


class StudentRoundProgress(CamelModel):
    student_id: str = Field(min_length=1)
    unit_id: str = Field(min_length=1)
    round_id: str = Field(min_length=1)
    score: int = Field(ge=0, le=100)
    attempts: list[Attempt] = Field(default_factory=list)
    completed: bool = False
    timestamp: int = Field(ge=0)


class OfflineTestScore(CamelModel):
    id: str
    student_id: str
    teacher_id: str
    score: OfflineGrade
    notes: str | None = None
    date: datetime


def normalize_notes(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > MAX_NOTES_LENGTH:
        raise ValueError(f'Notes must be {MAX_NOTES_LENGTH} characters or fewer.')

    return normalized


class LoginRequest(CamelModel):
    username: str
    password: str


class LoginResponse(CamelModel):
    session_token: str
    token_type: str = "bearer"
    identity: Identity


class CreateOfflineScoreRequest(CamelModel):
    student_id: str = Field(min_length=1)
    score: OfflineGrade
    notes: str | None = None

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)
