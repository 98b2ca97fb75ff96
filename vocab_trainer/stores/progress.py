"""Per-(student, unit, round) practice results.

Supported engines are PostgreSQL and SQLite. Every write is a single
``INSERT ... ON CONFLICT DO UPDATE`` so two writers
racing on the same key cannot lose an update or leave a half-written row.
The last statement the database applies wins; the client ``timestamp`` is
stored as given and never used to pick a winner.
"""

import logging

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import sessionmaker

from vocab_trainer.database import storage_errors
from vocab_trainer.errors import StorageError, StorageErrorKind
from vocab_trainer.models.progress import StudentProgress
from vocab_trainer.schemas import Attempt, StudentRoundProgress

logger = logging.getLogger(__name__)

# Passing this as the student id to list_by_student returns every student's progress.
ALL_STUDENTS = ''

KEY_COLUMNS = ('student_id', 'unit_id', 'round_id')
REPLACED_COLUMNS = ('score', 'attempts', 'completed', 'timestamp')


def _to_row(record: StudentRoundProgress) -> dict:
    return {
        'student_id': record.student_id,
        'unit_id': record.unit_id,
        'round_id': record.round_id,
        'score': record.score,
        'attempts': [attempt.model_dump(by_alias=True) for attempt in record.attempts],
        'completed': record.completed,
        'timestamp': record.timestamp,
    }


def _to_record(row: StudentProgress) -> StudentRoundProgress:
    return StudentRoundProgress(
        student_id=row.student_id,
        unit_id=row.unit_id,
        round_id=row.round_id,
        score=row.score,
        attempts=[Attempt.model_validate(attempt) for attempt in row.attempts or []],
        completed=row.completed,
        timestamp=row.timestamp,
    )


def build_upsert(dialect_name: str, row: dict):
    if dialect_name == 'postgresql':
        statement = postgresql.insert(StudentProgress).values(**row)
        return statement.on_conflict_do_update(
            index_elements=list(KEY_COLUMNS),
            set_={column: statement.excluded[column] for column in REPLACED_COLUMNS},
        )
    if dialect_name == 'sqlite':
        statement = sqlite.insert(StudentProgress).values(**row)
        return statement.on_conflict_do_update(
            index_elements=list(KEY_COLUMNS),
            set_={column: statement.excluded[column] for column in REPLACED_COLUMNS},
        )
    raise StorageError(StorageErrorKind.UNKNOWN, f'progress upsert on unsupported dialect {dialect_name}')


class ProgressStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def upsert(self, record: StudentRoundProgress) -> None:
        with storage_errors('progress upsert'), self._session_factory() as db, db.begin():
            statement = build_upsert(db.get_bind().dialect.name, _to_row(record))
            db.execute(statement)

        logger.debug(
            'Saved progress student=%s unit=%s round=%s',
            record.student_id,
            record.unit_id,
            record.round_id,
        )

    def get(self, student_id: str, unit_id: str, round_id: str) -> StudentRoundProgress | None:
        with storage_errors('progress lookup'), self._session_factory() as db:
            row = db.execute(
                select(StudentProgress).where(
                    StudentProgress.student_id == student_id,
                    StudentProgress.unit_id == unit_id,
                    StudentProgress.round_id == round_id,
                )
            ).scalar_one_or_none()
            return _to_record(row) if row is not None else None

    def list_by_student(self, student_id: str) -> list[StudentRoundProgress]:
        query = select(StudentProgress).order_by(
            StudentProgress.student_id,
            StudentProgress.unit_id,
            StudentProgress.round_id,
        )
        if student_id != ALL_STUDENTS:
            query = query.where(StudentProgress.student_id == student_id)

        with storage_errors('progress listing'), self._session_factory() as db:
            return [_to_record(row) for row in db.execute(query).scalars()]
