import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from vocab_trainer.database import storage_errors
from vocab_trainer.models.offline_score import OfflineScore
from vocab_trainer.schemas import ALLOWED_OFFLINE_SCORES, OfflineTestScore, normalize_notes

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset of DateTime(timezone=True); stored values are always UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _to_record(row: OfflineScore) -> OfflineTestScore:
    return OfflineTestScore(
        id=row.id,
        student_id=row.student_id,
        teacher_id=row.teacher_id,
        score=row.score,
        notes=row.notes,
        date=_as_utc(row.date),
    )


class ScoreStore:
    """Append-only ledger of offline test grades.

    Rows are only ever inserted. The caller is trusted to have checked that
    ``teacher_id`` may grade ``student_id``. Retrying a failed ``add`` can
    create a duplicate row.
    """

    def __init__(self, session_factory: sessionmaker, clock: Callable[[], datetime] = _utcnow) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def add(self, student_id: str, teacher_id: str, score: int, notes: str | None = None) -> OfflineTestScore:
        if isinstance(score, bool) or score not in ALLOWED_OFFLINE_SCORES:
            raise ValueError(f'Score must be one of {ALLOWED_OFFLINE_SCORES}.')
        if not student_id or not teacher_id:
            raise ValueError('Student and teacher ids are required.')

        row = OfflineScore(
            id=str(uuid.uuid4()),
            student_id=student_id,
            teacher_id=teacher_id,
            score=score,
            notes=normalize_notes(notes),
            date=self._clock().astimezone(timezone.utc),
        )
        with storage_errors('offline score insert'), self._session_factory() as db, db.begin():
            db.add(row)
            db.flush()
            created = _to_record(row)

        logger.info('Recorded offline score %s for student %s', created.id, student_id)
        return created

    def list_by_student(self, student_id: str) -> list[OfflineTestScore]:
        query = (
            select(OfflineScore)
            .where(OfflineScore.student_id == student_id)
            .order_by(OfflineScore.date.desc())
        )
        with storage_errors('offline score listing'), self._session_factory() as db:
            return [_to_record(row) for row in db.execute(query).scalars()]

    def list_all(self) -> list[OfflineTestScore]:
        query = select(OfflineScore).order_by(OfflineScore.date.desc())
        with storage_errors('offline score listing'), self._session_factory() as db:
            return [_to_record(row) for row in db.execute(query).scalars()]
