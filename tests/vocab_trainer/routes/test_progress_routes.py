import pytest
from fastapi import HTTPException

from vocab_trainer.routes.progress_routes import get_progress, list_progress, save_progress
from vocab_trainer.schemas import SessionClaims, StudentRoundProgress

STUDENT = SessionClaims(id='s1', username='anna', role='student')
OTHER_STUDENT = SessionClaims(id='s2', username='boris', role='student')
TEACHER = SessionClaims(id='t1', username='Vladislav', role='teacher')


def _record(student_id: str = 's1', round_id: str = 'r1', score: int = 80) -> StudentRoundProgress:
    return StudentRoundProgress(
        student_id=student_id,
        unit_id='u1',
        round_id=round_id,
        score=score,
        attempts=[],
        completed=score == 100,
        timestamp=1,
    )


def test_save_progress_upserts_own_record(progress_store) -> None:
    assert save_progress(_record(), claims=STUDENT, store=progress_store) == {'status': 'ok'}
    assert save_progress(_record(score=100), claims=STUDENT, store=progress_store) == {'status': 'ok'}

    stored = progress_store.get('s1', 'u1', 'r1')
    assert stored.score == 100
    assert stored.completed is True


def test_save_progress_rejects_other_students_record(progress_store) -> None:
    with pytest.raises(HTTPException) as exception_info:
        save_progress(_record(student_id='s2'), claims=STUDENT, store=progress_store)

    assert exception_info.value.status_code == 403
    assert progress_store.get('s2', 'u1', 'r1') is None


def test_get_progress_returns_404_for_unplayed_round(progress_store) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_progress('u1', 'r1', student_id=None, claims=STUDENT, store=progress_store)

    assert exception_info.value.status_code == 404


def test_get_progress_requires_student_id_for_teachers(progress_store) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_progress('u1', 'r1', student_id=None, claims=TEACHER, store=progress_store)

    assert exception_info.value.status_code == 400


def test_teacher_reads_any_student_and_everyone(progress_store) -> None:
    progress_store.upsert(_record(student_id='s1'))
    progress_store.upsert(_record(student_id='s2'))

    single = get_progress('u1', 'r1', student_id='s2', claims=TEACHER, store=progress_store)
    everyone = list_progress(student_id=None, claims=TEACHER, store=progress_store)

    assert single.student_id == 's2'
    assert [item.student_id for item in everyone] == ['s1', 's2']


def test_student_only_lists_own_progress(progress_store) -> None:
    progress_store.upsert(_record(student_id='s1'))
    progress_store.upsert(_record(student_id='s2'))

    own = list_progress(student_id=None, claims=STUDENT, store=progress_store)

    assert [item.student_id for item in own] == ['s1']
    with pytest.raises(HTTPException) as exception_info:
        list_progress(student_id='s2', claims=STUDENT, store=progress_store)
    assert exception_info.value.status_code == 403
