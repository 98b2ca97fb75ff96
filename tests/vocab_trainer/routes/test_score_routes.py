import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from vocab_trainer.routes.score_routes import add_offline_score, list_offline_scores
from vocab_trainer.schemas import CreateOfflineScoreRequest, SessionClaims

STUDENT = SessionClaims(id='s1', username='anna', role='student')
TEACHER = SessionClaims(id='t1', username='Vladislav', role='teacher')


def test_create_offline_score_request_normalizes_notes() -> None:
    request = CreateOfflineScoreRequest(student_id='s1', score=4, notes='  Dictation  ')

    assert request.notes == 'Dictation'


@pytest.mark.parametrize('score', [1, 6, 0])
def test_create_offline_score_request_rejects_invalid_grade(score: int) -> None:
    with pytest.raises(ValidationError):
        CreateOfflineScoreRequest(student_id='s1', score=score)


def test_create_offline_score_request_rejects_long_notes() -> None:
    with pytest.raises(ValidationError):
        CreateOfflineScoreRequest(student_id='s1', score=4, notes='x' * 601)


def test_add_offline_score_records_calling_teacher(score_store) -> None:
    created = add_offline_score(
        CreateOfflineScoreRequest(studentId='s1', score=5),
        teacher=TEACHER,
        store=score_store,
    )

    assert created.teacher_id == 't1'
    assert created.student_id == 's1'


def test_list_offline_scores_scopes_by_role(score_store) -> None:
    score_store.add('s1', 't1', 5)
    score_store.add('s2', 't1', 3)

    assert {item.student_id for item in list_offline_scores(student_id=None, claims=TEACHER, store=score_store)} == {'s1', 's2'}
    assert [item.student_id for item in list_offline_scores(student_id='s2', claims=TEACHER, store=score_store)] == ['s2']
    assert [item.student_id for item in list_offline_scores(student_id=None, claims=STUDENT, store=score_store)] == ['s1']

    with pytest.raises(HTTPException) as exception_info:
        list_offline_scores(student_id='s2', claims=STUDENT, store=score_store)
    assert exception_info.value.status_code == 403
