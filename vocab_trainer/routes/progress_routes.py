from fastapi import APIRouter, Depends, HTTPException, Query, status

from vocab_trainer.auth.dependencies import (
    get_current_claims,
    get_progress_store,
    require_role,
    resolve_student_scope,
)
from vocab_trainer.schemas import SessionClaims, StudentRoundProgress
from vocab_trainer.stores.progress import ALL_STUDENTS, ProgressStore

router = APIRouter(tags=['progress'])


@router.put('')
def save_progress(
    record: StudentRoundProgress,
    claims: SessionClaims = Depends(require_role('student')),
    store: ProgressStore = Depends(get_progress_store),
) -> dict:
    if record.student_id != claims.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Students can only save their own progress.',
        )
    store.upsert(record)
    return {'status': 'ok'}


@router.get('', response_model=list[StudentRoundProgress])
def list_progress(
    student_id: str | None = Query(default=None, alias='studentId'),
    claims: SessionClaims = Depends(get_current_claims),
    store: ProgressStore = Depends(get_progress_store),
) -> list[StudentRoundProgress]:
    scope = resolve_student_scope(claims, student_id)
    return store.list_by_student(scope if scope is not None else ALL_STUDENTS)


@router.get('/{unit_id}/{round_id}', response_model=StudentRoundProgress)
def get_progress(
    unit_id: str,
    round_id: str,
    student_id: str | None = Query(default=None, alias='studentId'),
    claims: SessionClaims = Depends(get_current_claims),
    store: ProgressStore = Depends(get_progress_store),
) -> StudentRoundProgress:
    scope = resolve_student_scope(claims, student_id)
    if scope is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='studentId is required.')

    record = store.get(scope, unit_id, round_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='No progress for this round yet.')
    return record
