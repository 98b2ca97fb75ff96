from fastapi import APIRouter, Depends, Query, status

from vocab_trainer.auth.dependencies import get_current_claims, get_score_store, require_role, resolve_student_scope
from vocab_trainer.schemas import CreateOfflineScoreRequest, OfflineTestScore, SessionClaims
from vocab_trainer.stores.scores import ScoreStore

router = APIRouter(tags=['scores'])


@router.post('', response_model=OfflineTestScore, status_code=status.HTTP_201_CREATED)
def add_offline_score(
    payload: CreateOfflineScoreRequest,
    teacher: SessionClaims = Depends(require_role('teacher')),
    store: ScoreStore = Depends(get_score_store),
) -> OfflineTestScore:
    return store.add(payload.student_id, teacher.id, payload.score, payload.notes)


@router.get('', response_model=list[OfflineTestScore])
def list_offline_scores(
    student_id: str | None = Query(default=None, alias='studentId'),
    claims: SessionClaims = Depends(get_current_claims),
    store: ScoreStore = Depends(get_score_store),
) -> list[OfflineTestScore]:
    scope = resolve_student_scope(claims, student_id)
    if scope is None:
        return store.list_all()
    return store.list_by_student(scope)
