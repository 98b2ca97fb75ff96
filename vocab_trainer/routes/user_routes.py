from fastapi import APIRouter, Depends, HTTPException, status

from vocab_trainer.auth.dependencies import get_user_store, require_role
from vocab_trainer.schemas import Identity, SessionClaims
from vocab_trainer.stores.users import UserStore

router = APIRouter(tags=['students'])


@router.get('', response_model=list[Identity])
def list_students(
    _teacher: SessionClaims = Depends(require_role('teacher')),
    users: UserStore = Depends(get_user_store),
) -> list[Identity]:
    return users.list_students()


@router.get('/{student_id}', response_model=Identity)
def get_student(
    student_id: str,
    _teacher: SessionClaims = Depends(require_role('teacher')),
    users: UserStore = Depends(get_user_store),
) -> Identity:
    identity = users.get_by_id(student_id)
    if identity is None or identity.role != 'student':
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Student not found.')
    return identity
