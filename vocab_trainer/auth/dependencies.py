from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from vocab_trainer.auth.credentials import CredentialValidator
from vocab_trainer.auth.jwt_handler import SessionTokenIssuer
from vocab_trainer.errors import TokenFailure, TokenFailureKind
from vocab_trainer.schemas import Role, SessionClaims
from vocab_trainer.stores.progress import ProgressStore
from vocab_trainer.stores.scores import ScoreStore
from vocab_trainer.stores.users import UserStore

security = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> SessionTokenIssuer:
    return request.app.state.token_issuer


def get_credential_validator(request: Request) -> CredentialValidator:
    return request.app.state.credential_validator


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_progress_store(request: Request) -> ProgressStore:
    return request.app.state.progress_store


def get_score_store(request: Request) -> ScoreStore:
    return request.app.state.score_store


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    issuer: SessionTokenIssuer = Depends(get_token_issuer),
) -> SessionClaims:
    if credentials is None:
        raise TokenFailure(TokenFailureKind.MALFORMED)
    return issuer.decode(credentials.credentials)


def require_role(role: Role):
    def dependency(claims: SessionClaims = Depends(get_current_claims)) -> SessionClaims:
        if claims.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f'Only {role}s can perform this action.',
            )
        return claims

    return dependency


def resolve_student_scope(claims: SessionClaims, student_id: str | None) -> str | None:
    """Which student a read is about: students only ever see themselves.

    Returns ``None`` when a teacher asked for every student.
    """
    if claims.role == 'student':
        if student_id and student_id != claims.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Students can only view their own records.',
            )
        return claims.id
    return student_id or None
