from fastapi import APIRouter, Depends

from vocab_trainer.auth.credentials import CredentialValidator
from vocab_trainer.auth.dependencies import get_credential_validator, get_current_claims, get_token_issuer
from vocab_trainer.auth.jwt_handler import SessionTokenIssuer
from vocab_trainer.schemas import LoginRequest, LoginResponse, SessionClaims

router = APIRouter(tags=['auth'])


@router.post('/login', response_model=LoginResponse)
def login(
    payload: LoginRequest,
    validator: CredentialValidator = Depends(get_credential_validator),
    issuer: SessionTokenIssuer = Depends(get_token_issuer),
) -> LoginResponse:
    identity = validator.authenticate(payload.username, payload.password)
    return LoginResponse(session_token=issuer.issue(identity), identity=identity)


@router.get('/me', response_model=SessionClaims)
def me(claims: SessionClaims = Depends(get_current_claims)) -> SessionClaims:
    return claims
