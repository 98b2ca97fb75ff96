import base64
import binascii
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import jwt
from pydantic import ValidationError

from vocab_trainer.core import config
from vocab_trainer.errors import TokenFailure, TokenFailureKind
from vocab_trainer.schemas import Identity, SessionClaims

REQUIRED_CLAIMS = ["id", "username", "role", "exp"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_canonical_segment(segment: str) -> bool:
    # base64url ignores trailing pad bits, so two spellings can decode to the same bytes.
    try:
        raw = base64.urlsafe_b64decode(segment + '=' * (-len(segment) % 4))
    except (binascii.Error, ValueError):
        return False
    return base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii') == segment


class SessionTokenIssuer:
    """Mints and verifies stateless HS256 session tokens.

    The payload holds exactly the ``SessionClaims`` fields plus ``exp``.
    There is no server-side record of issued tokens; expiry is the only way
    a token stops working.
    """

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expires_minutes: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret_key = secret_key or config.JWT_SECRET_KEY
        self._algorithm = algorithm or config.JWT_ALGORITHM
        self._expires = timedelta(
            minutes=config.JWT_EXPIRES_MINUTES if expires_minutes is None else expires_minutes
        )
        self._clock = clock

    def issue(self, identity: Identity | SessionClaims) -> str:
        claims = identity.claims() if isinstance(identity, Identity) else identity
        expire = self._clock() + self._expires
        payload = {
            "id": claims.id,
            "username": claims.username,
            "role": claims.role,
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> SessionClaims:
        if not isinstance(token, str) or token.count('.') != 2:
            raise TokenFailure(TokenFailureKind.MALFORMED)
        if not all(_is_canonical_segment(segment) for segment in token.split('.')):
            raise TokenFailure(TokenFailureKind.MALFORMED)

        try:
            # Expiry is checked below against the injected clock.
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "require": REQUIRED_CLAIMS},
            )
        except jwt.InvalidSignatureError as exc:
            raise TokenFailure(TokenFailureKind.SIGNATURE_INVALID) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenFailure(TokenFailureKind.MALFORMED) from exc

        exp = payload["exp"]
        if not isinstance(exp, int) or isinstance(exp, bool):
            raise TokenFailure(TokenFailureKind.MALFORMED)
        if exp <= int(self._clock().timestamp()):
            raise TokenFailure(TokenFailureKind.EXPIRED)

        try:
            return SessionClaims(id=payload["id"], username=payload["username"], role=payload["role"])
        except ValidationError as exc:
            raise TokenFailure(TokenFailureKind.MALFORMED) from exc
