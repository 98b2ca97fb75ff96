import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from vocab_trainer.auth.passwords import hash_password
from vocab_trainer.database import storage_errors
from vocab_trainer.models.user import ROLE_STUDENT, ROLES, User
from vocab_trainer.schemas import Identity, UserRecord

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    def get_by_username(self, username: str) -> UserRecord | None: ...


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        username=user.username,
        password_hash=user.password_hash,
        role=user.role,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
    )


class UserStore:
    """SQL-backed user repository. Provisioning is the only write path."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get_by_username(self, username: str) -> UserRecord | None:
        with storage_errors('user lookup'), self._session_factory() as db:
            user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
            return _to_record(user) if user is not None else None

    def get_by_id(self, user_id: str) -> Identity | None:
        with storage_errors('user lookup'), self._session_factory() as db:
            user = db.get(User, user_id)
            return _to_record(user).to_identity() if user is not None else None

    def list_students(self) -> list[Identity]:
        with storage_errors('student listing'), self._session_factory() as db:
            users = db.execute(
                select(User).where(User.role == ROLE_STUDENT).order_by(User.name, User.username)
            ).scalars()
            return [_to_record(user).to_identity() for user in users]

    def create(
        self,
        *,
        username: str,
        password: str,
        name: str,
        role: str,
        email: str | None = None,
    ) -> Identity:
        if role not in ROLES:
            raise ValueError(f'Role must be one of {", ".join(ROLES)}.')
        if not username or not password:
            raise ValueError('Username and password are required.')

        password_hash = hash_password(password)
        with storage_errors('user creation'), self._session_factory() as db, db.begin():
            user = User(
                username=username,
                password_hash=password_hash,
                name=name,
                role=role,
                email=email or None,
            )
            db.add(user)
            db.flush()
            identity = _to_record(user).to_identity()

        logger.info('Created %s account %s', role, identity.id)
        return identity
