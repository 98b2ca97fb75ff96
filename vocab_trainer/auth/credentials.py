import logging

from passlib.context import CryptContext

from vocab_trainer.auth.passwords import pwd_context, verify_password
from vocab_trainer.errors import BadCredentials, StorageError, StorageUnavailable
from vocab_trainer.schemas import Identity
from vocab_trainer.stores.users import UserRepository

logger = logging.getLogger(__name__)


class CredentialValidator:
    """Checks a username/password pair against the stored bcrypt hash.

    Unknown users and wrong passwords raise the same ``BadCredentials`` so the
    response does not reveal which usernames exist. Only the outcome is logged;
    the password and hash never reach a log call.
    """

    def __init__(self, users: UserRepository, context: CryptContext = pwd_context) -> None:
        self._users = users
        self._context = context

    def authenticate(self, username: str, password: str) -> Identity:
        try:
            user = self._users.get_by_username(username) if username else None
        except StorageError as exc:
            raise StorageUnavailable() from exc

        password_hash = user.password_hash if user is not None else None
        if not verify_password(password or '', password_hash, self._context) or user is None:
            logger.info('Login rejected')
            raise BadCredentials()

        logger.info('Login accepted for user %s', user.id)
        return user.to_identity()
