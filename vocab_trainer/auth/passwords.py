"""Password hashing for teacher and student logins.

bcrypt through passlib, with the work factor taken from BCRYPT_ROUNDS.
"""
from passlib.context import CryptContext

from vocab_trainer.core import config


def build_password_context(rounds: int | None = None) -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=config.BCRYPT_ROUNDS if rounds is None else rounds,
    )


pwd_context = build_password_context()


def hash_password(plain: str, context: CryptContext = pwd_context) -> str:
    return context.hash(plain)


def verify_password(plain: str, hashed: str | None, context: CryptContext = pwd_context) -> bool:
    """Constant-time check of ``plain`` against ``hashed``.

    A missing or unrecognised hash still costs one bcrypt round trip so the
    caller cannot be timed into telling the cases apart.
    """
    if not hashed:
        context.dummy_verify()
        return False
    try:
        return context.verify(plain, hashed)
    except ValueError:
        context.dummy_verify()
        return False
