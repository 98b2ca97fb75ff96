import os

import pytest

# Test-mode runtime guards:
# - cheapest bcrypt work factor so hashing does not dominate the run
# - a fixed signing secret long enough for HS256
os.environ.setdefault('APP_ENV', 'test')
os.environ.setdefault('BCRYPT_ROUNDS', '4')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-that-is-at-least-32-bytes')
os.environ.setdefault('DATABASE_URL', 'sqlite://')

from vocab_trainer.database import create_db_engine, create_session_factory, ensure_schema  # noqa: E402
from vocab_trainer.stores.progress import ProgressStore  # noqa: E402
from vocab_trainer.stores.scores import ScoreStore  # noqa: E402
from vocab_trainer.stores.users import UserStore  # noqa: E402


@pytest.fixture
def engine():
    engine = create_db_engine('sqlite://')
    ensure_schema(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def user_store(session_factory) -> UserStore:
    return UserStore(session_factory)


@pytest.fixture
def progress_store(session_factory) -> ProgressStore:
    return ProgressStore(session_factory)


@pytest.fixture
def score_store(session_factory) -> ScoreStore:
    return ScoreStore(session_factory)


@pytest.fixture
def teacher(user_store):
    return user_store.create(username='Vladislav', password='Vladislav15', name='Vladislav', role='teacher')


@pytest.fixture
def student(user_store):
    return user_store.create(username='anna', password='anna-pass', name='Anna', role='student')
