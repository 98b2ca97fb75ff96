import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from vocab_trainer.database import create_db_engine, ensure_schema, storage_errors
from vocab_trainer.errors import StorageError, StorageErrorKind


@pytest.mark.parametrize(
    ('raised', 'kind'),
    [
        (IntegrityError('INSERT', {}, Exception('duplicate key')), StorageErrorKind.CONSTRAINT_VIOLATION),
        (OperationalError('SELECT', {}, Exception('connection refused')), StorageErrorKind.CONNECTION_FAILURE),
        (ProgrammingError('SELECT', {}, Exception('syntax error')), StorageErrorKind.UNKNOWN),
    ],
)
def test_storage_errors_translates_sqlalchemy_failures(raised, kind) -> None:
    with pytest.raises(StorageError) as exception_info:
        with storage_errors('test operation'):
            raise raised

    assert exception_info.value.kind is kind
    assert exception_info.value.operation == 'test operation'
    assert exception_info.value.__cause__ is raised


def test_storage_errors_leaves_other_exceptions_alone() -> None:
    with pytest.raises(ValueError):
        with storage_errors('test operation'):
            raise ValueError('not a database problem')


def test_in_memory_engine_shares_one_database_across_connections() -> None:
    engine = create_db_engine('sqlite://')
    try:
        with engine.begin() as connection:
            connection.execute(text('CREATE TABLE marker (id INTEGER)'))

        assert 'marker' in inspect(engine).get_table_names()
    finally:
        engine.dispose()


def test_ensure_schema_migrates_legacy_tables(tmp_path) -> None:
    engine = create_engine(f'sqlite:///{tmp_path / "legacy.db"}')
    with engine.begin() as connection:
        connection.execute(text('CREATE TABLE users (id VARCHAR PRIMARY KEY, username VARCHAR, password_hash VARCHAR, role VARCHAR, name VARCHAR)'))
        connection.execute(text(
            'CREATE TABLE student_progress (id INTEGER PRIMARY KEY, student_id VARCHAR, unit_id VARCHAR, '
            'round_id VARCHAR, score INTEGER, attempts JSON, completed BOOLEAN, timestamp BIGINT)'
        ))

    ensure_schema(engine)
    ensure_schema(engine)

    inspector = inspect(engine)
    user_columns = {column['name'] for column in inspector.get_columns('users')}
    progress_indexes = {index['name']: index for index in inspector.get_indexes('student_progress')}
    assert {'email', 'created_at'} <= user_columns
    assert progress_indexes['uq_student_progress_key']['unique']
    assert 'offline_scores' in inspector.get_table_names()
    engine.dispose()
