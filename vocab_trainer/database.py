import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DisconnectionError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from vocab_trainer.errors import StorageError, StorageErrorKind

logger = logging.getLogger(__name__)

Base = declarative_base()


def _is_in_memory_sqlite(database_url: str) -> bool:
    return database_url.split("://", 1)[-1] in {"", "/:memory:"}


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    # hide_parameters keeps bound values (password hashes included) out of error messages.
    if database_url.startswith("sqlite") and _is_in_memory_sqlite(database_url):
        # One shared connection, otherwise every session sees its own empty database.
        return create_engine(
            database_url,
            echo=echo,
            hide_parameters=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            hide_parameters=True,
            connect_args={"check_same_thread": False},
        )
    return create_engine(database_url, echo=echo, hide_parameters=True, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def ensure_schema(engine: Engine) -> None:
    # Imported here so the tables are registered on Base before create_all.
    from vocab_trainer.models import offline_score, progress, user  # noqa: F401

    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)
    existing_columns = {column['name'] for column in inspector.get_columns('users')}
    migration_steps = [
        ('email', 'ALTER TABLE users ADD COLUMN email VARCHAR'),
        ('created_at', 'ALTER TABLE users ADD COLUMN created_at TIMESTAMP'),
    ]

    with engine.begin() as connection:
        for column_name, statement in migration_steps:
            if column_name not in existing_columns:
                connection.execute(text(statement))
        # Progress tables created before the unique key existed still need it for ON CONFLICT.
        connection.execute(
            text(
                'CREATE UNIQUE INDEX IF NOT EXISTS uq_student_progress_key '
                'ON student_progress(student_id, unit_id, round_id)'
            )
        )
        connection.execute(
            text('CREATE INDEX IF NOT EXISTS idx_offline_scores_student_date ON offline_scores(student_id, date)')
        )


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy failures raised inside the block into StorageError."""
    try:
        yield
    except IntegrityError as exc:
        logger.warning('%s violated a constraint', operation)
        raise StorageError(StorageErrorKind.CONSTRAINT_VIOLATION, operation) from exc
    except (OperationalError, InterfaceError, DisconnectionError) as exc:
        logger.exception('%s could not reach the database', operation)
        raise StorageError(StorageErrorKind.CONNECTION_FAILURE, operation) from exc
    except SQLAlchemyError as exc:
        logger.exception('%s failed', operation)
        raise StorageError(StorageErrorKind.UNKNOWN, operation) from exc
