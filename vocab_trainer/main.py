import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from vocab_trainer.auth.credentials import CredentialValidator
from vocab_trainer.auth.jwt_handler import SessionTokenIssuer
from vocab_trainer.core import config
from vocab_trainer.database import create_db_engine, create_session_factory, ensure_schema
from vocab_trainer.errors import AuthFailure, StorageError, StorageErrorKind, StorageUnavailable, TokenFailure
from vocab_trainer.routes import auth_routes, progress_routes, score_routes, user_routes
from vocab_trainer.stores.progress import ProgressStore
from vocab_trainer.stores.scores import ScoreStore
from vocab_trainer.stores.users import UserStore

logger = logging.getLogger(__name__)

STORAGE_ERROR_RESPONSES = {
    StorageErrorKind.CONNECTION_FAILURE: (status.HTTP_503_SERVICE_UNAVAILABLE, 'Database unavailable. Please retry.'),
    StorageErrorKind.CONSTRAINT_VIOLATION: (status.HTTP_409_CONFLICT, 'The record conflicts with existing data.'),
    StorageErrorKind.UNKNOWN: (status.HTTP_500_INTERNAL_SERVER_ERROR, 'The record could not be saved or loaded.'),
}


async def auth_failure_handler(request: Request, exc: AuthFailure) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={'detail': AuthFailure.message})


async def token_failure_handler(request: Request, exc: TokenFailure) -> JSONResponse:
    # Every kind looks the same to the client: log in again.
    logger.info('Rejected session token (%s) on %s', exc.kind.value, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={'detail': 'Not authenticated'},
        headers={'WWW-Authenticate': 'Bearer'},
    )


async def storage_unavailable_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={'detail': 'Login is temporarily unavailable. Please retry.'},
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    status_code, detail = STORAGE_ERROR_RESPONSES[exc.kind]
    return JSONResponse(status_code=status_code, content={'detail': detail})


def create_app(engine: Engine | None = None) -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL)
    config.validate_runtime_config()

    engine = engine or create_db_engine(config.DATABASE_URL, echo=config.DATABASE_ECHO)
    session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ensure_schema(engine)
        yield
        engine.dispose()

    app = FastAPI(title='Vocab Trainer API', lifespan=lifespan)

    app.state.user_store = UserStore(session_factory)
    app.state.progress_store = ProgressStore(session_factory)
    app.state.score_store = ScoreStore(session_factory)
    app.state.credential_validator = CredentialValidator(app.state.user_store)
    app.state.token_issuer = SessionTokenIssuer()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.add_exception_handler(AuthFailure, auth_failure_handler)
    app.add_exception_handler(TokenFailure, token_failure_handler)
    app.add_exception_handler(StorageUnavailable, storage_unavailable_handler)
    app.add_exception_handler(StorageError, storage_error_handler)

    @app.get('/')
    def root():
        return {'status': 'Vocab Trainer API Running'}

    app.include_router(auth_routes.router, prefix='/auth')
    app.include_router(user_routes.router, prefix='/students')
    app.include_router(progress_routes.router, prefix='/progress')
    app.include_router(score_routes.router, prefix='/scores')
    return app
