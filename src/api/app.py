"""FastAPI application factory + translation of domain errors into HTTP responses."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.api.routes import router
from src.core.config import get_settings
from src.core.exceptions import (
    EngineUnavailableError,
    GameError,
    GameStateError,
    PatternTooShortError,
    RepositoryError,
)
from src.core.log_config import configure_logging
from src.db.database import init_db

logger = logging.getLogger(__name__)

# Most specific first. Anything else deriving from GameError is a bad request.
ERROR_STATUS_CODES: tuple[tuple[type[GameError], int], ...] = (
    (RepositoryError, status.HTTP_404_NOT_FOUND),
    (PatternTooShortError, 422),
    (EngineUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (GameStateError, status.HTTP_409_CONFLICT),
)


def status_code_for(error: GameError) -> int:
    return next(
        (code for error_type, code in ERROR_STATUS_CODES if isinstance(error, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )


async def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code, content={"success": False, "message": str(exc)}
    )


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    init_db()
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Chess pattern board", lifespan=lifespan)
    app.include_router(router)
    app.add_exception_handler(GameError, handle_game_error)
    return app
