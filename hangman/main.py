"""FastAPI application — hangman API entry point.

create_app() assembles:
- the /api/v1 router (health + game routes under /game)
- CORS for the configured front-end origins
- per-request access logging (raw ASGI, bodies never buffered)
- one ApiResponse error envelope for every failure path: game-core errors,
  HTTP errors, request validation, and anything unexpected
- the session reaper, tied to the app lifespan

Run with: uvicorn hangman.main:app --reload

Tier 3 orchestration module: imports from config (Tier 2), deps (Tier 2),
errors and schemas (Tier 1).
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from hangman.config import get_settings
from hangman.errors import HangmanError
from hangman.schemas import ApiError, ApiResponse

logger = logging.getLogger("hangman")


# ---------------------------------------------------------------------------
# Access logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware:
    """One log line per HTTP request: method, path, status, elapsed ms.

    Headers, query strings and bodies are never logged, so bearer tokens
    and player guesses stay out of the logs.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.monotonic()
        status = 0

        async def capture_status(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message.get("status", 0)
            await send(message)

        try:
            await self.app(scope, receive, capture_status)
        finally:
            logger.info(
                "%s %s %d %.1fms",
                scope.get("method", "?"),
                scope.get("path", "?"),
                status,
                (time.monotonic() - started) * 1000,
            )


# ---------------------------------------------------------------------------
# Error envelopes
# ---------------------------------------------------------------------------


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ApiResponse(ok=False, error=ApiError(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _game_error_response(request: Request, exc: HangmanError) -> JSONResponse:
    """Game-core errors carry their own status and code."""
    logger.debug("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.code, exc.message)


def _http_exception_response(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Passes through details that are already envelopes (401s from deps)."""
    if isinstance(exc.detail, dict) and "ok" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail)
    return _error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))


def _describe_validation_error(exc: RequestValidationError) -> str:
    """First validation problem as "loc -> path: msg"."""
    errors = exc.errors()
    if not errors:
        return "Request validation failed."
    first = errors[0]
    location = " -> ".join(str(part) for part in first.get("loc", []))
    message = first.get("msg", "Validation error")
    return f"{location}: {message}" if location else message


def _validation_error_response(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(422, "VALIDATION_ERROR", _describe_validation_error(exc))


def _unhandled_exception_response(request: Request, exc: Exception) -> JSONResponse:
    """Logs the traceback; the client only ever sees a generic 500."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")


_EXCEPTION_HANDLERS = (
    (HangmanError, _game_error_response),
    (StarletteHTTPException, _http_exception_response),
    (RequestValidationError, _validation_error_response),
    (Exception, _unhandled_exception_response),
)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Sweeps stale game sessions in the background while the app serves."""
    # Imported here so the deps singletons are built after settings load.
    from hangman.api import deps
    from hangman.game.sessions import SessionReaper

    reaper = SessionReaper(
        deps.get_session_store(), interval=get_settings().reaper_interval_seconds
    )
    reaper.start()
    try:
        yield
    finally:
        await reaper.stop()


# ---------------------------------------------------------------------------
# App creation
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Builds the configured FastAPI application."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    application = FastAPI(
        title="Hangman",
        description="Classroom word-guessing game with play statistics",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Last added runs first: CORS wraps logging so preflights skip auth.
    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for exc_class, handler in _EXCEPTION_HANDLERS:
        application.add_exception_handler(exc_class, handler)

    application.include_router(_build_v1_router())

    logger.info(
        "Hangman API ready: env=%s, max_attempts=%d, teacher_stats_source=%s",
        settings.app_env,
        settings.max_attempts,
        settings.teacher_stats_source,
    )
    return application


def _build_v1_router() -> APIRouter:
    from hangman.api.game import router as game_router

    v1 = APIRouter(prefix="/api/v1")

    @v1.get("/health")
    async def health() -> dict[str, Any]:
        return ApiResponse(ok=True, data={"status": "healthy"}).model_dump()

    v1.include_router(game_router, prefix="/game", tags=["game"])
    return v1


app = create_app()
