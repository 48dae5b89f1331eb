"""Shared FastAPI dependencies — auth, collaborators, game service injection.

Module-level singletons for each service stub. Route handlers access them
via FastAPI's Depends() system — never by importing stubs directly. When the
team swaps a stub for a real implementation, they change the class here and
every downstream handler picks it up automatically.

The session store is the one piece of process-wide mutable game state: it
starts empty, is never persisted, and is swept by the reaper that
hangman.main starts in the app lifespan.

TEAM: To wire your real services, replace the stub class on the right side
of each singleton assignment below. The get_* functions and all route
handlers stay unchanged.

Tier 2 service module: imports from hooks/* (Tier 2), hooks/interfaces
(Tier 1), game/* (Tier 2-3), schemas (Tier 1), config (Tier 2).

Usage:
    from hangman.api.deps import get_current_user, get_game_service

    @router.get("/something")
    async def do_thing(
        user: User = Depends(get_current_user),
        service: GameService = Depends(get_game_service),
    ): ...
"""

import logging

from fastapi import Depends, Header, HTTPException

from hangman.config import get_settings
from hangman.game.guard import AccessGuard
from hangman.game.service import GameService
from hangman.game.sessions import InMemorySessionStore
from hangman.game.statistics import StatisticsAggregator
from hangman.hooks.auth import FakeAuthService
from hangman.hooks.catalog import InMemoryWordCatalog
from hangman.hooks.history import InMemoryHistoryStore
from hangman.hooks.interfaces import (
    AuthService,
    CourseRoster,
    HistoryStore,
    WordCatalog,
)
from hangman.hooks.roster import InMemoryCourseRoster
from hangman.schemas import ApiError, ApiResponse, User

logger = logging.getLogger("hangman")


def _build_session_store() -> InMemorySessionStore:
    settings = get_settings()
    return InMemorySessionStore(
        idle_timeout=settings.session_idle_timeout_seconds,
        completed_retention=settings.completed_session_retention_seconds,
        max_attempts=settings.max_attempts,
    )


# ---------------------------------------------------------------------------
# Service singletons (the swap point)
# ---------------------------------------------------------------------------

# TEAM: Replace with your real implementations here.
_auth_service: AuthService = FakeAuthService()
_course_roster: CourseRoster = InMemoryCourseRoster()
_word_catalog: WordCatalog = InMemoryWordCatalog()
_history_store: HistoryStore = InMemoryHistoryStore(_course_roster)
_session_store: InMemorySessionStore = _build_session_store()


# ---------------------------------------------------------------------------
# Dependency providers
# ---------------------------------------------------------------------------


def get_auth_service() -> AuthService:
    """Returns the auth service singleton."""
    return _auth_service


def get_course_roster() -> CourseRoster:
    """Returns the course roster singleton."""
    return _course_roster


def get_word_catalog() -> WordCatalog:
    """Returns the word catalog singleton."""
    return _word_catalog


def get_history_store() -> HistoryStore:
    """Returns the history store singleton."""
    return _history_store


def get_session_store() -> InMemorySessionStore:
    """Returns the process-wide session store."""
    return _session_store


def get_game_service(
    auth_service: AuthService = Depends(get_auth_service),
    roster: CourseRoster = Depends(get_course_roster),
    catalog: WordCatalog = Depends(get_word_catalog),
    history: HistoryStore = Depends(get_history_store),
    sessions: InMemorySessionStore = Depends(get_session_store),
) -> GameService:
    """Assembles a GameService over the current singletons.

    Cheap to build per request; the state lives in the injected services.
    """
    settings = get_settings()
    return GameService(
        catalog=catalog,
        history=history,
        sessions=sessions,
        guard=AccessGuard(auth_service, roster),
        aggregator=StatisticsAggregator(history, teacher_source=settings.teacher_stats_source),
    )


# ---------------------------------------------------------------------------
# Auth dependency used by route handlers
# ---------------------------------------------------------------------------


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=ApiResponse(
            ok=False,
            error=ApiError(code="UNAUTHORIZED", message=message),
        ).model_dump(),
    )


async def get_current_user(
    authorization: str | None = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Extracts and validates a Bearer token from the Authorization header.

    Returns the authenticated User on success. Raises HTTPException(401)
    on missing header, malformed header, or invalid token.

    Raises:
        HTTPException: 401 with ApiResponse envelope on auth failure.
    """
    if not authorization:
        raise _unauthorized("Missing authorization header.")

    parts = authorization.split(" ", maxsplit=1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise _unauthorized("Invalid authorization header format.")

    user = await auth_service.validate_token(parts[1].strip())
    if user is None:
        raise _unauthorized("Invalid or expired token.")

    return user
