"""Game API routes — play, history, statistics.

Ten endpoints under /api/v1/game:
- Play: start, guess, forfeit, current status
- History: own/role-scoped, per student, per student and period
- Statistics: role-scoped, per course, per word category

All responses use the ApiResponse envelope. Auth is enforced on every
endpoint via get_current_user; role and ownership rules live in the game
core (AccessGuard), whose errors main.py turns into 4xx envelopes.

Tier 3 orchestration module: imports from deps (Tier 2-3), game/service
(Tier 3), schemas (Tier 1).
"""

from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from hangman.api.deps import get_current_user, get_game_service
from hangman.game.service import GameService
from hangman.schemas import ApiResponse, User

router = APIRouter()


# ---------------------------------------------------------------------------
# Request bodies (API-boundary types, local to this module)
# ---------------------------------------------------------------------------


class StartGameRequest(BaseModel):
    """Request body for POST /start. Which field matters depends on the role."""

    course_id: str | None = None
    teacher_id: str | None = None


class GuessRequest(BaseModel):
    """Request body for POST /guess."""

    session_id: str
    letter: str


def _ok(data) -> dict:
    return ApiResponse(ok=True, data=data).model_dump(mode="json")


# ---------------------------------------------------------------------------
# Play
# ---------------------------------------------------------------------------


@router.post("/start")
async def start_game(
    body: StartGameRequest | None = None,
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    """Starts a game. Students draw from their own course and teacher;
    teachers need course_id, admins need teacher_id."""
    body = body or StartGameRequest()
    start = await service.start_game(user, body.course_id, body.teacher_id)
    return _ok(start)


@router.post("/guess")
async def guess_letter(
    body: GuessRequest,
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    state = await service.guess_letter(user, body.session_id, body.letter)
    return _ok(state)


@router.post("/forfeit/{session_id}")
async def forfeit_game(
    session_id: str,
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    state = await service.forfeit_game(user, session_id)
    return _ok(state)


@router.get("/current/{session_id}")
async def current_status(
    session_id: str,
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    state = await service.current_status(user, session_id)
    return _ok(state)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


@router.get("/history")
async def history(
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    """Admins see everything, teachers their students, students themselves."""
    entries = await service.history_for(user)
    return _ok(entries)


@router.get("/history/{student_id}")
async def student_history(
    student_id: str,
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    entries = await service.history_for(user, student_id)
    return _ok(entries)


@router.get("/history/{student_id}/period")
async def student_history_by_period(
    student_id: str,
    start_date: date,
    end_date: date,
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    """History within [start_date, end_date], both days inclusive."""
    entries = await service.history_for(user, student_id, start_date, end_date)
    return _ok(entries)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


@router.get("/statistics")
async def statistics(
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    snapshot = await service.statistics(user)
    return _ok(snapshot)


@router.get("/statistics/class/{course_id}")
async def class_statistics(
    course_id: str,
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    snapshot = await service.statistics(user, course_id=course_id)
    return _ok(snapshot)


@router.get("/statistics/category/{category}")
async def category_statistics(
    category: str,
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> dict:
    snapshot = await service.statistics(user, category=category)
    return _ok(snapshot)
