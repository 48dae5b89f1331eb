"""Core data models — shared Pydantic types for the hangman service.

Words, callers, history records, statistics snapshots and API responses all
flow through these types. The live game session is not here: it carries a
lock and mutable letter sets, so it lives in hangman.game.engine.

This is a Tier 1 leaf module: it imports only from pydantic and the stdlib.
No project imports allowed — everything else imports from here.

Usage:
    from hangman.schemas import User, Word, GameHistoryRecord, ApiResponse
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

Role = Literal["admin", "teacher", "student"]


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class User(BaseModel):
    """Identity model returned by the auth layer.

    Frozen — users are identity objects, no mutation after creation.
    Students always carry course_id and teacher_id; the user-management
    collaborator enforces that, not this model.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    name: str
    course_id: str | None = None
    teacher_id: str | None = None


# ---------------------------------------------------------------------------
# Word catalog
# ---------------------------------------------------------------------------


class Word(BaseModel):
    """A word from the catalog. Read-only to the game core."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    category: str = ""
    difficulty: int = Field(default=1, ge=1, le=5)
    course_id: str
    teacher_id: str


# ---------------------------------------------------------------------------
# History (append-only)
# ---------------------------------------------------------------------------


class GameHistoryRecord(BaseModel):
    """Durable log entry for one finished (won, lost or forfeited) game.

    id is None until the HistoryStore assigns one on append. course_id and
    teacher_id are the player's own assignment at completion time, carried
    so that course and teacher slices don't need a join.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    student_id: str
    course_id: str | None = None
    teacher_id: str | None = None
    word: Word
    success: bool
    attempts: int
    wrong_letters: str = ""
    played_at: UtcDatetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Game responses
# ---------------------------------------------------------------------------


class GameStart(BaseModel):
    """Initial state handed back when a game starts."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    word_length: int
    masked_word: str
    max_attempts: int
    remaining_attempts: int


class GameState(BaseModel):
    """Snapshot of a session after a guess, a forfeit, or a status query."""

    model_config = ConfigDict(frozen=True)

    masked_word: str
    remaining_attempts: int
    guessed_letters: list[str] = Field(default_factory=list)
    wrong_letters: list[str] = Field(default_factory=list)
    complete: bool = False
    success: bool = False


class HistoryEntry(BaseModel):
    """One history row as shown to callers."""

    model_config = ConfigDict(frozen=True)

    id: int | None
    word: str
    success: bool
    attempts: int
    wrong_letters: str
    played_at: UtcDatetime

    @classmethod
    def from_record(cls, record: GameHistoryRecord) -> "HistoryEntry":
        return cls(
            id=record.id,
            word=record.word.text,
            success=record.success,
            attempts=record.attempts,
            wrong_letters=record.wrong_letters,
            played_at=record.played_at,
        )


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class StatisticsSnapshot(BaseModel):
    """Computed, non-persisted summary over a set of history records.

    progress_trend keys are ISO dates in ascending order; time_distribution
    keys are zero-padded "HH:00" buckets.
    """

    model_config = ConfigDict(frozen=True)

    total_games: int = 0
    games_won: int = 0
    games_lost: int = 0
    win_rate: float = 0.0
    average_attempts: float = 0.0
    most_missed_letters: str = ""
    best_performing_word: str = ""
    worst_performing_word: str = ""
    time_distribution: dict[str, int] = Field(default_factory=dict)
    progress_trend: dict[str, float] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# API envelope
# ---------------------------------------------------------------------------


class ApiError(BaseModel):
    """Error detail inside ApiResponse.error.

    code is an uppercase string like "SESSION_NOT_FOUND", "FORBIDDEN",
    "GAME_ALREADY_COMPLETE". Not an enum — the error vocabulary lives in
    hangman.errors.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class ApiResponse(BaseModel):
    """Universal response envelope — every API endpoint returns this shape."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    data: Any | None = None
    error: ApiError | None = None
