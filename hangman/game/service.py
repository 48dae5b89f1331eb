"""Game service — the operations callers invoke.

Ties the pieces together: the word catalog picks a word, the session store
holds the game, the engine applies guesses, the access guard decides who
may touch what, the history store records finished games, and the
statistics aggregator reduces history to a snapshot.

Role-dependent behavior is table-driven: _WORD_SCOPES decides where a new
game's word comes from, _HISTORY_SCOPES decides which history a caller sees
by default. Adding a role means adding a row, not another if-branch.

Tier 3 orchestration module: imports from hangman.game.* (Tier 2),
hangman.hooks.interfaces, hangman.errors, hangman.schemas (Tier 1).

Usage:
    service = GameService(catalog, history, sessions, guard, aggregator)
    start = await service.start_game(user)
    state = await service.guess_letter(user, start.session_id, "e")
"""

import logging
import random
from collections.abc import Awaitable, Callable
from datetime import date, datetime, time, timedelta, timezone

from hangman.errors import InvalidRequest, NoWordsAvailable
from hangman.game.engine import GameSession, GuessOutcome, GuessResult
from hangman.game.guard import AccessGuard
from hangman.game.sessions import InMemorySessionStore
from hangman.game.statistics import StatisticsAggregator
from hangman.hooks.interfaces import HistoryStore, WordCatalog
from hangman.schemas import (
    GameHistoryRecord,
    GameStart,
    GameState,
    HistoryEntry,
    StatisticsSnapshot,
    User,
    Word,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Role tables
# ---------------------------------------------------------------------------

# Each scope returns the catalog lookup to await, or None when the role
# can't resolve a scope from the ids given.
WordScope = Callable[[WordCatalog, User, str | None, str | None], Awaitable[list[Word]] | None]


def _admin_words(catalog, user, course_id, teacher_id):
    if teacher_id is None:
        return None
    return catalog.words_for_teacher(teacher_id)


def _teacher_words(catalog, user, course_id, teacher_id):
    if course_id is None:
        return None
    return catalog.words_for_course(course_id)


def _student_words(catalog, user, course_id, teacher_id):
    if user.course_id is None or user.teacher_id is None:
        return None
    return catalog.words_for_course_and_teacher(user.course_id, user.teacher_id)


_WORD_SCOPES: dict[str, WordScope] = {
    "admin": _admin_words,
    "teacher": _teacher_words,
    "student": _student_words,
}

_HISTORY_SCOPES: dict[str, Callable[[HistoryStore, User], Awaitable[list[GameHistoryRecord]]]] = {
    "admin": lambda history, user: history.find_all(),
    "teacher": lambda history, user: history.find_by_teacher_students(user.id),
    "student": lambda history, user: history.find_by_student(user.id),
}


def _day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Turns an inclusive date range into a half-open UTC datetime range."""
    return (
        datetime.combine(start, time.min, tzinfo=timezone.utc),
        datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc),
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class GameService:
    """Start, play, forfeit, and report on hangman games."""

    def __init__(
        self,
        catalog: WordCatalog,
        history: HistoryStore,
        sessions: InMemorySessionStore,
        guard: AccessGuard,
        aggregator: StatisticsAggregator,
        rng: random.Random | None = None,
    ) -> None:
        self._catalog = catalog
        self._history = history
        self._sessions = sessions
        self._guard = guard
        self._aggregator = aggregator
        self._rng = rng or random.Random()

    # -- play --------------------------------------------------------------

    async def start_game(
        self,
        user: User,
        course_id: str | None = None,
        teacher_id: str | None = None,
    ) -> GameStart:
        """Picks a word for the caller and opens a session on it.

        Raises:
            InvalidRequest: If the caller's role can't resolve a word scope
                from the given ids.
            NoWordsAvailable: If the scope holds no words.
        """
        word = await self._select_word(user, course_id, teacher_id)
        session_id = self._sessions.create(word, player=user)
        session = self._sessions.get(session_id)
        logger.info(
            "Game %s started by %s (%s), word length %d.",
            session_id, user.id, user.role, len(word.text),
        )
        return GameStart(
            session_id=session_id,
            word_length=len(word.text),
            masked_word=session.masked_word(),
            max_attempts=session.max_attempts,
            remaining_attempts=session.remaining_attempts,
        )

    async def guess_letter(self, user: User, session_id: str, letter: str) -> GameState:
        """Applies a guess and records history when it ends the game.

        Raises:
            SessionNotFound, AccessDenied, GameAlreadyComplete, InvalidRequest
        """
        session = self._authorized_session(user, session_id)
        result = session.guess(letter)
        if result.outcome is GuessOutcome.ALREADY_GUESSED:
            logger.debug("Game %s: letter %r already guessed.", session_id, letter)
        await self._record_if_finished(session, result)
        return result.state

    async def forfeit_game(self, user: User, session_id: str) -> GameState:
        """Gives up the game. A finished game is returned as-is, unrecorded."""
        session = self._authorized_session(user, session_id)
        result = session.forfeit_if_in_progress()
        await self._record_if_finished(session, result)
        return result.state

    async def current_status(self, user: User, session_id: str) -> GameState:
        session = self._authorized_session(user, session_id)
        return session.state()

    # -- reporting ---------------------------------------------------------

    async def history_for(
        self,
        user: User,
        student_id: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[HistoryEntry]:
        """Returns history entries visible to the caller.

        Without student_id, the caller's role decides the slice. With one,
        the access guard runs first. A date range (both ends inclusive)
        narrows either form.

        Raises:
            AccessDenied, NotFound, InvalidRequest
        """
        if (start is None) != (end is None):
            raise InvalidRequest("Both start and end dates are required for a period.")
        if start is not None and start > end:
            raise InvalidRequest("Start date must not be after end date.")

        if student_id is not None:
            await self._guard.check_student_history_access(user, student_id)
            if start is not None:
                lower, upper = _day_bounds(start, end)
                records = await self._history.find_by_student_and_date_range(
                    student_id, lower, upper
                )
            else:
                records = await self._history.find_by_student(student_id)
        else:
            records = await self._scoped_history(user)
            if start is not None:
                lower, upper = _day_bounds(start, end)
                records = [r for r in records if lower <= r.played_at < upper]

        return [HistoryEntry.from_record(r) for r in records]

    async def statistics(
        self,
        user: User,
        course_id: str | None = None,
        category: str | None = None,
    ) -> StatisticsSnapshot:
        """Builds a statistics snapshot over the caller's visible history.

        Raises:
            AccessDenied, NotFound
        """
        if course_id is not None:
            await self._guard.check_course_statistics_access(user, course_id)
            records = await self._history.find_by_course(course_id)
        else:
            records = await self._scoped_history(user)

        if category is not None:
            records = [r for r in records if r.word.category == category]

        return await self._aggregator.build(records, user)

    # -- helpers -----------------------------------------------------------

    async def _select_word(
        self, user: User, course_id: str | None, teacher_id: str | None
    ) -> Word:
        scope = _WORD_SCOPES.get(user.role)
        lookup = scope(self._catalog, user, course_id, teacher_id) if scope else None
        if lookup is None:
            raise InvalidRequest("Invalid game start request.")
        words = await lookup
        if not words:
            raise NoWordsAvailable("No words available.")
        return self._rng.choice(words)

    async def _scoped_history(self, user: User) -> list[GameHistoryRecord]:
        scope = _HISTORY_SCOPES.get(user.role)
        if scope is None:
            raise InvalidRequest(f"Unknown role: {user.role!r}.")
        return await scope(self._history, user)

    def _authorized_session(self, user: User, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        self._guard.check_session_access(user, session)
        return session

    async def _record_if_finished(self, session: GameSession, result: GuessResult) -> None:
        if not result.finished:
            return
        record = await self._history.append(self._build_record(session, result.state))
        logger.info(
            "Game %s finished: %s after %d wrong attempt(s), history id %s.",
            session.session_id,
            "won" if result.state.success else "lost",
            len(result.state.wrong_letters),
            record.id,
        )

    def _build_record(self, session: GameSession, state: GameState) -> GameHistoryRecord:
        player = session.player
        return GameHistoryRecord(
            student_id=session.player_id,
            course_id=player.course_id if player else None,
            teacher_id=player.teacher_id if player else None,
            word=session.word,
            success=state.success,
            attempts=len(state.wrong_letters),
            wrong_letters=",".join(state.wrong_letters),
        )
