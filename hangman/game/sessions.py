"""In-memory session store and idle reaper for live games.

Dict-backed storage for GameSession objects, keyed by session_id. The dict
is never exposed; callers get create/get/remove/sweep. A store-level lock
guards the map and id allocation, so two concurrent creates can't receive
the same id and no live session is ever overwritten.

Sessions are ephemeral: nothing here survives a restart. Idle
in-progress sessions are evicted after session_idle_timeout; finished ones
linger for completed_retention so the player can still fetch the final
state, then go too. SessionReaper runs sweep() on an interval in the
background; get() also evicts lazily, so an expired session is never handed
out even between sweeps.

Tier 2 service module: imports from hangman.game.engine (Tier 2),
hangman.errors and hangman.schemas (Tier 1).

Usage:
    from hangman.game.sessions import InMemorySessionStore

    store = InMemorySessionStore(idle_timeout=1800, completed_retention=300)
    session_id = store.create(word, player=user)
    session = store.get(session_id)   # raises SessionNotFound if absent
"""

import asyncio
import logging
import threading
import time
import uuid
from collections.abc import Callable

from hangman.errors import SessionNotFound
from hangman.game.engine import DEFAULT_MAX_ATTEMPTS, GameSession
from hangman.schemas import User, Word

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """Lock-protected, process-wide registry of live game sessions.

    Timing uses a monotonic clock (injectable for tests). Expiry compares
    against each session's last_accessed, which get() refreshes.
    """

    def __init__(
        self,
        idle_timeout: float = 1800.0,
        completed_retention: float = 300.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        """Initialises an empty store.

        Args:
            idle_timeout: Seconds an in-progress session may go untouched
                before eviction.
            completed_retention: Seconds a finished session stays queryable
                after its last access.
            max_attempts: Wrong-letter budget for new sessions.
            clock: Monotonic time source in seconds.
            id_factory: Produces candidate session ids; regenerated on
                collision with a live session.
        """
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()
        self._idle_timeout = idle_timeout
        self._completed_retention = completed_retention
        self._max_attempts = max_attempts
        self._clock = clock
        self._id_factory = id_factory

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def create(self, word: Word, player: User | None = None) -> str:
        """Stores a fresh session for ``word`` and returns its id."""
        with self._lock:
            session_id = self._id_factory()
            while session_id in self._sessions:
                logger.debug("Session id collision on %s, regenerating.", session_id)
                session_id = self._id_factory()
            self._sessions[session_id] = GameSession(
                session_id,
                word,
                player=player,
                max_attempts=self._max_attempts,
                clock=self._clock,
            )
        return session_id

    def get(self, session_id: str) -> GameSession:
        """Returns a live session and refreshes its last access time.

        Raises:
            SessionNotFound: If the id is unknown or the session has expired.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None and self._is_expired(session, self._clock()):
                del self._sessions[session_id]
                logger.debug("Session %s expired on access.", session_id)
                session = None
            if session is None:
                raise SessionNotFound("Game session not found or expired.")
            session.touch()
            return session

    def remove(self, session_id: str) -> None:
        """Evicts a session right away. No-op if not found (idempotent).

        Finishing a game does not call this: a finished session stays
        fetchable for completed_retention and is then evicted by sweep() or
        on the next get(). Use remove() for an explicit early eviction.
        """
        with self._lock:
            self._sessions.pop(session_id, None)

    def sweep(self, now: float | None = None) -> list[str]:
        """Evicts every expired session.

        Args:
            now: Clock reading to compare against; defaults to the store's
                clock.

        Returns:
            The evicted session ids.
        """
        with self._lock:
            current = self._clock() if now is None else now
            expired = [
                session_id
                for session_id, session in self._sessions.items()
                if self._is_expired(session, current)
            ]
            for session_id in expired:
                del self._sessions[session_id]
        return expired

    def _is_expired(self, session: GameSession, now: float) -> bool:
        idle = now - session.last_accessed
        if session.complete:
            return idle > self._completed_retention
        return idle > self._idle_timeout


class SessionReaper:
    """Background task that sweeps a session store on a fixed interval.

    Started and stopped by the FastAPI lifespan in hangman.main. A sweep
    that raises is logged and the loop carries on.
    """

    def __init__(self, store: InMemorySessionStore, interval: float = 60.0) -> None:
        self._store = store
        self._interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedules the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="session-reaper")
        logger.info("Session reaper started (interval=%.0fs).", self._interval)

    async def stop(self) -> None:
        """Cancels the sweep loop and waits for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Session reaper stopped.")

    def sweep_once(self) -> list[str]:
        """Runs one sweep and logs what it evicted."""
        evicted = self._store.sweep()
        if evicted:
            logger.info(
                "Reaped %d stale session(s); %d live.", len(evicted), len(self._store)
            )
        return evicted

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.sweep_once()
            except Exception:
                logger.exception("Session sweep failed.")
