"""Hangman state machine — one live play-through of a single word.

A GameSession holds the word, the guessed and wrong letters, and derives
win/loss after every mutation. Sessions are owned by the session store;
everything here is synchronous and guarded by a per-session lock, so two
concurrent guesses can never interleave into an inconsistent wrong-letter
count.

Tier 2 service module: imports from hangman.errors and hangman.schemas
(Tier 1).

Usage:
    session = GameSession("a1b2", word, player=user)
    outcome = session.guess("c")     # GuessOutcome.APPLIED
    session.state().masked_word      # "C _ _"
"""

import string
import threading
import time
from dataclasses import dataclass
from enum import Enum

from hangman.errors import GameAlreadyComplete, InvalidRequest
from hangman.schemas import GameState, User, Word

DEFAULT_MAX_ATTEMPTS = 10
PLACEHOLDER = "_"

_ALPHABET = frozenset(string.ascii_uppercase)


class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


class GuessOutcome(str, Enum):
    APPLIED = "applied"
    ALREADY_GUESSED = "already_guessed"


@dataclass(frozen=True)
class GuessResult:
    """What a guess did, plus the state right after it.

    finished is True only for the guess that moved the session into a
    terminal state — exactly one caller ever sees it.
    """

    outcome: GuessOutcome
    state: GameState
    finished: bool = False


def normalize_letter(letter: str) -> str:
    """Returns the uppercase form of a single ASCII letter.

    Raises:
        InvalidRequest: If ``letter`` is not exactly one character A-Z
            (either case).
    """
    if not isinstance(letter, str) or len(letter) != 1:
        raise InvalidRequest("Guess must be a single letter A-Z.")
    upper = letter.upper()
    if upper not in _ALPHABET:
        raise InvalidRequest("Guess must be a single letter A-Z.")
    return upper


class GameSession:
    """Mutable game state for one word.

    Letter collections are kept in guess order (wrong letters are joined in
    that order when written to history). Accessors return tuples so callers
    can't reach the internal lists.
    """

    def __init__(
        self,
        session_id: str,
        word: Word,
        player: User | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock=time.monotonic,
    ) -> None:
        self._session_id = session_id
        self._word = word
        self._player = player
        self._max_attempts = max_attempts
        self._clock = clock
        self._guessed: list[str] = []
        self._wrong: list[str] = []
        self._status = GameStatus.IN_PROGRESS
        self._lock = threading.RLock()
        self.created_at = clock()
        self.last_accessed = self.created_at

    # -- read-only properties ----------------------------------------------

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def word(self) -> Word:
        return self._word

    @property
    def player(self) -> User | None:
        return self._player

    @property
    def player_id(self) -> str | None:
        return self._player.id if self._player else None

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def guessed_letters(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._guessed)

    @property
    def wrong_letters(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._wrong)

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def complete(self) -> bool:
        return self._status is not GameStatus.IN_PROGRESS

    @property
    def success(self) -> bool:
        return self._status is GameStatus.WON

    @property
    def remaining_attempts(self) -> int:
        with self._lock:
            return max(self._max_attempts - len(self._wrong), 0)

    # -- rendering ---------------------------------------------------------

    def masked_word(self) -> str:
        """Renders the word with unguessed letters as placeholders.

        Revealed letters keep the word's original case; tokens are separated
        by a single space.
        """
        with self._lock:
            tokens = [
                char if char.upper() in self._guessed else PLACEHOLDER
                for char in self._word.text
            ]
        return " ".join(tokens).strip()

    def state(self) -> GameState:
        """Returns a consistent snapshot of the session."""
        with self._lock:
            return GameState(
                masked_word=self.masked_word(),
                remaining_attempts=max(self._max_attempts - len(self._wrong), 0),
                guessed_letters=list(self._guessed),
                wrong_letters=list(self._wrong),
                complete=self.complete,
                success=self.success,
            )

    def touch(self) -> None:
        """Marks the session as accessed now (idle reaper bookkeeping)."""
        self.last_accessed = self._clock()

    # -- mutations ---------------------------------------------------------

    def guess(self, letter: str) -> GuessResult:
        """Applies one guessed letter.

        A letter already guessed is a no-op. The loss check runs before the
        win check.

        Raises:
            InvalidRequest: If ``letter`` is not a single ASCII letter.
            GameAlreadyComplete: If the session is already won, lost or
                forfeited.
        """
        upper = normalize_letter(letter)
        with self._lock:
            if self.complete:
                raise GameAlreadyComplete("Game is already complete.")
            if upper in self._guessed:
                return GuessResult(GuessOutcome.ALREADY_GUESSED, self.state())

            self._guessed.append(upper)
            if upper not in self._word.text.upper():
                self._wrong.append(upper)
            self._status = self._evaluate()
            return GuessResult(GuessOutcome.APPLIED, self.state(), finished=self.complete)

    def forfeit(self) -> GuessResult:
        """Ends the game as a loss, leaving accumulated letters untouched.

        Unconditional: the result is complete and unsuccessful whatever the
        prior progress. Only the call that moved an in-progress session to
        its terminal state reports finished=True, so callers record history
        at most once.
        """
        with self._lock:
            was_complete = self.complete
            self._status = GameStatus.LOST
            return GuessResult(GuessOutcome.APPLIED, self.state(), finished=not was_complete)

    def forfeit_if_in_progress(self) -> GuessResult:
        """Forfeits only when the game is still running, atomically.

        A finished game comes back unchanged with finished=False.
        """
        with self._lock:
            if self.complete:
                return GuessResult(GuessOutcome.APPLIED, self.state())
            return self.forfeit()

    def _evaluate(self) -> GameStatus:
        if len(self._wrong) >= self._max_attempts:
            return GameStatus.LOST
        if all(char in self._guessed for char in self._word.text.upper()):
            return GameStatus.WON
        return GameStatus.IN_PROGRESS
