"""Hook interfaces — abstract base classes for all swappable services.

These ABCs define the contracts between the game core and the
infrastructure around it: user accounts, the word catalog, the course
roster, and the durable play history. Each one has an in-memory stub that
lets the service run end-to-end without a database, and a production
implementation that the team wires in when ready.

Tier 1 leaf module: imports only from abc, datetime (stdlib) and
hangman.schemas (also Tier 1). No project services, no orchestration.

TEAM: To implement a real service, subclass the relevant ABC and implement
every abstract method. Python will raise TypeError at instantiation if
any method is missing — you'll know immediately what's left to do.

Usage:
    from hangman.hooks.interfaces import AuthService, WordCatalog
    from hangman.hooks.interfaces import HistoryStore, CourseRoster
"""

from abc import ABC, abstractmethod
from datetime import datetime

from hangman.schemas import GameHistoryRecord, User, Word


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class AuthService(ABC):
    """Validates auth tokens and resolves users.

    Credential issuance and password hashing live behind this interface.
    The game core never touches tokens directly; it asks the AuthService
    and gets a User back.

    TEAM: Replace the stub (FakeAuthService) with your auth provider.
    """

    @abstractmethod
    async def validate_token(self, token: str) -> User | None:
        """Validates an auth token and returns the associated user.

        Args:
            token: Auth token from the request.

        Returns:
            The User if the token is valid and not expired, None otherwise.
        """
        ...

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None:
        """Looks up a user by their ID.

        Used by the access guard to read a student's teacher of record.

        Args:
            user_id: The opaque user identifier.

        Returns:
            The User if found, None if the user doesn't exist.
        """
        ...


# ---------------------------------------------------------------------------
# Word catalog (read-only to the core)
# ---------------------------------------------------------------------------


class WordCatalog(ABC):
    """Supplies candidate words for a new game.

    The core picks uniformly at random from whatever list comes back and
    raises NoWordsAvailable if the list is empty. Ordering is irrelevant.

    TEAM: Replace the stub (InMemoryWordCatalog) with your word bank.
    """

    @abstractmethod
    async def words_for_teacher(self, teacher_id: str) -> list[Word]:
        """Returns every word registered by a teacher, across courses."""
        ...

    @abstractmethod
    async def words_for_course(self, course_id: str) -> list[Word]:
        """Returns every word belonging to a course."""
        ...

    @abstractmethod
    async def words_for_course_and_teacher(
        self, course_id: str, teacher_id: str
    ) -> list[Word]:
        """Returns the words a given teacher registered for a given course."""
        ...


# ---------------------------------------------------------------------------
# Course roster (teacher-of-record assignments)
# ---------------------------------------------------------------------------


class CourseRoster(ABC):
    """Answers which teachers are assigned to which courses.

    TEAM: Replace the stub (InMemoryCourseRoster) with your roster tables.
    """

    @abstractmethod
    async def course_exists(self, course_id: str) -> bool:
        """Returns True if the course is known."""
        ...

    @abstractmethod
    async def is_assigned_teacher(self, course_id: str, teacher_id: str) -> bool:
        """Returns True if the teacher is a teacher of record for the course."""
        ...

    @abstractmethod
    async def courses_for_teacher(self, teacher_id: str) -> list[str]:
        """Returns the ids of every course the teacher is assigned to."""
        ...


# ---------------------------------------------------------------------------
# History store (durable, append-only)
# ---------------------------------------------------------------------------


class HistoryStore(ABC):
    """Durable append-only log of finished games.

    Written once per terminal session, read by history and statistics
    queries. Records come back in append order.

    TEAM: Replace the stub (InMemoryHistoryStore) with your database.
    """

    @abstractmethod
    async def append(self, record: GameHistoryRecord) -> GameHistoryRecord:
        """Persists a record and returns it with its id assigned.

        Args:
            record: A record whose id is None.

        Returns:
            The stored record, id populated.
        """
        ...

    @abstractmethod
    async def find_by_student(self, student_id: str) -> list[GameHistoryRecord]:
        """Returns every record played by a student."""
        ...

    @abstractmethod
    async def find_by_teacher_students(self, teacher_id: str) -> list[GameHistoryRecord]:
        """Returns every record played by students whose teacher is teacher_id."""
        ...

    @abstractmethod
    async def find_by_course(self, course_id: str) -> list[GameHistoryRecord]:
        """Returns every record played by students of a course."""
        ...

    @abstractmethod
    async def find_by_student_and_date_range(
        self, student_id: str, start: datetime, end: datetime
    ) -> list[GameHistoryRecord]:
        """Returns a student's records with start <= played_at < end."""
        ...

    @abstractmethod
    async def find_all(self) -> list[GameHistoryRecord]:
        """Returns every record."""
        ...

    @abstractmethod
    async def average_success_for_teacher(self, teacher_id: str) -> float | None:
        """Average success (0.0-1.0) over all games played in the teacher's courses.

        Covers every student of every course the teacher is assigned to,
        not only the teacher's own students.

        Returns:
            The mean of success as 1.0/0.0, or None when there is nothing
            to average (no assignments or no games).
        """
        ...
