"""Shared test fixtures for the game core and API tests.

Factory-pattern fixtures that return callables accepting **overrides, plus
a fully wired in-memory "classroom" used by service and API tests.

Fixtures:
    make_word: Factory for valid Word instances
    make_user: Factory for valid User instances (student by default)
    make_record: Factory for GameHistoryRecord instances
    classroom: Stubs + GameService seeded with one course, two teachers,
        two students, and a handful of words
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from hangman.game.guard import AccessGuard
from hangman.game.service import GameService
from hangman.game.sessions import InMemorySessionStore
from hangman.game.statistics import StatisticsAggregator
from hangman.hooks.auth import FakeAuthService
from hangman.hooks.catalog import InMemoryWordCatalog
from hangman.hooks.history import InMemoryHistoryStore
from hangman.hooks.roster import InMemoryCourseRoster
from hangman.schemas import GameHistoryRecord, User, Word


# ---------------------------------------------------------------------------
# Word / User / Record factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_word():
    """Returns a factory for Word instances. Defaults to "CAT" in course-1."""

    def _make(**overrides) -> Word:
        defaults = {
            "id": f"word-{uuid4().hex[:8]}",
            "text": "CAT",
            "category": "animals",
            "difficulty": 1,
            "course_id": "course-1",
            "teacher_id": "teacher-1",
        }
        defaults.update(overrides)
        return Word(**defaults)

    return _make


@pytest.fixture
def make_user():
    """Returns a factory for User instances. Defaults to a course-1 student."""

    def _make(**overrides) -> User:
        defaults = {
            "id": f"student-{uuid4().hex[:8]}",
            "role": "student",
            "name": "Test Student",
            "course_id": "course-1",
            "teacher_id": "teacher-1",
        }
        defaults.update(overrides)
        return User(**defaults)

    return _make


@pytest.fixture
def make_record(make_word):
    """Returns a factory for GameHistoryRecord instances.

    Accepts ``word`` as a Word or a plain string (turned into a Word whose
    id equals the text).
    """

    def _make(**overrides) -> GameHistoryRecord:
        word = overrides.pop("word", "CAT")
        if isinstance(word, str):
            word = make_word(id=f"word-{word}", text=word)
        defaults = {
            "student_id": "student-1",
            "course_id": "course-1",
            "teacher_id": "teacher-1",
            "word": word,
            "success": True,
            "attempts": 0,
            "wrong_letters": "",
            "played_at": datetime(2026, 3, 2, 9, 15, tzinfo=timezone.utc),
        }
        defaults.update(overrides)
        return GameHistoryRecord(**defaults)

    return _make


# ---------------------------------------------------------------------------
# Wired classroom
# ---------------------------------------------------------------------------


@dataclass
class Classroom:
    """Everything a service-level test needs, already wired together."""

    auth: FakeAuthService
    roster: InMemoryCourseRoster
    catalog: InMemoryWordCatalog
    history: InMemoryHistoryStore
    sessions: InMemorySessionStore
    service: GameService
    admin: User
    teacher: User
    other_teacher: User
    student: User
    other_student: User
    outsider: User


def build_classroom(teacher_source: str = "class_average") -> Classroom:
    """Seeds course-1 (teacher-1, word CAT) and course-2 (teacher-2, word DOG)."""
    admin = User(id="admin-1", role="admin", name="Admin")
    teacher = User(id="teacher-1", role="teacher", name="Teacher One")
    other_teacher = User(id="teacher-2", role="teacher", name="Teacher Two")
    student = User(
        id="student-1", role="student", name="Student One",
        course_id="course-1", teacher_id="teacher-1",
    )
    other_student = User(
        id="student-2", role="student", name="Student Two",
        course_id="course-1", teacher_id="teacher-1",
    )
    outsider = User(
        id="student-3", role="student", name="Student Three",
        course_id="course-2", teacher_id="teacher-2",
    )

    auth = FakeAuthService([admin, teacher, other_teacher, student, other_student, outsider])
    roster = InMemoryCourseRoster()
    roster.assign("teacher-1", "course-1")
    roster.assign("teacher-2", "course-2")

    catalog = InMemoryWordCatalog([
        Word(id="w-cat", text="cat", category="animals", course_id="course-1", teacher_id="teacher-1"),
        Word(id="w-dog", text="dog", category="animals", course_id="course-2", teacher_id="teacher-2"),
    ])
    history = InMemoryHistoryStore(roster)
    sessions = InMemorySessionStore()
    service = GameService(
        catalog=catalog,
        history=history,
        sessions=sessions,
        guard=AccessGuard(auth, roster),
        aggregator=StatisticsAggregator(history, teacher_source=teacher_source),
    )
    return Classroom(
        auth=auth,
        roster=roster,
        catalog=catalog,
        history=history,
        sessions=sessions,
        service=service,
        admin=admin,
        teacher=teacher,
        other_teacher=other_teacher,
        student=student,
        other_student=other_student,
        outsider=outsider,
    )


@pytest.fixture
def classroom() -> Classroom:
    """A freshly seeded in-memory classroom per test."""
    return build_classroom()


@pytest.fixture
def make_classroom():
    """Returns build_classroom, for tests that need a non-default configuration."""
    return build_classroom
