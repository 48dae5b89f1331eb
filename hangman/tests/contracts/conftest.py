"""Fixtures for contract tests — one parameterized fixture per hook interface.

Each fixture yields a fresh implementation instance seeded with the same
small classroom: course-a taught by teacher-a, course-b taught by
teacher-b, one student in each. Today there's only the stub ("stub"
param). When the team adds a real implementation, they add a second param
value and an elif branch that seeds it the same way.

TEAM: To test your implementation against the contracts:
    1. Add your param string (e.g., "postgres") to the params list.
    2. Add an elif branch that yields your seeded implementation instance.
    3. Run: python -m pytest hangman/tests/contracts/ -v
    All tests should pass. If any fail, your implementation doesn't satisfy
    the contract — read the failing test's docstring for what's expected.

Uses @pytest_asyncio.fixture (not @pytest.fixture) for async fixture support
in strict mode.
"""

from datetime import datetime, timezone

import pytest_asyncio

from hangman.hooks.auth import FakeAuthService
from hangman.hooks.catalog import InMemoryWordCatalog
from hangman.hooks.history import InMemoryHistoryStore
from hangman.hooks.roster import InMemoryCourseRoster
from hangman.schemas import GameHistoryRecord, User, Word

STUDENT_A = User(
    id="student-a", role="student", name="Student A",
    course_id="course-a", teacher_id="teacher-a",
)
STUDENT_B = User(
    id="student-b", role="student", name="Student B",
    course_id="course-b", teacher_id="teacher-b",
)
TEACHER_A = User(id="teacher-a", role="teacher", name="Teacher A")

WORDS = [
    Word(id="w-1", text="apple", category="fruit", course_id="course-a", teacher_id="teacher-a"),
    Word(id="w-2", text="pear", category="fruit", course_id="course-a", teacher_id="teacher-b"),
    Word(id="w-3", text="plum", category="fruit", course_id="course-b", teacher_id="teacher-b"),
]


def _seeded_roster() -> InMemoryCourseRoster:
    roster = InMemoryCourseRoster()
    roster.assign("teacher-a", "course-a")
    roster.assign("teacher-b", "course-b")
    return roster


# ---------------------------------------------------------------------------
# Interface fixtures (parameterized for future implementations)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(params=["stub"])
async def auth_service(request):
    """Yields an AuthService that knows STUDENT_A, STUDENT_B and TEACHER_A."""
    if request.param == "stub":
        yield FakeAuthService([STUDENT_A, STUDENT_B, TEACHER_A])


@pytest_asyncio.fixture(params=["stub"])
async def word_catalog(request):
    """Yields a WordCatalog holding WORDS."""
    if request.param == "stub":
        yield InMemoryWordCatalog(WORDS)


@pytest_asyncio.fixture(params=["stub"])
async def course_roster(request):
    """Yields a CourseRoster with teacher-a on course-a, teacher-b on course-b."""
    if request.param == "stub":
        yield _seeded_roster()


@pytest_asyncio.fixture(params=["stub"])
async def history_store(request):
    """Yields an empty HistoryStore over the seeded roster.

    TEAM: A real store needs the same roster rows (teacher assignments)
    for average_success_for_teacher to work.
    """
    if request.param == "stub":
        yield InMemoryHistoryStore(_seeded_roster())


# ---------------------------------------------------------------------------
# Helper fixtures (shared test data)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def record_factory():
    """Returns a builder for records played by STUDENT_A unless overridden."""

    def _make(**overrides) -> GameHistoryRecord:
        defaults = {
            "student_id": STUDENT_A.id,
            "course_id": STUDENT_A.course_id,
            "teacher_id": STUDENT_A.teacher_id,
            "word": WORDS[0],
            "success": True,
            "attempts": 1,
            "wrong_letters": "Z",
            "played_at": datetime(2026, 2, 18, 10, 30, tzinfo=timezone.utc),
        }
        defaults.update(overrides)
        return GameHistoryRecord(**defaults)

    return _make
