"""In-memory history store — development stub for HistoryStore.

Append-only list of finished games with an integer id counter. Course and
teacher slices use the course_id / teacher_id carried on each record; the
per-teacher average joins records against the course roster, the way the
real database joins game history against teacher assignments.

TEAM: Replace this with your real database. Subclass HistoryStore from
hangman.hooks.interfaces and implement every abstract method. Keep
average_success_for_teacher returning None (not 0.0) when there is nothing
to average — the statistics layer relies on that to return an empty
snapshot.

Tier 2 service module: imports from hangman.hooks.interfaces (Tier 1)
and hangman.schemas (Tier 1).

Usage:
    from hangman.hooks.history import InMemoryHistoryStore

    history = InMemoryHistoryStore(roster)
    stored = await history.append(record)
    await history.find_by_student("student-1")
"""

import itertools
from datetime import datetime

from hangman.hooks.interfaces import CourseRoster, HistoryStore
from hangman.schemas import GameHistoryRecord


class InMemoryHistoryStore(HistoryStore):
    """STUB — list-backed history, loses data on restart.

    TEAM: Replace with your database adapter. Satisfy the HistoryStore
    interface from hangman.hooks.interfaces.
    """

    def __init__(self, roster: CourseRoster) -> None:
        """Initialises an empty log.

        Args:
            roster: Used to resolve a teacher's courses for
                average_success_for_teacher.
        """
        self._roster = roster
        self._records: list[GameHistoryRecord] = []
        self._ids = itertools.count(1)

    async def append(self, record: GameHistoryRecord) -> GameHistoryRecord:
        stored = record.model_copy(update={"id": next(self._ids)})
        self._records.append(stored)
        return stored

    async def find_by_student(self, student_id: str) -> list[GameHistoryRecord]:
        return [r for r in self._records if r.student_id == student_id]

    async def find_by_teacher_students(self, teacher_id: str) -> list[GameHistoryRecord]:
        return [r for r in self._records if r.teacher_id == teacher_id]

    async def find_by_course(self, course_id: str) -> list[GameHistoryRecord]:
        return [r for r in self._records if r.course_id == course_id]

    async def find_by_student_and_date_range(
        self, student_id: str, start: datetime, end: datetime
    ) -> list[GameHistoryRecord]:
        return [
            r
            for r in self._records
            if r.student_id == student_id and start <= r.played_at < end
        ]

    async def find_all(self) -> list[GameHistoryRecord]:
        return list(self._records)

    async def average_success_for_teacher(self, teacher_id: str) -> float | None:
        courses = set(await self._roster.courses_for_teacher(teacher_id))
        outcomes = [1.0 if r.success else 0.0 for r in self._records if r.course_id in courses]
        if not outcomes:
            return None
        return sum(outcomes) / len(outcomes)
