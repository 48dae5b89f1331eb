"""In-memory course roster — development stub for CourseRoster.

Keeps known courses and (course_id, teacher_id) assignment pairs in sets.
A teacher may be assigned to several courses and a course may have several
teachers of record.

TEAM: Replace this with your roster tables. Subclass CourseRoster from
hangman.hooks.interfaces.

Tier 2 service module: imports from hangman.hooks.interfaces (Tier 1).

Usage:
    from hangman.hooks.roster import InMemoryCourseRoster

    roster = InMemoryCourseRoster()
    roster.assign("teacher-1", "course-1")
    await roster.is_assigned_teacher("course-1", "teacher-1")  # True
"""

from hangman.hooks.interfaces import CourseRoster


class InMemoryCourseRoster(CourseRoster):
    """STUB — set-backed assignments, loses data on restart."""

    def __init__(self) -> None:
        self._courses: set[str] = set()
        self._assignments: set[tuple[str, str]] = set()

    def add_course(self, course_id: str) -> None:
        """Registers a course. Stub convenience, not part of the ABC."""
        self._courses.add(course_id)

    def assign(self, teacher_id: str, course_id: str) -> None:
        """Makes teacher_id a teacher of record for course_id (adds the course too)."""
        self._courses.add(course_id)
        self._assignments.add((course_id, teacher_id))

    def unassign(self, teacher_id: str, course_id: str) -> None:
        """Removes an assignment. No-op if absent."""
        self._assignments.discard((course_id, teacher_id))

    async def course_exists(self, course_id: str) -> bool:
        return course_id in self._courses

    async def is_assigned_teacher(self, course_id: str, teacher_id: str) -> bool:
        return (course_id, teacher_id) in self._assignments

    async def courses_for_teacher(self, teacher_id: str) -> list[str]:
        return sorted(course for course, teacher in self._assignments if teacher == teacher_id)
