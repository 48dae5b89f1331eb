"""Access guard — who may touch a session or a slice of play history.

Pure authorization checks: each method returns None on success and raises
AccessDenied (or NotFound for an unknown reference) otherwise, so a denial
always short-circuits the caller before anything is mutated. The only I/O
is reading a student's teacher of record and the course roster.

Session access only restricts students, to their own course. Teachers are
scoped one level up, at history and statistics.

Tier 2 service module: imports from hangman.hooks.interfaces (Tier 1),
hangman.errors and hangman.schemas (Tier 1), hangman.game.engine (Tier 2).

Usage:
    guard = AccessGuard(auth_service, roster)
    guard.check_session_access(user, session)
    await guard.check_student_history_access(user, "student-7")
"""

from hangman.errors import AccessDenied, NotFound
from hangman.game.engine import GameSession
from hangman.hooks.interfaces import AuthService, CourseRoster
from hangman.schemas import User

_STAFF_ROLES = ("teacher", "admin")


class AccessGuard:
    def __init__(self, auth_service: AuthService, roster: CourseRoster) -> None:
        self._auth = auth_service
        self._roster = roster

    def check_session_access(self, user: User, session: GameSession) -> None:
        """A student may only act on sessions for words of their own course.

        Raises:
            AccessDenied: If a student targets another course's session.
        """
        if user.role == "student" and session.word.course_id != user.course_id:
            raise AccessDenied("Not authorized to access this game.")

    async def check_student_history_access(self, user: User, student_id: str) -> None:
        """Checks whether ``user`` may read ``student_id``'s play history.

        Anyone may read their own history. Reading someone else's needs a
        teacher or admin role, and a teacher only reaches their own students.

        Raises:
            AccessDenied: On a role or teacher-of-record mismatch.
            NotFound: If a teacher asks about an unknown student.
        """
        if user.id == student_id:
            return
        if user.role not in _STAFF_ROLES:
            raise AccessDenied("Only teachers can access student histories.")
        if user.role == "teacher":
            student = await self._auth.get_user(student_id)
            if student is None:
                raise NotFound("Student not found.")
            if student.teacher_id != user.id:
                raise AccessDenied("Not authorized to access this student's data.")

    async def check_course_statistics_access(self, user: User, course_id: str) -> None:
        """Checks whether ``user`` may read statistics for a course.

        Raises:
            AccessDenied: For students, and for teachers who are not a
                teacher of record for the course.
            NotFound: If an admin asks about an unknown course.
        """
        if user.role not in _STAFF_ROLES:
            raise AccessDenied("Only teachers can access class statistics.")
        if user.role == "teacher":
            if not await self._roster.is_assigned_teacher(course_id, user.id):
                raise AccessDenied("Not authorized to access this class's statistics.")
        elif not await self._roster.course_exists(course_id):
            raise NotFound("Course not found.")
