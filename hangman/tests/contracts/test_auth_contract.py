"""Contract tests for AuthService — behavioral contract.

Known token → that user, empty or unknown → None. Real implementations will
validate JWTs, session cookies, etc. — but this behavioral boundary must
hold, and get_user must return students with their course and teacher of
record filled in, since the access guard relies on them.

Run against registered implementations:
    python -m pytest hangman/tests/contracts/test_auth_contract.py -v
"""

import pytest

from hangman.schemas import User


class TestAuthContract:
    """Behavioral contract for AuthService implementations."""

    # -- Token validation --------------------------------------------------

    @pytest.mark.asyncio
    async def test_valid_token_returns_user(self, auth_service) -> None:
        user = await auth_service.validate_token("student-a")
        assert isinstance(user, User)
        assert user.id == "student-a"

    @pytest.mark.asyncio
    async def test_empty_token_returns_none(self, auth_service) -> None:
        """Empty token must return None (invalid/missing auth)."""
        assert await auth_service.validate_token("") is None

    @pytest.mark.asyncio
    async def test_unknown_token_returns_none(self, auth_service) -> None:
        assert await auth_service.validate_token("not-a-real-token") is None

    # -- User lookup -------------------------------------------------------

    @pytest.mark.asyncio
    async def test_get_user_returns_matching_id(self, auth_service) -> None:
        user = await auth_service.get_user("teacher-a")
        assert user is not None
        assert user.id == "teacher-a"
        assert user.role == "teacher"

    @pytest.mark.asyncio
    async def test_students_carry_course_and_teacher(self, auth_service) -> None:
        """Students must come back with course_id and teacher_id set."""
        user = await auth_service.get_user("student-b")
        assert user is not None
        assert user.course_id == "course-b"
        assert user.teacher_id == "teacher-b"

    @pytest.mark.asyncio
    async def test_unknown_user_returns_none(self, auth_service) -> None:
        assert await auth_service.get_user("ghost") is None

    @pytest.mark.asyncio
    async def test_empty_user_id_returns_none(self, auth_service) -> None:
        assert await auth_service.get_user("") is None
