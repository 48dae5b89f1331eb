"""Fake auth service — development stub for AuthService.

Treats the bearer token as a user id and looks it up in an in-memory user
table. Empty or unknown tokens return None (simulates a missing/invalid
Authorization header).

TEAM: Replace this with your real auth provider (OAuth, JWT, etc.).
Subclass AuthService from hangman.hooks.interfaces and implement
validate_token and get_user. The game core never touches tokens directly —
it gets a User back from your implementation.

Tier 2 service module: imports from hangman.hooks.interfaces (Tier 1)
and hangman.schemas (Tier 1).

Usage:
    from hangman.hooks.auth import FakeAuthService

    auth = FakeAuthService()
    auth.add_user(User(id="student-1", role="student", name="Ana",
                       course_id="course-1", teacher_id="teacher-1"))
    await auth.validate_token("student-1")
"""

from collections.abc import Iterable

from hangman.hooks.interfaces import AuthService
from hangman.schemas import User


class FakeAuthService(AuthService):
    """STUB — the token is the user id, users live in a dict.

    Does not perform real authentication.

    TEAM: Replace with your auth provider. Satisfy the AuthService
    interface from hangman.hooks.interfaces.
    """

    def __init__(self, users: Iterable[User] = ()) -> None:
        """Initialises the fake auth service.

        Args:
            users: Users known from the start.
        """
        self._users: dict[str, User] = {user.id: user for user in users}

    def add_user(self, user: User) -> None:
        """Registers or replaces a user. Stub convenience, not part of the ABC."""
        self._users[user.id] = user

    async def validate_token(self, token: str) -> User | None:
        """Returns the user whose id equals the token.

        Args:
            token: Any string. Known user id → that user, otherwise None.
        """
        if not token:
            return None
        return self._users.get(token)

    async def get_user(self, user_id: str) -> User | None:
        """Returns the user with the given ID, or None if unknown."""
        if not user_id:
            return None
        return self._users.get(user_id)
