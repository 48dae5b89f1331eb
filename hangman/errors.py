"""Error taxonomy for the game core.

Every failure the core raises is a HangmanError subclass carrying an
uppercase error code and the HTTP status the API layer maps it to. None of
them is retryable: they are either caller mistakes or business-rule
violations, and they surface verbatim in the ApiResponse envelope.

Tier 1 leaf module: stdlib only.

Usage:
    from hangman.errors import AccessDenied, SessionNotFound

    raise AccessDenied("Not authorized to access this game.")
"""


class HangmanError(Exception):
    """Base class for caller-visible game errors."""

    code: str = "HANGMAN_ERROR"
    status_code: int = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.code


class NotFound(HangmanError):
    """Referenced student, course, or other entity does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class SessionNotFound(NotFound):
    """Game session not found or expired."""

    code = "SESSION_NOT_FOUND"


class AccessDenied(HangmanError):
    """Caller's role or ownership does not permit this action."""

    code = "FORBIDDEN"
    status_code = 403


class GameAlreadyComplete(HangmanError):
    """Game is already complete."""

    code = "GAME_ALREADY_COMPLETE"
    status_code = 409


class NoWordsAvailable(HangmanError):
    """No words available for this game."""

    code = "NO_WORDS_AVAILABLE"
    status_code = 404


class InvalidRequest(HangmanError):
    """Malformed request for the caller's role."""

    code = "INVALID_REQUEST"
    status_code = 400
