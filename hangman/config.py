"""App configuration — environment variable loading with typed defaults.

Loads settings from .env file (via python-dotenv) and os.environ.
Real environment variables take precedence over .env file values.

Usage:
    from hangman.config import get_settings
    settings = get_settings()
    print(settings.session_idle_timeout_seconds)  # 1800
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Only load .env from the project root, never from parent directories.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
_DOTENV_PATH = PROJECT_ROOT / ".env"

TEACHER_STATS_SOURCES: tuple[str, ...] = ("class_average", "records")


@dataclass(frozen=True)
class Settings:
    """Typed configuration for the hangman service.

    All fields have sensible defaults for local development.
    """

    # App
    app_env: str
    app_port: int
    log_level: str
    cors_origins: list[str]

    # Game
    max_attempts: int
    session_idle_timeout_seconds: float
    completed_session_retention_seconds: float
    reaper_interval_seconds: float

    # Statistics
    teacher_stats_source: str


def _split_csv(value: str) -> list[str]:
    """Splits a comma-separated string into a list of stripped, non-empty values."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _positive_number(env_var: str, default: str) -> float:
    """Reads a strictly positive number from the environment.

    Raises:
        ValueError: If the value is not a number or is not above zero.
    """
    raw = os.environ.get(env_var, default)
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {env_var}: {raw!r}. Expected a number.") from None
    if value <= 0:
        raise ValueError(f"Invalid value for {env_var}: {raw!r}. Must be greater than zero.")
    return value


def _positive_int(env_var: str, default: str) -> int:
    """Reads a whole number of at least 1 from the environment.

    Raises:
        ValueError: If the value is not an integer or is below 1.
    """
    raw = os.environ.get(env_var, default)
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid value for {env_var}: {raw!r}. Expected a whole number.") from None
    if value < 1:
        raise ValueError(f"Invalid value for {env_var}: {raw!r}. Must be at least 1.")
    return value


def _choice(env_var: str, default: str, options: tuple[str, ...]) -> str:
    """Reads an enumerated string setting.

    Raises:
        ValueError: If the value isn't one of ``options``.
    """
    value = os.environ.get(env_var, default).strip().lower()
    if value in options:
        return value
    valid = ", ".join(options)
    raise ValueError(
        f"Invalid value for {env_var}: {value!r}. "
        f"Valid options: {valid}"
    )


def _load_settings() -> Settings:
    """Loads configuration from .env file and environment variables.

    Returns:
        A fully resolved Settings instance.
    """
    load_dotenv(_DOTENV_PATH)

    return Settings(
        # App
        app_env=os.environ.get("APP_ENV", "development"),
        app_port=int(os.environ.get("APP_PORT", "8000")),
        log_level=os.environ.get("LOG_LEVEL", "info"),
        cors_origins=_split_csv(
            os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
        ),
        # Game
        max_attempts=_positive_int("MAX_ATTEMPTS", "10"),
        session_idle_timeout_seconds=_positive_number(
            "SESSION_IDLE_TIMEOUT_SECONDS", "1800"
        ),
        completed_session_retention_seconds=_positive_number(
            "COMPLETED_SESSION_RETENTION_SECONDS", "300"
        ),
        reaper_interval_seconds=_positive_number("REAPER_INTERVAL_SECONDS", "60"),
        # Statistics
        teacher_stats_source=_choice(
            "TEACHER_STATS_SOURCE", "class_average", TEACHER_STATS_SOURCES
        ),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Returns the singleton Settings instance. Loads .env on first call."""
    global _settings
    if _settings is None:
        _settings = _load_settings()
    return _settings
