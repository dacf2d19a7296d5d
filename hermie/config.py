"""Application configuration loaded from environment variables.

Provides type-safe access to configuration with sensible defaults.
Invalid values raise ValueError so misconfiguration fails at startup.
"""

import os
from pathlib import Path

from hermie.domain.constants import (
    CANCEL_GRACE_MS,
    POLL_ATTEMPTS,
    POLL_INTERVAL_MS,
    UNDO_WINDOW_MS,
)

STORE_BACKENDS = ("sqlite", "memory")
ACQUISITION_METHODS = ("auto", "screencapture", "snip", "unsupported")

DB_FILENAME = "db.sqlite"


def _get_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _get_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in choices:
        raise ValueError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
    return value


def get_data_dir() -> Path:
    """Get base directory for the database and images.

    Environment variable: HERMIE_DATA_DIR
    Default: ~/.hermie
    """
    return Path(os.getenv("HERMIE_DATA_DIR", "~/.hermie")).expanduser()


def get_db_path() -> Path:
    """Get SQLite database path inside the data directory."""
    return get_data_dir() / DB_FILENAME


def get_store_backend() -> str:
    """Get persistence backend.

    Environment variable: HERMIE_STORE
    Default: sqlite ("memory" keeps everything in-process)
    """
    return _get_choice("HERMIE_STORE", "sqlite", STORE_BACKENDS)


def get_acquisition_method() -> str:
    """Get screenshot acquisition method.

    Environment variable: HERMIE_ACQUISITION
    Default: auto (screencapture on macOS, snip on Windows)
    """
    return _get_choice("HERMIE_ACQUISITION", "auto", ACQUISITION_METHODS)


def get_undo_window_ms() -> int:
    """Get undo window after a capture is saved.

    Environment variable: HERMIE_UNDO_WINDOW_MS
    Default: 5000
    """
    return _get_int("HERMIE_UNDO_WINDOW_MS", UNDO_WINDOW_MS)


def get_cancel_grace_ms() -> int:
    """Get how long a new capture waits for a superseded one to settle.

    Environment variable: HERMIE_CANCEL_GRACE_MS
    Default: 250
    """
    return _get_int("HERMIE_CANCEL_GRACE_MS", CANCEL_GRACE_MS)


def get_poll_attempts() -> int:
    """Get clipboard poll attempts for the snipping tool.

    Environment variable: HERMIE_POLL_ATTEMPTS
    Default: 60
    """
    return _get_int("HERMIE_POLL_ATTEMPTS", POLL_ATTEMPTS, minimum=1)


def get_poll_interval_ms() -> int:
    """Get clipboard poll interval.

    Environment variable: HERMIE_POLL_INTERVAL_MS
    Default: 500
    """
    return _get_int("HERMIE_POLL_INTERVAL_MS", POLL_INTERVAL_MS, minimum=1)


def get_cors_origins() -> list[str]:
    """Get allowed CORS origins from environment.

    Environment variable: CORS_ORIGINS (comma-separated)
    Default: localhost ports 3000 and 5173 for development
    """
    default_origins = "http://localhost:3000,http://localhost:5173"
    origins_str = os.getenv("CORS_ORIGINS", default_origins)
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


def get_cors_allow_credentials() -> bool:
    """Get CORS allow_credentials setting.

    Environment variable: CORS_ALLOW_CREDENTIALS
    Default: true
    """
    return os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"


# Restricted HTTP methods - only what the API actually uses
CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]

CORS_ALLOWED_HEADERS = [
    "Accept",
    "Accept-Language",
    "Content-Type",
    "X-Requested-With",
]


def is_production() -> bool:
    """Check if running in production environment."""
    return os.getenv("ENVIRONMENT", "development").lower() == "production"


def get_host() -> str:
    """Get API bind address.

    Environment variable: HERMIE_HOST
    Default: 127.0.0.1 (local only)
    """
    return os.getenv("HERMIE_HOST", "127.0.0.1")


def get_port() -> int:
    """Get API port.

    Environment variable: HERMIE_PORT
    Default: 8000
    """
    return _get_int("HERMIE_PORT", 8000, minimum=1)
