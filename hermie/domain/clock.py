"""Wall clock in epoch milliseconds."""

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], int]


def now_ms() -> int:
    """Current time as integer epoch milliseconds (UTC)."""
    return int(datetime.now(UTC).timestamp() * 1000)
