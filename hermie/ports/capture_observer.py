"""Port interface for capture notifications to the presentation layer."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CaptureObserver(Protocol):
    """Outbound channel for capture lifecycle notifications."""

    def on_capture_saved(self, card_id: str, image_ref: str, remaining_window_ms: int) -> None:
        """A capture was saved and may be undone within remaining_window_ms."""
        ...

    def on_notice(self, message: str) -> None:
        """A user-visible, non-fatal problem occurred."""
        ...
