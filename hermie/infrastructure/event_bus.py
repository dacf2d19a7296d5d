"""In-process fan-out of capture events to subscribers (WebSocket clients)."""

import asyncio
import logging

from hermie.domain.value_objects.capture_event import (
    CaptureEvent,
    CaptureSavedEvent,
    NoticeEvent,
)

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


class CaptureEventBus:
    """CaptureObserver implementation that broadcasts to subscriber queues.

    Slow subscribers drop their oldest events rather than block capture.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._subscribers: set[asyncio.Queue[CaptureEvent]] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[CaptureEvent]:
        """Register a new subscriber queue."""
        queue: asyncio.Queue[CaptureEvent] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[CaptureEvent]) -> None:
        """Remove a subscriber queue (idempotent)."""
        self._subscribers.discard(queue)

    def publish(self, event: CaptureEvent) -> None:
        """Deliver an event to every subscriber."""
        for queue in self._subscribers:
            if queue.full():
                dropped = queue.get_nowait()
                logger.warning(f"Event queue full, dropped {dropped.type} event")
            queue.put_nowait(event)

    def on_capture_saved(self, card_id: str, image_ref: str, remaining_window_ms: int) -> None:
        self.publish(
            CaptureSavedEvent(
                card_id=card_id,
                image_path=image_ref,
                expires_in_ms=remaining_window_ms,
            )
        )

    def on_notice(self, message: str) -> None:
        self.publish(NoticeEvent(message=message))
