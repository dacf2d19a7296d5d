"""WebSocket stream of capture events (saved captures and notices)."""

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from hermie.api.dependencies import get_event_bus
from hermie.domain.value_objects.capture_event import CaptureEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["events"])


async def _forward_events(websocket: WebSocket, queue: asyncio.Queue[CaptureEvent]) -> None:
    while True:
        event = await queue.get()
        await websocket.send_json(event.to_dict())


async def _drain_incoming(websocket: WebSocket) -> None:
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Event subscriber disconnected")


@router.websocket("/events")
async def capture_events(websocket: WebSocket) -> None:
    """Push capture_saved and notice events to the client as JSON.

    Incoming messages are ignored; reading them is how a disconnect is noticed.
    The stream ends when the client disconnects or a send fails.
    """
    event_bus = get_event_bus()
    await websocket.accept()
    queue = event_bus.subscribe()
    sender = asyncio.create_task(_forward_events(websocket, queue))
    receiver = asyncio.create_task(_drain_incoming(websocket))
    logger.info(f"Event subscriber connected ({event_bus.subscriber_count} total)")
    try:
        await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
        if sender.done() and not sender.cancelled() and sender.exception() is not None:
            logger.warning(f"Event stream send failed: {sender.exception()!r}")
    finally:
        sender.cancel()
        receiver.cancel()
        event_bus.unsubscribe(queue)
