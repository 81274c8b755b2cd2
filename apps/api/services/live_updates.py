"""
Live update fan-out for dashboard viewers.

Handles:
- Subscriber connect/disconnect
- Broadcasting ``{type, data}`` envelopes to every open subscriber
"""

import asyncio
import json
from enum import Enum
from typing import Any, List, Set
from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocketState
import logging

logger = logging.getLogger(__name__)


class LiveEvent(str, Enum):
    """Event names pushed to dashboard viewers"""
    BED_STATUS_UPDATE = "bedStatusUpdate"
    NEW_APPOINTMENT = "newAppointment"
    APPOINTMENT_STATUS_UPDATE = "appointmentStatusUpdate"
    NEW_DONOR = "newDonor"
    DONOR_STATUS_UPDATE = "donorStatusUpdate"
    NEW_ALERT = "newAlert"


def encode_event(event_type: str, payload: Any) -> str:
    """Serialize an event envelope to a single wire message"""
    event_type = event_type.value if isinstance(event_type, LiveEvent) else event_type
    return json.dumps({"type": event_type, "data": jsonable_encoder(payload, by_alias=True)})


def is_open(websocket: WebSocket) -> bool:
    return (
        websocket.client_state == WebSocketState.CONNECTED
        and websocket.application_state == WebSocketState.CONNECTED
    )


class LiveUpdateHub:
    """
    Registry of connected live-update subscribers.

    One hub is created per application and handed to request handlers; the
    subscriber set is only mutated under the lock, and broadcasts iterate a
    snapshot so joins and leaves can happen while a broadcast is in flight.
    Delivery is best effort, at most once.
    """

    def __init__(self):
        self._subscribers: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a new WebSocket connection"""
        await websocket.accept()
        await self.subscribe(websocket)

    async def subscribe(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._subscribers.add(websocket)
        logger.info(f"Live update subscriber connected ({len(self._subscribers)} open)")

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            if websocket not in self._subscribers:
                return
            self._subscribers.discard(websocket)
        logger.info(f"Live update subscriber disconnected ({len(self._subscribers)} open)")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def _snapshot(self) -> List[WebSocket]:
        async with self._lock:
            return list(self._subscribers)

    async def broadcast(self, event_type: str, payload: Any) -> int:
        """
        Push one event to every open subscriber. Returns the number of
        subscribers the message was handed to.
        """
        subscribers = await self._snapshot()
        if not subscribers:
            return 0

        message = encode_event(event_type, payload)
        delivered = 0
        failed = []

        for websocket in subscribers:
            # A subscriber may have left since the snapshot was taken
            if websocket not in self._subscribers or not is_open(websocket):
                continue
            try:
                await websocket.send_text(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping live update subscriber after send failure: {e}")
                failed.append(websocket)

        for websocket in failed:
            await self.disconnect(websocket)

        logger.debug(f"Broadcast {message[:80]} to {delivered} subscriber(s)")
        return delivered
