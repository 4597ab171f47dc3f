import logging
from typing import Any, Dict, Set

from fastapi import WebSocket
from pydantic import BaseModel

from models import TelemetrySnapshot

logger = logging.getLogger(__name__)


TELEMETRY_EVENT = "telemetry"
ACTION_RESULT_EVENT = "actionResult"
PURIFY_EVENT = "purify"


def encode_event(event: str, payload: Any) -> Dict[str, Any]:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    return {"event": event, "data": payload}


class BroadcastChannel:
    """
    Set of connected WebSocket subscribers.

    New subscribers get one snapshot straight away; ``publish`` fans a
    snapshot out to everyone and drops sockets that can no longer be written.
    """

    def __init__(self):
        self._subscribers: Set[WebSocket] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self, websocket: WebSocket, snapshot: TelemetrySnapshot) -> None:
        await websocket.accept()
        self._subscribers.add(websocket)
        await self.send_private(websocket, TELEMETRY_EVENT, snapshot)

    def unsubscribe(self, websocket: WebSocket) -> None:
        self._subscribers.discard(websocket)

    async def send_private(self, websocket: WebSocket, event: str, payload: Any) -> None:
        await websocket.send_json(encode_event(event, payload))

    async def publish(self, snapshot: TelemetrySnapshot) -> int:
        """Send ``snapshot`` to every subscriber; returns how many received it."""
        message = encode_event(TELEMETRY_EVENT, snapshot)
        delivered = 0
        for websocket in list(self._subscribers):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as exc:
                logger.warning("Dropping subscriber after failed send: %s", exc)
                self.unsubscribe(websocket)
        return delivered
