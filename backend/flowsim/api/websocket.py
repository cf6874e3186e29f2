"""WebSocket connection manager for real-time workflow events."""
import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Fans workspace events out to every connected editor."""

    def __init__(self):
        self._connections: list[WebSocket] = []

    @property
    def active(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self._connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        self._connections = [ws for ws in self._connections if ws is not websocket]

    async def broadcast(self, data: dict[str, Any]):
        message = json.dumps(data)
        dead: list[WebSocket] = []
        for ws in list(self._connections):
            try:
                await ws.send_text(message)
            except Exception:
                logger.debug("Dropping dead websocket")
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws)

    def make_broadcast_callback(self, loop: asyncio.AbstractEventLoop):
        """Create a sync callback that broadcasts events, callable from any thread."""
        def callback(data: dict[str, Any]):
            asyncio.run_coroutine_threadsafe(self.broadcast(data), loop)
        return callback


manager = ConnectionManager()
