from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from fastapi import WebSocket

from social_chat.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)


class WebSocketConnection:
    """Connection handle wrapping one accepted WebSocket.

    Sends are serialized per socket: fan-out from other connections' handlers
    may target this socket concurrently with its own replies.
    """

    def __init__(self, websocket: WebSocket) -> None:
        self.id = uuid.uuid4().hex
        self.closed = False
        self._ws = websocket
        self._send_lock = asyncio.Lock()

    async def send(self, event_type: str, data: Any) -> None:
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        async with self._send_lock:
            await self._ws.send_text(raw)

    async def close(self, code: int = 1000) -> None:
        self.closed = True
        try:
            await self._ws.close(code=code)
        except RuntimeError:
            # already closed by the peer
            logger.debug("WS %s already closed", self.id)

    def __repr__(self) -> str:
        return f"<WebSocketConnection {self.id}>"
