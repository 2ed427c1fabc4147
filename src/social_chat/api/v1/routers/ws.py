from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PayloadError

from social_chat.config import settings
from social_chat.infrastructure.ws.connection import WebSocketConnection
from social_chat.infrastructure.ws.manager import ConnectionManager
from social_chat.infrastructure.ws.protocol import (
    ChatMessage,
    InboundEvent,
    MarkSeen,
    OutboundEvent,
    Ping,
    Typing,
    UserConnected,
    parse_inbound,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


@router.websocket("/ws")
async def ws_chat(websocket: WebSocket) -> None:
    manager: ConnectionManager = websocket.app.state.manager
    await websocket.accept()
    conn = WebSocketConnection(websocket)

    # Events of one connection are handled strictly in receipt order by a
    # single dispatch task; the read loop only parses and enqueues.
    inbox: asyncio.Queue[InboundEvent | None] = asyncio.Queue()
    dispatcher = asyncio.create_task(
        _dispatch_loop(manager, conn, inbox), name=f"ws-dispatch-{conn.id}",
    )
    heartbeat_task = asyncio.create_task(
        _heartbeat(conn), name=f"ws-heartbeat-{conn.id}",
    )
    try:
        await _read_loop(websocket, conn, inbox)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error on %r", conn)
    finally:
        conn.closed = True
        heartbeat_task.cancel()
        # Unbind before in-flight work finishes; its fan-out then sees this
        # user as offline.
        await manager.disconnect(conn)
        inbox.put_nowait(None)
        await dispatcher


async def _heartbeat(conn: WebSocketConnection) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await conn.send(OutboundEvent.PONG, {})
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("Heartbeat stopped for %r", conn, exc_info=True)


async def _read_loop(
    ws: WebSocket,
    conn: WebSocketConnection,
    inbox: asyncio.Queue[InboundEvent | None],
) -> None:
    while True:
        frame = await ws.receive()
        if frame["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(frame.get("code", 1000))
        raw = frame.get("text")
        if raw is None:
            raw = frame.get("bytes") or b""

        try:
            event = parse_inbound(raw)
        except PayloadError as exc:
            logger.info("Rejected malformed frame on %r (%d error(s))", conn, exc.error_count())
            await conn.send(OutboundEvent.ERROR, {"code": "invalid_payload"})
            continue

        if isinstance(event, Ping):
            await conn.send(OutboundEvent.PONG, {})
            continue
        inbox.put_nowait(event)


async def _dispatch_loop(
    manager: ConnectionManager,
    conn: WebSocketConnection,
    inbox: asyncio.Queue[InboundEvent | None],
) -> None:
    while True:
        event = await inbox.get()
        if event is None:
            return
        try:
            await _dispatch(manager, conn, event)
        except Exception:
            logger.exception("Failed to handle %s on %r", event.type, conn)


async def _dispatch(
    manager: ConnectionManager,
    conn: WebSocketConnection,
    event: InboundEvent,
) -> None:
    if isinstance(event, UserConnected):
        await manager.connect(event.data.id, conn)

    elif isinstance(event, ChatMessage):
        data = event.data
        await manager.pipeline.submit(
            conn, data.from_, data.to, data.message_type, data.body,
        )

    elif isinstance(event, MarkSeen):
        await manager.seen.mark_seen(
            viewer_id=event.data.to, counterpart_id=event.data.from_, origin=conn,
        )

    elif isinstance(event, Typing):
        await manager.typing.notify_typing(event.data.from_, event.data.to, event.is_typing)
