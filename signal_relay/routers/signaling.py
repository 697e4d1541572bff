"""Signaling WebSocket endpoints and room introspection."""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from ..core.config import settings
from ..schemas.signaling import RoomsResponse
from ..services.auth import AuthenticationFailed, credentials_from_request
from ..services.naming import derive_room_id
from ..services.registry import RegistryFull
from ..services.signaling import manager as signaling_manager
from ..services.transport import WebSocketHandle

logger = logging.getLogger(__name__)

router = APIRouter()

CLOSE_AUTH_FAILED = 4001


@router.get("/api/rooms", response_model=RoomsResponse, tags=["meta"])
async def list_rooms() -> RoomsResponse:
    """Current connection count and occupancy per room."""

    stats = signaling_manager.stats()
    return RoomsResponse(connections=stats["connections"], rooms=stats["rooms"])


@router.websocket("/ws")
async def signaling_default(websocket: WebSocket) -> None:
    """Signaling channel; the room comes from ``?room=`` or ``?topic=`` when given."""

    await _serve(websocket, path_room=None)


@router.websocket("/ws/{room}")
async def signaling_room(websocket: WebSocket, room: str) -> None:
    """Signaling channel for a room named in the path."""

    await _serve(websocket, path_room=room)


async def _serve(websocket: WebSocket, path_room: str | None) -> None:
    params = websocket.query_params
    room_id = derive_room_id(
        path_room,
        params.get("room"),
        params.get("topic"),
        prefix=settings.topic_prefix,
    )
    credentials = credentials_from_request(
        websocket.headers.get("authorization"),
        params.get("username"),
        params.get("password"),
    )

    await websocket.accept()
    handle = WebSocketHandle(websocket, max_queue=settings.outbound_queue_size)

    try:
        identity = await signaling_manager.connect(handle, room_id, credentials)
    except AuthenticationFailed:
        await websocket.close(code=CLOSE_AUTH_FAILED)
        return
    except RegistryFull as exc:
        logger.warning("Refusing connection: %s", exc)
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    # Messages queued by connect() are drained once the writer starts.
    keep_open = True
    try:
        handle.start()
        while keep_open:
            raw = await _receive_frame(websocket)
            keep_open = await signaling_manager.route(identity.id, raw)
    except WebSocketDisconnect:
        pass
    finally:
        try:
            await asyncio.shield(signaling_manager.disconnect(identity.id))
            if not keep_open:
                await handle.flush()
        finally:
            handle.close()

    if not keep_open:
        await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)


async def _receive_frame(websocket: WebSocket) -> str | bytes:
    """Return the next text or binary frame, raising on disconnect."""

    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(code=message.get("code", status.WS_1000_NORMAL_CLOSURE))
    if message.get("text") is not None:
        return message["text"]
    return message.get("bytes") or b""
