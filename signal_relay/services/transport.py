"""Non-blocking send handle over a FastAPI WebSocket."""
from __future__ import annotations

import asyncio
import json
import logging
from contextlib import suppress

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketHandle:
    """Queue outbound messages and drain them to the socket in order.

    ``send`` never awaits, so a slow peer only fills its own queue.
    """

    def __init__(self, websocket: WebSocket, max_queue: int = 256) -> None:
        self._websocket = websocket
        self._queue: asyncio.Queue[dict] = asyncio.Queue(maxsize=max_queue)
        self._writer: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: dict) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Outbound queue full; dropping %s", message.get("type"))
            return False
        return True

    def start(self) -> None:
        if self._writer is None:
            self._writer = asyncio.create_task(self.run())

    async def run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._websocket.send_text(json.dumps(message))
            except Exception as exc:  # noqa: BLE001 - socket gone; the receive loop tears down
                logger.debug("Writer stopped: %s", exc)
                self._closed = True
                return
            finally:
                self._queue.task_done()

    async def flush(self, timeout: float = 1.0) -> None:
        """Wait briefly for queued messages to reach the socket."""

        if self._writer is None or self._closed:
            return
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._queue.join(), timeout)

    def close(self) -> None:
        """Stop accepting messages and cancel the writer without waiting for it."""

        self._closed = True
        if self._writer is not None:
            self._writer.cancel()
            self._writer = None
