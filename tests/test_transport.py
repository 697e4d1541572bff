"""Tests for the queued WebSocket send handle."""
from __future__ import annotations

import asyncio
import json

import pytest

from signal_relay.services.transport import WebSocketHandle


class DummyWebSocket:
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[str] = []
        self.fail = fail

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        await asyncio.sleep(0)
        self.sent.append(data)


@pytest.mark.asyncio
async def test_messages_are_written_in_order():
    ws = DummyWebSocket()
    handle = WebSocketHandle(ws)  # type: ignore[arg-type]
    handle.start()

    assert handle.send({"type": "id-assignment", "id": "a"})
    assert handle.send({"type": "peer-list", "peerIds": []})
    await handle.flush()
    handle.close()

    assert [json.loads(item)["type"] for item in ws.sent] == ["id-assignment", "peer-list"]
    assert handle.send({"type": "new-peer", "peerId": "b"}) is False


@pytest.mark.asyncio
async def test_full_queue_refuses_instead_of_blocking():
    handle = WebSocketHandle(DummyWebSocket(), max_queue=1)  # type: ignore[arg-type]

    assert handle.send({"type": "new-peer", "peerId": "b"}) is True
    assert handle.send({"type": "new-peer", "peerId": "c"}) is False


@pytest.mark.asyncio
async def test_writer_stops_when_socket_fails():
    handle = WebSocketHandle(DummyWebSocket(fail=True))  # type: ignore[arg-type]
    handle.start()

    handle.send({"type": "peer-disconnected", "peerId": "b"})
    for _ in range(5):
        await asyncio.sleep(0)

    assert handle.closed
    assert handle.send({"type": "peer-disconnected", "peerId": "c"}) is False
    handle.close()


@pytest.mark.asyncio
async def test_messages_queued_before_start_are_written_once_started():
    ws = DummyWebSocket()
    handle = WebSocketHandle(ws)  # type: ignore[arg-type]

    handle.send({"type": "id-assignment", "id": "a"})
    assert ws.sent == []

    handle.start()
    await handle.flush()
    handle.close()

    assert [json.loads(item) for item in ws.sent] == [{"type": "id-assignment", "id": "a"}]


def test_close_without_start_is_safe():
    handle = WebSocketHandle(DummyWebSocket())  # type: ignore[arg-type]

    handle.close()

    assert handle.closed
