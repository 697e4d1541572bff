"""Shared fakes for the signaling tests."""
from __future__ import annotations


class DummyHandle:
    """Transport handle that records every message it is asked to send."""

    def __init__(self, fail: bool = False, raise_on_send: bool = False) -> None:
        self.messages: list[dict] = []
        self.fail = fail
        self.raise_on_send = raise_on_send

    def send(self, message: dict) -> bool:
        if self.raise_on_send:
            raise ConnectionResetError("peer went away")
        if self.fail:
            return False
        self.messages.append(message)
        return True

    def of_type(self, message_type: str) -> list[dict]:
        return [message for message in self.messages if message["type"] == message_type]
