"""Connection registry: identity allocation and id -> transport handle lookup."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol
from uuid import uuid4

logger = logging.getLogger(__name__)


class TransportHandle(Protocol):
    """Anything the relay can push a message to without blocking."""

    def send(self, message: dict) -> bool:
        ...


class RegistryFull(RuntimeError):
    """Raised when no more connections can be registered."""


@dataclass(slots=True)
class ConnectionIdentity:
    """Server-assigned identity of one live connection."""

    id: str
    room_id: Optional[str] = None
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True)
class Connection:
    identity: ConnectionIdentity
    handle: TransportHandle


class ConnectionRegistry:
    """Sole owner of transport handles.

    Callers keep identities (plain ids) and resolve them to a handle at the
    moment of sending. Not thread-safe; ``SignalingManager`` serializes the
    mutating calls.
    """

    def __init__(self, max_connections: int = 10_000) -> None:
        self._max_connections = max_connections
        self._connections: Dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections

    def register(self, handle: TransportHandle, room_id: str | None = None) -> ConnectionIdentity:
        """Allocate a fresh identity for ``handle`` and store the mapping."""

        if len(self._connections) >= self._max_connections:
            raise RegistryFull(f"connection limit of {self._max_connections} reached")

        connection_id = uuid4().hex
        while connection_id in self._connections:
            connection_id = uuid4().hex

        identity = ConnectionIdentity(id=connection_id, room_id=room_id)
        self._connections[connection_id] = Connection(identity=identity, handle=handle)
        return replace(identity)

    def resolve(self, connection_id: str) -> TransportHandle | None:
        """Return the live handle for ``connection_id``; ``None`` when it has gone away."""

        connection = self._connections.get(connection_id)
        return connection.handle if connection else None

    def identity(self, connection_id: str) -> ConnectionIdentity | None:
        connection = self._connections.get(connection_id)
        return replace(connection.identity) if connection else None

    def set_room(self, connection_id: str, room_id: str | None) -> None:
        connection = self._connections.get(connection_id)
        if connection:
            connection.identity.room_id = room_id

    def unregister(self, connection_id: str) -> ConnectionIdentity | None:
        """Remove ``connection_id``; unknown ids are ignored."""

        connection = self._connections.pop(connection_id, None)
        return connection.identity if connection else None

    def all(self) -> list[ConnectionIdentity]:
        """Snapshot of live identities; entries may go stale immediately."""

        return [replace(connection.identity) for connection in self._connections.values()]
