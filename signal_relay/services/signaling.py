"""In-memory WebRTC signaling manager."""
from __future__ import annotations

import asyncio
import logging

from ..core.config import Settings, settings
from .auth import Authenticator, Credentials
from .presence import PresenceNotifier
from .registry import ConnectionIdentity, ConnectionRegistry, TransportHandle
from .rooms import RoomIndex
from .router import MessageRouter

logger = logging.getLogger(__name__)


class SignalingManager:
    """Own the registry and room index and serialize every change to them.

    One ``asyncio.Lock`` covers registration, joins, room changes and
    teardown, so a join always sees a consistent set of occupants.
    Notifications are queued on the transport handles while the lock is
    held; handles never block, so the lock is never held across a slow peer.
    """

    def __init__(
        self,
        *,
        max_connections: int = 10_000,
        default_room: str = "global",
        gc_empty_rooms: bool = True,
        authenticator: Authenticator | None = None,
    ) -> None:
        self.registry = ConnectionRegistry(max_connections=max_connections)
        self.rooms = RoomIndex(default_room=default_room, gc_empty_rooms=gc_empty_rooms)
        self.notifier = PresenceNotifier(self.registry)
        self.router = MessageRouter(self.registry, self.notifier, self)
        self.authenticator = authenticator
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, config: Settings) -> "SignalingManager":
        return cls(
            max_connections=config.max_connections,
            default_room=config.default_room,
            gc_empty_rooms=config.gc_empty_rooms,
            authenticator=Authenticator(config),
        )

    async def connect(
        self,
        handle: TransportHandle,
        room_id: str | None = None,
        credentials: Credentials | None = None,
    ) -> ConnectionIdentity:
        """Authenticate, register and join ``handle``, then announce it.

        Raises ``AuthenticationFailed`` or ``RegistryFull`` without touching
        shared state.
        """

        if self.authenticator is not None:
            self.authenticator.require(credentials)

        room = room_id or self.rooms.default_room
        async with self._lock:
            identity = self.registry.register(handle, room_id=room)
            try:
                existing = self.rooms.join(identity.id, room)
            except Exception:
                self.registry.unregister(identity.id)
                raise
            self.notifier.announce_join(identity.id, existing)

        logger.info(
            "Client %s connected to room %s. Total clients: %d",
            identity.id,
            room,
            len(self.registry),
        )
        return identity

    async def change_room(self, connection_id: str, room_id: str | None) -> bool:
        """Move a connection to ``room_id``; joining the current room is a no-op.

        A missing ``room_id`` means the room the connection is already in.
        """

        async with self._lock:
            if connection_id not in self.registry:
                return False
            current = self.rooms.room_of(connection_id)
            room = room_id or current or self.rooms.default_room
            if current == room:
                return False

            _, remaining = self.rooms.leave(connection_id)
            self.notifier.announce_leave(connection_id, remaining)
            existing = self.rooms.join(connection_id, room)
            self.registry.set_room(connection_id, room)
            self.notifier.announce_join(connection_id, existing)

        logger.info("Client %s moved from room %s to room %s", connection_id, current, room)
        return True

    async def disconnect(self, connection_id: str) -> bool:
        """Tear down a connection exactly once.

        Returns ``True`` only for the call that removed it; later calls (a
        transport close after an explicit ``leave``) do nothing.
        """

        async with self._lock:
            if connection_id not in self.registry:
                return False
            room, remaining = self.rooms.leave(connection_id)
            self.registry.unregister(connection_id)
            self.notifier.announce_leave(connection_id, remaining)

        logger.info(
            "Client %s disconnected from room %s. Total clients: %d",
            connection_id,
            room,
            len(self.registry),
        )
        return True

    async def route(self, sender_id: str, raw: str | bytes) -> bool:
        return await self.router.route(sender_id, raw)

    def occupants_of(self, room_id: str | None = None) -> list[str]:
        return self.rooms.occupants_of(room_id)

    def stats(self) -> dict[str, object]:
        return {"connections": len(self.registry), "rooms": self.rooms.rooms()}


manager = SignalingManager.from_settings(settings)
