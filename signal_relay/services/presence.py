"""Presence notifications emitted on membership change."""
from __future__ import annotations

import logging
from typing import Iterable

from ..schemas.signaling import IdAssignment, NewPeer, PeerDisconnected, PeerList
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class PresenceNotifier:
    """Fan presence events out to room occupants, one recipient at a time."""

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    def announce_join(self, new_id: str, existing: Iterable[str]) -> int:
        """Tell the newcomer who it is and who is present, then tell everyone else."""

        existing = list(existing)
        delivered = 0
        delivered += self.deliver(new_id, IdAssignment(id=new_id).as_message())
        delivered += self.deliver(new_id, PeerList(peer_ids=existing).as_message())

        notice = NewPeer(peer_id=new_id).as_message()
        for occupant in existing:
            delivered += self.deliver(occupant, notice)
        return delivered

    def announce_leave(self, left_id: str, remaining: Iterable[str]) -> int:
        notice = PeerDisconnected(peer_id=left_id).as_message()
        delivered = 0
        for occupant in remaining:
            delivered += self.deliver(occupant, notice)
        return delivered

    def deliver(self, connection_id: str, message: dict) -> bool:
        """Best-effort send to a single connection; failures are logged, never raised."""

        handle = self._registry.resolve(connection_id)
        if handle is None:
            logger.debug("Dropping %s for departed connection %s", message.get("type"), connection_id)
            return False
        try:
            sent = handle.send(message)
        except Exception as exc:  # noqa: BLE001 - one bad peer must not stop the fan-out
            logger.warning("Send of %s to %s failed: %s", message.get("type"), connection_id, exc)
            return False
        if not sent:
            logger.warning("Send of %s to %s was refused by the transport", message.get("type"), connection_id)
        return bool(sent)
