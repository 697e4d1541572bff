"""Room membership index."""
from __future__ import annotations

from typing import Dict


class RoomIndex:
    """Group connection ids into rooms.

    Occupants are kept in join order so peer lists are stable. Named rooms
    are dropped once empty when ``gc_empty_rooms`` is set; the default room
    is always kept.
    """

    def __init__(self, default_room: str = "global", gc_empty_rooms: bool = True) -> None:
        self.default_room = default_room
        self._gc_empty_rooms = gc_empty_rooms
        self._rooms: Dict[str, Dict[str, None]] = {default_room: {}}
        self._membership: Dict[str, str] = {}

    def join(self, connection_id: str, room_id: str | None = None) -> list[str]:
        """Add ``connection_id`` to a room and return the other occupants.

        Joining the room the id is already in changes nothing. Joining a
        different room moves the id without reporting the old room; callers
        that need to announce the departure call ``leave`` first.
        """

        room = room_id or self.default_room
        current = self._membership.get(connection_id)
        if current is not None and current != room:
            self.leave(connection_id)

        occupants = self._rooms.setdefault(room, {})
        occupants[connection_id] = None
        self._membership[connection_id] = room
        return [occupant for occupant in occupants if occupant != connection_id]

    def leave(self, connection_id: str) -> tuple[str | None, list[str]]:
        """Remove ``connection_id`` from its room.

        Returns the room left and its remaining occupants, or ``(None, [])``
        when the id was not in a room.
        """

        room = self._membership.pop(connection_id, None)
        if room is None:
            return None, []

        occupants = self._rooms.get(room, {})
        occupants.pop(connection_id, None)
        if not occupants and self._gc_empty_rooms and room != self.default_room:
            self._rooms.pop(room, None)
        return room, list(occupants)

    def occupants_of(self, room_id: str | None = None) -> list[str]:
        return list(self._rooms.get(room_id or self.default_room, {}))

    def room_of(self, connection_id: str) -> str | None:
        return self._membership.get(connection_id)

    def rooms(self) -> dict[str, int]:
        """Occupancy per known room."""

        return {room: len(occupants) for room, occupants in self._rooms.items()}
