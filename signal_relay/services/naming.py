"""Derive room identifiers from external naming schemes."""
from __future__ import annotations


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().strip("/")
    return value or None


def room_from_topic(topic: str | None, prefix: str = "webrtc") -> str | None:
    """Return the room segment of a ``<prefix>/<room>/...`` topic, else ``None``."""

    topic = _clean(topic)
    if topic is None:
        return None
    parts = topic.split("/")
    if len(parts) < 2 or parts[0] != prefix:
        return None
    return _clean(parts[1])


def derive_room_id(
    path_room: str | None = None,
    query_room: str | None = None,
    topic: str | None = None,
    *,
    prefix: str = "webrtc",
) -> str | None:
    """Pick the room id for a new connection; ``None`` means the default room.

    A path segment wins over a query value, which wins over a topic.
    """

    return _clean(path_room) or _clean(query_room) or room_from_topic(topic, prefix)
