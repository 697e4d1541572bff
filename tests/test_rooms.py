"""Tests for the room membership index."""
from __future__ import annotations

from signal_relay.services.rooms import RoomIndex


def test_join_returns_other_occupants_in_join_order():
    rooms = RoomIndex()

    assert rooms.join("a") == []
    assert rooms.join("b") == ["a"]
    assert rooms.join("c") == ["a", "b"]
    assert rooms.occupants_of("global") == ["a", "b", "c"]
    assert rooms.room_of("c") == "global"


def test_join_same_room_twice_is_idempotent():
    rooms = RoomIndex()
    rooms.join("a", "r1")
    rooms.join("b", "r1")

    assert rooms.join("b", "r1") == ["a"]
    assert rooms.occupants_of("r1") == ["a", "b"]


def test_join_other_room_moves_connection():
    rooms = RoomIndex()
    rooms.join("a", "r1")
    rooms.join("b", "r1")

    assert rooms.join("b", "r2") == []
    assert rooms.occupants_of("r1") == ["a"]
    assert rooms.room_of("b") == "r2"


def test_leave_returns_remaining_and_is_noop_when_absent():
    rooms = RoomIndex()
    rooms.join("a", "r1")
    rooms.join("b", "r1")

    assert rooms.leave("a") == ("r1", ["b"])
    assert rooms.leave("a") == (None, [])
    assert rooms.leave("never-joined") == (None, [])


def test_empty_named_rooms_are_collected_but_default_room_persists():
    rooms = RoomIndex(default_room="lobby")
    rooms.join("a", "r1")
    rooms.join("b")

    rooms.leave("a")
    rooms.leave("b")

    assert "r1" not in rooms.rooms()
    assert rooms.rooms() == {"lobby": 0}
    assert rooms.occupants_of("r1") == []
    assert rooms.join("c", "r1") == []


def test_empty_rooms_kept_when_gc_disabled():
    rooms = RoomIndex(gc_empty_rooms=False)
    rooms.join("a", "r1")
    rooms.leave("a")

    assert rooms.rooms()["r1"] == 0
