"""Unit tests for the room store and connection registry."""

import pytest

from backend import (
    ADJECTIVES,
    ANIMALS,
    ROOM_ID_ALPHABET,
    ConnectionRegistry,
    RoomStore,
    generate_display_name,
    generate_room_id,
)
from errors import RoomFull, RoomIdUnavailable, RoomNotFound
from conftest import SequentialIds


def test_generate_display_name_uses_word_lists() -> None:
    for _ in range(20):
        adjective, animal = generate_display_name().split(" ")
        assert adjective in ADJECTIVES
        assert animal in ANIMALS


def test_generate_room_id_shape() -> None:
    for _ in range(50):
        room_id = generate_room_id()
        assert len(room_id) == 6
        assert all(char in ROOM_ID_ALPHABET for char in room_id)
        assert room_id == room_id.upper()


def test_registry_register_resolves_requested_or_generated_name() -> None:
    registry = ConnectionRegistry(name_factory=lambda: "Calm Owl")

    assert registry.register("a", "  Alice ") == "Alice"
    assert registry.register("b", "") == "Calm Owl"
    assert registry.register("c", "   ") == "Calm Owl"
    assert registry.register("d") == "Calm Owl"
    assert registry.lookup("a") == "Alice"
    assert len(registry) == 4


def test_registry_register_overwrites_and_remove_is_idempotent() -> None:
    registry = ConnectionRegistry()
    registry.register("a", "Alice")
    registry.register("a", "Alicia")
    assert registry.lookup("a") == "Alicia"

    registry.remove("a")
    registry.remove("a")
    assert registry.lookup("a") is None
    assert "a" not in registry


def test_create_room_initial_state() -> None:
    store = RoomStore(id_factory=SequentialIds("ABC123"))

    room_id = store.create_room("a")

    assert room_id == "ABC123"
    snapshot = store.get_room(room_id, "a")
    assert snapshot.members == ("a",)
    assert snapshot.creator_id == "a"
    assert snapshot.is_creator is True
    assert snapshot.created_at is not None
    assert store.room_count == 1
    assert store.member_count == 1


def test_create_room_retries_on_collision() -> None:
    store = RoomStore(id_factory=SequentialIds("AAAAAA", "AAAAAA", "BBBBBB"))
    assert store.create_room("a") == "AAAAAA"
    assert store.create_room("b") == "BBBBBB"
    assert store.room_count == 2


def test_create_room_gives_up_after_max_attempts() -> None:
    store = RoomStore(id_factory=lambda: "SAME01", max_id_attempts=3)
    store.create_room("a")

    with pytest.raises(RoomIdUnavailable):
        store.create_room("b")
    assert store.room_count == 1


def test_join_room_appends_in_order(rooms: RoomStore) -> None:
    room_id = rooms.create_room("a")
    rooms.join_room(room_id, "b")
    snapshot = rooms.join_room(room_id, "c")

    assert snapshot.members == ("a", "b", "c")
    assert snapshot.is_creator is False


def test_join_unknown_room_has_no_side_effects(rooms: RoomStore) -> None:
    with pytest.raises(RoomNotFound):
        rooms.join_room("NOPE00", "a")
    assert rooms.room_count == 0
    assert "NOPE00" not in rooms


def test_rejoin_is_noop(rooms: RoomStore) -> None:
    room_id = rooms.create_room("a")
    rooms.join_room(room_id, "b")

    snapshot = rooms.join_room(room_id, "b")

    assert snapshot.members == ("a", "b")


def test_capacity_boundary(rooms: RoomStore) -> None:
    room_id = rooms.create_room("m0")
    for index in range(1, 9):
        rooms.join_room(room_id, f"m{index}")
    assert len(rooms.get_room(room_id).members) == 9

    # 9 -> 10 is accepted
    assert len(rooms.join_room(room_id, "m9").members) == 10

    # 10 -> 11 is rejected and membership is unchanged
    with pytest.raises(RoomFull):
        rooms.join_room(room_id, "m10")
    assert rooms.get_room(room_id).members == tuple(f"m{index}" for index in range(10))


def test_member_already_in_full_room_can_rejoin(rooms: RoomStore) -> None:
    room_id = rooms.create_room("m0")
    for index in range(1, 10):
        rooms.join_room(room_id, f"m{index}")

    assert len(rooms.join_room(room_id, "m3").members) == 10


def test_leave_returns_remaining_and_deletes_empty_room(rooms: RoomStore) -> None:
    room_id = rooms.create_room("a")
    rooms.join_room(room_id, "b")

    assert rooms.leave(room_id, "b") == ("a",)
    assert room_id in rooms
    assert rooms.leave(room_id, "a") == ()
    assert room_id not in rooms

    with pytest.raises(RoomNotFound):
        rooms.join_room(room_id, "c")


def test_leave_missing_state_is_noop(rooms: RoomStore) -> None:
    room_id = rooms.create_room("a")

    assert rooms.leave("NOPE00", "a") is None
    assert rooms.leave(room_id, "stranger") is None
    assert rooms.get_room(room_id).members == ("a",)


def test_remove_connection_from_all_rooms(rooms: RoomStore) -> None:
    first = rooms.create_room("a")
    second = rooms.create_room("b")
    third = rooms.create_room("c")
    rooms.join_room(first, "b")
    rooms.join_room(third, "d")

    affected = rooms.remove_connection_from_all_rooms("b")

    assert affected == [(first, ("a",)), (second, ())]
    assert second not in rooms
    assert rooms.get_room(third).members == ("c", "d")
    assert rooms.remove_connection_from_all_rooms("b") == []


def test_rooms_for_lists_dual_membership(rooms: RoomStore) -> None:
    first = rooms.create_room("a")
    second = rooms.create_room("a")

    assert rooms.rooms_for("a") == [first, second]
    assert rooms.member_count == 2
