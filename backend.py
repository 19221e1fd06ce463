import random
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from constants import ROOM_CAPACITY, ROOM_ID_LENGTH, ROOM_ID_MAX_ATTEMPTS
from errors import RoomFull, RoomIdUnavailable, RoomNotFound
from logging_config import get_logger

logger = get_logger(__name__)

ADJECTIVES = ["Happy", "Clever", "Brave", "Swift", "Gentle", "Witty", "Calm", "Proud", "Lucky", "Smart"]
ANIMALS = ["Tiger", "Eagle", "Dolphin", "Fox", "Lion", "Owl", "Wolf", "Bear", "Hawk", "Falcon"]

ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_display_name() -> str:
    return f"{random.choice(ADJECTIVES)} {random.choice(ANIMALS)}"


def generate_room_id(length: int = ROOM_ID_LENGTH) -> str:
    return ''.join(random.choices(ROOM_ID_ALPHABET, k=length))


class ConnectionRegistry:
    """Display names of live connections, keyed by connection id."""

    def __init__(self, name_factory: Callable[[], str] = generate_display_name):
        self._names: Dict[str, str] = {}
        self._name_factory = name_factory

    def register(self, connection_id: str, requested_name: Optional[str] = None) -> str:
        name = requested_name.strip() if requested_name and requested_name.strip() else self._name_factory()
        self._names[connection_id] = name
        logger.debug(f"Registered connection {connection_id} as '{name}'")
        return name

    def lookup(self, connection_id: str) -> Optional[str]:
        return self._names.get(connection_id)

    def remove(self, connection_id: str):
        if self._names.pop(connection_id, None) is not None:
            logger.debug(f"Removed registry entry for connection {connection_id}")

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._names

    def __len__(self) -> int:
        return len(self._names)


@dataclass
class Room:
    room_id: str
    creator_id: str
    members: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class RoomSnapshot:
    room_id: str
    members: Tuple[str, ...]
    creator_id: str
    created_at: datetime
    is_creator: bool = False


class RoomStore:
    """In-memory room table.

    The store is the only owner of ``Room`` objects; callers get immutable
    ``RoomSnapshot`` values back and look rooms up by id on every call.
    A room is deleted the moment its member list becomes empty.
    """

    def __init__(
        self,
        capacity: int = ROOM_CAPACITY,
        id_factory: Callable[[], str] = generate_room_id,
        max_id_attempts: int = ROOM_ID_MAX_ATTEMPTS,
    ):
        self.capacity = capacity
        self._rooms: Dict[str, Room] = {}
        self._id_factory = id_factory
        self._max_id_attempts = max_id_attempts
        logger.info(f"Initializing RoomStore with capacity {capacity}")

    def _snapshot(self, room: Room, connection_id: Optional[str] = None) -> RoomSnapshot:
        return RoomSnapshot(
            room_id=room.room_id,
            members=tuple(room.members),
            creator_id=room.creator_id,
            created_at=room.created_at,
            is_creator=connection_id is not None and room.creator_id == connection_id,
        )

    def _mint_room_id(self) -> str:
        for attempt in range(1, self._max_id_attempts + 1):
            room_id = self._id_factory()
            if room_id and room_id not in self._rooms:
                return room_id
            logger.warning(f"Room id {room_id!r} unusable on attempt {attempt}, retrying")
        raise RoomIdUnavailable()

    def create_room(self, creator_id: str) -> str:
        room_id = self._mint_room_id()
        self._rooms[room_id] = Room(room_id=room_id, creator_id=creator_id, members=[creator_id])
        logger.info(f"Room {room_id} created by {creator_id}")
        return room_id

    def join_room(self, room_id: str, connection_id: str) -> RoomSnapshot:
        room = self._rooms.get(room_id)
        if room is None:
            logger.debug(f"Join failed: room {room_id} not found")
            raise RoomNotFound(room_id)

        if connection_id in room.members:
            logger.debug(f"Connection {connection_id} already in room {room_id}")
            return self._snapshot(room, connection_id)

        if len(room.members) >= self.capacity:
            logger.debug(f"Join failed: room {room_id} is full ({len(room.members)}/{self.capacity})")
            raise RoomFull(room_id)

        room.members.append(connection_id)
        logger.info(f"Connection {connection_id} joined room {room_id} ({len(room.members)}/{self.capacity})")
        return self._snapshot(room, connection_id)

    def _remove_member(self, room: Room, connection_id: str) -> Tuple[str, ...]:
        room.members.remove(connection_id)
        remaining = tuple(room.members)
        if not remaining:
            del self._rooms[room.room_id]
            logger.info(f"Room {room.room_id} deleted (empty)")
        return remaining

    def leave(self, room_id: str, connection_id: str) -> Optional[Tuple[str, ...]]:
        """Remove a member from a room.

        Returns the remaining members, or ``None`` when the room or the
        membership did not exist.
        """
        room = self._rooms.get(room_id)
        if room is None or connection_id not in room.members:
            return None
        remaining = self._remove_member(room, connection_id)
        logger.info(f"Connection {connection_id} left room {room_id} ({len(remaining)} remaining)")
        return remaining

    def remove_connection_from_all_rooms(self, connection_id: str) -> List[Tuple[str, Tuple[str, ...]]]:
        affected = []
        for room in list(self._rooms.values()):
            if connection_id in room.members:
                affected.append((room.room_id, self._remove_member(room, connection_id)))
        if affected:
            logger.debug(f"Connection {connection_id} removed from rooms {[room_id for room_id, _ in affected]}")
        return affected

    def get_room(self, room_id: str, connection_id: Optional[str] = None) -> Optional[RoomSnapshot]:
        room = self._rooms.get(room_id)
        return self._snapshot(room, connection_id) if room else None

    def rooms_for(self, connection_id: str) -> List[str]:
        return [room_id for room_id, room in self._rooms.items() if connection_id in room.members]

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    @property
    def member_count(self) -> int:
        return sum(len(room.members) for room in self._rooms.values())
