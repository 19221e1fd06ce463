from datetime import datetime, timezone
from typing import Any, Dict, Optional

from backend import ConnectionRegistry, RoomStore
from constants import DEFAULT_DISPLAY_NAME
from errors import RoomError
from logging_config import get_logger
from relay import RelayDispatcher

logger = get_logger(__name__)

SIGNAL_EVENTS = ("webrtc-offer", "webrtc-answer", "webrtc-ice-candidate")


class SessionCoordinator:
    """Handles room events for every connection.

    All handlers are plain synchronous methods: each one finishes its
    lookup and mutation of the room store before any outbound event is
    handed to the relay, and never suspends in between.
    """

    def __init__(self, rooms: RoomStore, registry: ConnectionRegistry, relay: RelayDispatcher):
        self.rooms = rooms
        self.registry = registry
        self.relay = relay

    def display_name(self, connection_id: str) -> str:
        return self.registry.lookup(connection_id) or DEFAULT_DISPLAY_NAME

    def _error(self, connection_id: str, message: str):
        self.relay.send_to(connection_id, "error", {"message": message})

    def on_connect(self, connection_id: str) -> str:
        self.relay.connect(connection_id)
        name = self.registry.register(connection_id)
        logger.info(f"Connection {connection_id} connected as '{name}'")
        return name

    def on_create_room(self, connection_id: str, requested_name: Optional[str] = None) -> Optional[str]:
        user_name = self.registry.register(connection_id, requested_name)
        try:
            room_id = self.rooms.create_room(connection_id)
        except RoomError as e:
            logger.error(f"Room creation failed for {connection_id}: {e.message}")
            self._error(connection_id, e.message)
            return None

        self.relay.join_group(room_id, connection_id)
        self.relay.send_to(connection_id, "room-created", {"roomId": room_id, "userName": user_name})
        logger.info(f"Room {room_id} created by {user_name} ({connection_id})")
        return room_id

    def on_join_room(self, connection_id: str, room_id: str, requested_name: Optional[str] = None) -> bool:
        user_name = self.registry.register(connection_id, requested_name)
        already_member = room_id in self.rooms and connection_id in self.rooms.get_room(room_id).members
        try:
            snapshot = self.rooms.join_room(room_id, connection_id)
        except RoomError as e:
            logger.warning(f"Join room {room_id} failed for {connection_id}: {e.message}")
            self._error(connection_id, e.message)
            return False

        self.relay.join_group(room_id, connection_id)

        # The joiner gets the full member list before anyone else hears about it
        users = [{"id": member, "name": self.display_name(member)} for member in snapshot.members]
        self.relay.send_to(connection_id, "room-joined", {
            "roomId": room_id,
            "users": users,
            "userName": user_name,
            "isCreator": snapshot.is_creator,
        })
        if not already_member:
            for member in snapshot.members:
                if member != connection_id:
                    self.relay.send_to(member, "user-joined", {"userId": connection_id, "userName": user_name})

        logger.info(f"{user_name} ({connection_id}) joined room {room_id} ({len(snapshot.members)} members)")
        return True

    def on_audio(self, connection_id: str, room_id: str, payload: Any) -> int:
        return self.relay.broadcast_to_room(room_id, "audio", {
            "from": connection_id,
            "fromName": self.display_name(connection_id),
            "audioData": payload,
        }, exclude=connection_id)

    def on_signal(self, kind: str, connection_id: str, target_id: str, payload: Dict[str, Any]) -> bool:
        if kind not in SIGNAL_EVENTS:
            raise ValueError(f"Unknown signaling event: {kind}")
        message = {key: value for key, value in payload.items() if key != "to"}
        message["from"] = connection_id
        logger.debug(f"Relaying {kind} from {connection_id} to {target_id}")
        return self.relay.send_to(target_id, kind, message)

    def on_leave_room(self, connection_id: str, room_id: str):
        user_name = self.display_name(connection_id)
        self.relay.leave_group(room_id, connection_id)
        remaining = self.rooms.leave(room_id, connection_id)
        if remaining:
            for member in remaining:
                self.relay.send_to(member, "user-left", {"userId": connection_id, "userName": user_name})
        if remaining is not None:
            logger.info(f"{user_name} ({connection_id}) left room {room_id}")
        self.registry.remove(connection_id)

    def on_disconnect(self, connection_id: str):
        user_name = self.display_name(connection_id)
        for room_id, remaining in self.rooms.remove_connection_from_all_rooms(connection_id):
            for member in remaining:
                self.relay.send_to(member, "user-left", {"userId": connection_id, "userName": user_name})
        self.relay.disconnect(connection_id)
        self.registry.remove(connection_id)
        logger.info(f"Connection {connection_id} ({user_name}) disconnected")

    def health(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "rooms": self.rooms.room_count,
            "totalUsers": self.rooms.member_count,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def room_status(self, room_id: str) -> Dict[str, Any]:
        snapshot = self.rooms.get_room(room_id)
        return {
            "roomId": room_id,
            "exists": snapshot is not None,
            "members": len(snapshot.members) if snapshot else 0,
        }
