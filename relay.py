from typing import Any, Dict, List, Optional, Protocol, Set

from logging_config import get_logger

logger = get_logger(__name__)


class Transport(Protocol):
    def deliver(self, connection_id: str, event: str, payload: Any) -> None:
        ...


class RelayDispatcher:
    """Best-effort fan-out of outbound events.

    Keeps its own index of live connections and per-room broadcast groups,
    so delivery does not depend on the transport's grouping primitive.
    Payloads are never inspected and delivery to a connection that is no
    longer live is dropped.
    """

    def __init__(self, transport: Transport):
        self.transport = transport
        self._connections: Set[str] = set()
        # Format: {room_id: [connection_id, ...]} in join order
        self._groups: Dict[str, List[str]] = {}

    def connect(self, connection_id: str):
        self._connections.add(connection_id)

    def disconnect(self, connection_id: str):
        self._connections.discard(connection_id)
        for room_id in list(self._groups):
            self.leave_group(room_id, connection_id)

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def join_group(self, room_id: str, connection_id: str):
        members = self._groups.setdefault(room_id, [])
        if connection_id not in members:
            members.append(connection_id)
            logger.debug(f"Connection {connection_id} joined broadcast group {room_id}")

    def leave_group(self, room_id: str, connection_id: str):
        members = self._groups.get(room_id)
        if not members or connection_id not in members:
            return
        members.remove(connection_id)
        logger.debug(f"Connection {connection_id} left broadcast group {room_id}")
        if not members:
            del self._groups[room_id]

    def group_members(self, room_id: str) -> List[str]:
        return list(self._groups.get(room_id, ()))

    def send_to(self, connection_id: str, event: str, payload: Any) -> bool:
        if connection_id not in self._connections:
            logger.debug(f"Dropping '{event}' for {connection_id}: not connected")
            return False
        try:
            self.transport.deliver(connection_id, event, payload)
        except Exception as e:
            logger.warning(f"Delivery of '{event}' to {connection_id} failed: {e}")
            return False
        return True

    def broadcast_to_room(self, room_id: str, event: str, payload: Any, exclude: Optional[str] = None) -> int:
        delivered = 0
        for connection_id in self.group_members(room_id):
            if connection_id == exclude:
                continue
            if self.send_to(connection_id, event, payload):
                delivered += 1
        logger.debug(f"Broadcast '{event}' to {delivered} connections in room {room_id}")
        return delivered
