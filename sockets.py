"""Socket.IO transport for the room coordinator.

Inbound named events are validated with the pydantic schemas in
``schemas.events`` and handed to the ``SessionCoordinator``. Outbound
events go through ``SocketIOTransport``, which schedules ``sio.emit`` to
a single sid and never lets a delivery failure reach the sender.
"""

import asyncio
from typing import Any, Optional, Set

import socketio
from pydantic import ValidationError

from constants import CORS_ORIGINS
from coordinator import SIGNAL_EVENTS, SessionCoordinator
from logging_config import get_logger
from schemas.events import (
    AudioMessage,
    CreateRoomRequest,
    JoinRoomRequest,
    LeaveRoomRequest,
    SignalMessage,
)

logger = get_logger(__name__)

INVALID_REQUEST = "Invalid request"


def create_socket_server() -> socketio.AsyncServer:
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=CORS_ORIGINS if CORS_ORIGINS != ["*"] else "*",
        logger=False,
        engineio_logger=False,
    )


class SocketIOTransport:
    """Delivers relay events to a single Socket.IO sid, fire-and-forget."""

    def __init__(self, sio: socketio.AsyncServer):
        self.sio = sio
        # Keep references so pending emits are not garbage collected
        self._pending: Set[asyncio.Task] = set()

    def deliver(self, connection_id: str, event: str, payload: Any) -> None:
        task = asyncio.get_running_loop().create_task(self._emit(connection_id, event, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _emit(self, connection_id: str, event: str, payload: Any):
        try:
            await self.sio.emit(event, payload, to=connection_id)
        except Exception as e:
            logger.debug(f"Emit of '{event}' to {connection_id} dropped: {e}")

    async def drain(self):
        """Wait for every emit scheduled so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


class RoomEventHandlers:
    def __init__(self, coordinator: SessionCoordinator):
        self.coordinator = coordinator

    def _invalid(self, sid: str, event: str, error: ValidationError):
        logger.warning(f"Invalid '{event}' payload from {sid}: {error.error_count()} errors")
        self.coordinator.relay.send_to(sid, "error", {"message": INVALID_REQUEST})

    async def on_connect(self, sid: str, environ: dict, auth: Optional[dict] = None):
        self.coordinator.on_connect(sid)

    async def on_disconnect(self, sid: str, *args):
        self.coordinator.on_disconnect(sid)

    async def on_create_room(self, sid: str, data: Any = None):
        try:
            request = CreateRoomRequest.model_validate(data if isinstance(data, dict) else {})
        except ValidationError as e:
            self._invalid(sid, "create-room", e)
            return
        self.coordinator.on_create_room(sid, request.user_name)

    async def on_join_room(self, sid: str, data: Any = None):
        try:
            request = JoinRoomRequest.parse(data)
        except ValidationError as e:
            self._invalid(sid, "join-room", e)
            return
        self.coordinator.on_join_room(sid, request.room_id, request.user_name)

    async def on_leave_room(self, sid: str, data: Any = None):
        try:
            request = LeaveRoomRequest.parse(data)
        except ValidationError as e:
            self._invalid(sid, "leave-room", e)
            return
        self.coordinator.on_leave_room(sid, request.room_id)

    async def on_audio(self, sid: str, data: Any = None):
        try:
            message = AudioMessage.parse(data)
        except ValidationError as e:
            self._invalid(sid, "audio", e)
            return
        self.coordinator.on_audio(sid, message.room_id, message.audio_data)

    def signal_handler(self, kind: str):
        async def handler(sid: str, data: Any = None):
            try:
                message = SignalMessage.model_validate(data)
            except ValidationError as e:
                self._invalid(sid, kind, e)
                return
            self.coordinator.on_signal(kind, sid, message.to, data)

        return handler

    def register(self, sio: socketio.AsyncServer):
        sio.on("connect", self.on_connect)
        sio.on("disconnect", self.on_disconnect)
        sio.on("create-room", self.on_create_room)
        sio.on("join-room", self.on_join_room)
        sio.on("leave-room", self.on_leave_room)
        sio.on("audio", self.on_audio)
        for kind in SIGNAL_EVENTS:
            sio.on(kind, self.signal_handler(kind))
        logger.info("Socket.IO room event handlers registered")
