import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend import ConnectionRegistry, RoomStore
from constants import CORS_ORIGINS, LOG_FILE, LOG_LEVEL, ROOM_CAPACITY
from coordinator import SessionCoordinator
from logging_config import get_logger, setup_logging
from relay import RelayDispatcher
from routers.rooms import rooms_router
from sockets import RoomEventHandlers, SocketIOTransport, create_socket_server

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)


def create_app(coordinator: SessionCoordinator = None) -> FastAPI:
    """Build the HTTP app and the Socket.IO server around one coordinator.

    Returns the FastAPI app; the combined ASGI app (Socket.IO in front of
    FastAPI) is available as ``app.state.asgi_app``.
    """
    sio = create_socket_server()
    if coordinator is None:
        coordinator = SessionCoordinator(
            rooms=RoomStore(capacity=ROOM_CAPACITY),
            registry=ConnectionRegistry(),
            relay=RelayDispatcher(SocketIOTransport(sio)),
        )
    RoomEventHandlers(coordinator).register(sio)

    fastapi_app = FastAPI(title="Voice Rooms")
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.include_router(rooms_router)

    fastapi_app.state.coordinator = coordinator
    fastapi_app.state.sio = sio
    fastapi_app.state.asgi_app = socketio.ASGIApp(sio, other_asgi_app=fastapi_app)
    return fastapi_app


app = create_app()
asgi_app = app.state.asgi_app

logger.info("FastAPI application initialized")
