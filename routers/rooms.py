from fastapi import APIRouter, Depends, Request

from coordinator import SessionCoordinator
from logging_config import get_logger
from schemas.events import normalize_room_id
from schemas.rooms import HealthResponse, RoomStatusResponse

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/api", tags=["rooms"])


def get_coordinator(request: Request) -> SessionCoordinator:
    return request.app.state.coordinator


@rooms_router.get("/health", response_model=HealthResponse, response_model_by_alias=True)
async def health(coordinator: SessionCoordinator = Depends(get_coordinator)):
    """Live room count and total member count across all rooms."""
    return HealthResponse(**coordinator.health())


@rooms_router.get("/rooms/{room_id}", response_model=RoomStatusResponse, response_model_by_alias=True)
async def get_room_status(room_id: str, coordinator: SessionCoordinator = Depends(get_coordinator)):
    """
    Report whether a room id is live and how many members it has.

    Unknown ids are not an error: the response carries ``exists: false``.
    """
    status = coordinator.room_status(normalize_room_id(room_id))
    logger.debug(f"Room status for {status['roomId']}: exists={status['exists']}, members={status['members']}")
    return RoomStatusResponse(**status)
