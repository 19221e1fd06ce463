from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    rooms: int
    total_users: int = Field(alias="totalUsers")
    timestamp: str


class RoomStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId")
    exists: bool
    members: int
