from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_room_id(value: str) -> str:
    return value.strip().upper()


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class CreateRoomRequest(EventPayload):
    user_name: Optional[str] = Field(default=None, alias="userName")


class RoomRequest(EventPayload):
    room_id: str = Field(alias="roomId", min_length=1)

    @field_validator("room_id")
    @classmethod
    def _normalize(cls, value: str) -> str:
        room_id = normalize_room_id(value)
        if not room_id:
            raise ValueError("roomId must not be blank")
        return room_id

    @classmethod
    def parse(cls, data: Union[str, dict, None]):
        """Accept either the bare room id string or an object payload."""
        if isinstance(data, str):
            data = {"roomId": data}
        return cls.model_validate(data if data is not None else {})


class JoinRoomRequest(RoomRequest):
    user_name: Optional[str] = Field(default=None, alias="userName")


class LeaveRoomRequest(RoomRequest):
    pass


class AudioMessage(RoomRequest):
    audio_data: Any = Field(alias="audioData")


class SignalMessage(EventPayload):
    to: str = Field(min_length=1)
