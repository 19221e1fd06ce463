class RoomError(Exception):
    """Base class for room failures reported back to the acting connection."""

    message = "Room error"

    def __init__(self, room_id: str = None, message: str = None):
        self.room_id = room_id
        if message:
            self.message = message
        super().__init__(self.message)


class RoomNotFound(RoomError):
    message = "Room not found"


class RoomFull(RoomError):
    message = "Room is full"


class RoomIdUnavailable(RoomError):
    message = "Could not allocate a room id"
