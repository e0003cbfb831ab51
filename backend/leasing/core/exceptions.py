"""Domain exceptions raised by entity transitions."""


class DomainValidationError(Exception):
    """A state transition was refused by the domain model.

    `code` is a stable identifier (e.g. "CONTRACT_INVALID_STATUS") suitable for
    log aggregation; `message` is the human readable reason.
    """

    def __init__(self, code: str, message: str):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class RoomNotFoundError(DomainValidationError):
    """The property has no room with the requested id."""

    def __init__(self, room_id):
        super().__init__("ROOM_NOT_FOUND", f"Room {room_id} not found")
        self.room_id = room_id
