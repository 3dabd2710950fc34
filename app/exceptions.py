"""Errors raised by the room and booking services."""


class BookingError(Exception):
    """Base class for domain errors surfaced to API callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BookingError):
    """A requested room or booking does not exist."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidReferenceError(BookingError):
    """A booking points at a room that does not exist."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class BookingValidationError(BookingError):
    """A booking request breaks an enabled booking policy."""


class StorageError(BookingError):
    """The persistence layer failed; details stay in the logs."""
