import logging
from typing import List

from app.exceptions import NotFoundError
from app.models.room import Room
from app.repositories.base import UnitOfWork
from app.schemas.room import RoomCreate

logger = logging.getLogger(__name__)


class RoomService:
    """Read/create access to the room catalog."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def list_rooms(self) -> List[Room]:
        rooms = self.uow.rooms.list()
        logger.debug(f"Retrieved {len(rooms)} rooms")
        return rooms

    def get_room(self, room_id: int) -> Room:
        room = self.uow.rooms.get(room_id)
        if not room:
            logger.error(f"Room not found: {room_id}")
            raise NotFoundError("Room", room_id)
        return room

    def create_room(self, room_in: RoomCreate) -> Room:
        data = room_in.model_dump()
        data["type"] = int(data["type"])
        with self.uow:
            room = self.uow.rooms.create(Room(**data))
        logger.debug(f"Created room: {room.id}")
        return room
