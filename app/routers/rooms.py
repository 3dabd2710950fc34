from fastapi import APIRouter, Depends, status
from typing import List
from app.dependencies import get_room_service
from app.schemas.room import RoomCreate, RoomResponse
from app.services.room_service import RoomService


router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
)


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(room: RoomCreate, service: RoomService = Depends(get_room_service)):
    """
    Create a new room.
    """
    return service.create_room(room)


@router.get("", response_model=List[RoomResponse])
def get_rooms(service: RoomService = Depends(get_room_service)):
    """
    Retrieve a list of all rooms.
    """
    return service.list_rooms()


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, service: RoomService = Depends(get_room_service)):
    """
    Retrieve a specific room by ID.
    """
    return service.get_room(room_id)
