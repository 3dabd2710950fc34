"""Demo data loaded on startup when ``seed_demo_data`` is enabled."""
import logging
from datetime import datetime, timezone

from app.repositories.base import UnitOfWork
from app.schemas.room import RoomCreate
from app.services.booking_service import BookingService
from app.services.room_service import RoomService

logger = logging.getLogger(__name__)

DEMO_ROOMS = [
    {"name": "Seminar Room A", "capacity": 30, "location": "Building A, 2nd floor"},
    {"name": "Meeting Room B", "capacity": 50, "location": "Building B, 3rd floor"},
    {"name": "Classroom C", "capacity": 40, "location": "Building C, 1st floor"},
    {"name": "Auditorium", "capacity": 200, "location": "Building D, 4th floor"},
]

DEMO_BOOKINGS = [
    {
        "room": 0,
        "title": "Python Workshop",
        "description": "Python training for all levels",
        "start_time": datetime(2026, 2, 15, 10, 0, tzinfo=timezone.utc),
        "end_time": datetime(2026, 2, 15, 12, 0, tzinfo=timezone.utc),
        "booked_by": "John Doe",
    },
    {
        "room": 1,
        "title": "Board Meeting",
        "description": "Monthly performance review",
        "start_time": datetime(2026, 2, 11, 14, 0, tzinfo=timezone.utc),
        "end_time": datetime(2026, 2, 11, 15, 30, tzinfo=timezone.utc),
        "booked_by": "Jane Smith",
    },
]


def seed_demo_data(uow: UnitOfWork) -> None:
    """Insert demo rooms and bookings into empty tables."""
    room_service = RoomService(uow)
    rooms = room_service.list_rooms()
    if not rooms:
        rooms = [room_service.create_room(RoomCreate(**data)) for data in DEMO_ROOMS]
        logger.info("Rooms seeded successfully")

    booking_service = BookingService(uow)
    if not booking_service.list_bookings():
        for data in DEMO_BOOKINGS:
            data = dict(data)
            room = rooms[data.pop("room") % len(rooms)]
            booking_service.create_booking(room_id=room.id, **data)
        logger.info("Bookings seeded successfully")
