"""SQLAlchemy-backed repositories sharing one session per unit of work."""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import StorageError
from app.models.booking import Booking, BookingStatus
from app.models.room import Room
from app.models.status_history import StatusHistory
from app.repositories.base import (
    BookingRepository,
    RoomRepository,
    StatusHistoryRepository,
    UnitOfWork,
)

logger = logging.getLogger(__name__)

INACTIVE_STATUSES = (int(BookingStatus.REJECTED), int(BookingStatus.CANCELLED))


class _SqlRepository:
    def __init__(self, db: Session):
        self.db = db

    def _flush(self):
        try:
            self.db.flush()
        except SQLAlchemyError as exc:
            logger.error(f"Flush failed: {exc}")
            raise StorageError("Database write failed") from exc


class SqlRoomRepository(_SqlRepository, RoomRepository):
    def list(self) -> List[Room]:
        return self.db.query(Room).all()

    def get(self, room_id: int) -> Optional[Room]:
        return self.db.query(Room).filter(Room.id == room_id).first()

    def create(self, room: Room) -> Room:
        self.db.add(room)
        self._flush()
        return room


class SqlBookingRepository(_SqlRepository, BookingRepository):
    def list(self) -> List[Booking]:
        return self.db.query(Booking).all()

    def get(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def create(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self._flush()
        return booking

    def update(self, booking: Booking) -> Booking:
        # instances loaded through this session are tracked already
        self.db.add(booking)
        self._flush()
        return booking

    def delete(self, booking_id: int) -> bool:
        booking = self.get(booking_id)
        if not booking:
            return False
        self.db.delete(booking)
        self._flush()
        return True

    def find_overlapping(
        self, room_id: int, start_time: datetime, end_time: datetime, exclude_id: Optional[int] = None
    ) -> Optional[Booking]:
        query = self.db.query(Booking).filter(
            Booking.room_id == room_id,
            Booking.status.notin_(INACTIVE_STATUSES),
            Booking.start_time < end_time,
            Booking.end_time > start_time,
        )
        if exclude_id is not None:
            query = query.filter(Booking.id != exclude_id)
        return query.first()


class SqlStatusHistoryRepository(_SqlRepository, StatusHistoryRepository):
    def append(self, record: StatusHistory) -> StatusHistory:
        self.db.add(record)
        self._flush()
        return record

    def list_for_booking(self, booking_id: int) -> List[StatusHistory]:
        return (
            self.db.query(StatusHistory)
            .filter(StatusHistory.booking_id == booking_id)
            .order_by(StatusHistory.changed_at, StatusHistory.id)
            .all()
        )


class SqlUnitOfWork(UnitOfWork):
    """Unit of work over a request-scoped session from ``get_db``."""

    def __init__(self, db: Session):
        self.db = db
        self.rooms = SqlRoomRepository(db)
        self.bookings = SqlBookingRepository(db)
        self.history = SqlStatusHistoryRepository(db)

    def commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Commit failed, transaction rolled back: {exc}")
            raise StorageError("Database commit failed") from exc

    def rollback(self) -> None:
        self.db.rollback()
