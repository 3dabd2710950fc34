"""Storage interfaces for rooms, bookings and the status history ledger.

The services only talk to a :class:`UnitOfWork`. Using it as a context
manager opens a transaction: a clean exit commits every write made through
its repositories, an exception rolls all of them back.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from app.models.booking import Booking
from app.models.room import Room
from app.models.status_history import StatusHistory


class RoomRepository(ABC):
    @abstractmethod
    def list(self) -> List[Room]:
        raise NotImplementedError

    @abstractmethod
    def get(self, room_id: int) -> Optional[Room]:
        raise NotImplementedError

    @abstractmethod
    def create(self, room: Room) -> Room:
        """Persist a new room and assign its id."""
        raise NotImplementedError


class BookingRepository(ABC):
    @abstractmethod
    def list(self) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: int) -> Optional[Booking]:
        raise NotImplementedError

    @abstractmethod
    def create(self, booking: Booking) -> Booking:
        """Persist a new booking and assign its id."""
        raise NotImplementedError

    @abstractmethod
    def update(self, booking: Booking) -> Booking:
        """Write the current field values of an existing booking."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, booking_id: int) -> bool:
        """Remove a booking together with its status history.

        Returns False when there was nothing to delete.
        """
        raise NotImplementedError

    @abstractmethod
    def find_overlapping(
        self, room_id: int, start_time: datetime, end_time: datetime, exclude_id: Optional[int] = None
    ) -> Optional[Booking]:
        """Return an active booking of ``room_id`` overlapping the window, if any."""
        raise NotImplementedError


class StatusHistoryRepository(ABC):
    @abstractmethod
    def append(self, record: StatusHistory) -> StatusHistory:
        raise NotImplementedError

    @abstractmethod
    def list_for_booking(self, booking_id: int) -> List[StatusHistory]:
        """History rows of a booking, oldest first."""
        raise NotImplementedError


class UnitOfWork(ABC):
    rooms: RoomRepository
    bookings: BookingRepository
    history: StatusHistoryRepository

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError
