"""Booking lifecycle: CRUD plus status transitions with an audit trail."""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from app.config import Settings, get_settings
from app.exceptions import BookingValidationError, InvalidReferenceError, NotFoundError
from app.models.booking import Booking, BookingStatus
from app.models.status_history import SYSTEM_ACTOR, StatusHistory
from app.repositories.base import UnitOfWork
from app.utils.validation_helpers import clean_optional_text, ensure_utc, utcnow

logger = logging.getLogger(__name__)

# Used only when ``enforce_transitions`` is switched on.
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.APPROVED, BookingStatus.REJECTED, BookingStatus.CANCELLED},
    BookingStatus.APPROVED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.REJECTED: set(),
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}


class BookingService:
    def __init__(self, uow: UnitOfWork, settings: Optional[Settings] = None):
        self.uow = uow
        self.settings = settings or get_settings()

    def list_bookings(self) -> List[Booking]:
        bookings = self.uow.bookings.list()
        logger.debug(f"Retrieved {len(bookings)} bookings")
        return bookings

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.uow.bookings.get(booking_id)
        if not booking:
            logger.error(f"Booking not found: {booking_id}")
            raise NotFoundError("Booking", booking_id)
        return booking

    def create_booking(
        self,
        room_id: int,
        title: str,
        description: Optional[str],
        start_time: datetime,
        end_time: datetime,
        booked_by: str,
    ) -> Booking:
        start_time, end_time = ensure_utc(start_time), ensure_utc(end_time)
        with self.uow:
            if not self.uow.rooms.get(room_id):
                logger.error(f"Room not found: {room_id}")
                raise InvalidReferenceError("Room", room_id)
            self._check_window(room_id, start_time, end_time)

            booking = self.uow.bookings.create(
                Booking(
                    room_id=room_id,
                    title=title,
                    description=description,
                    start_time=start_time,
                    end_time=end_time,
                    booked_by=booked_by,
                    status=int(BookingStatus.PENDING),
                    approved_by=None,
                    rejection_reason=None,
                    created_at=utcnow(),
                    updated_at=None,
                )
            )
        logger.debug(f"Created booking: {booking.id} for room_id: {room_id}")
        return booking

    def update_booking(
        self,
        booking_id: int,
        title: str,
        description: Optional[str],
        start_time: datetime,
        end_time: datetime,
    ) -> Booking:
        """Change the title, description and time window of a booking.

        Room, owner and status are left untouched.
        """
        start_time, end_time = ensure_utc(start_time), ensure_utc(end_time)
        with self.uow:
            booking = self.get_booking(booking_id)
            self._check_window(booking.room_id, start_time, end_time, exclude_id=booking.id)

            booking.title = title
            booking.description = description
            booking.start_time = start_time
            booking.end_time = end_time
            booking.updated_at = self._next_timestamp(booking)
            self.uow.bookings.update(booking)
        logger.debug(f"Updated booking: {booking_id}")
        return booking

    def delete_booking(self, booking_id: int) -> None:
        with self.uow:
            if not self.uow.bookings.delete(booking_id):
                logger.error(f"Booking not found: {booking_id}")
                raise NotFoundError("Booking", booking_id)
        logger.debug(f"Deleted booking: {booking_id}")

    def change_status(
        self,
        booking_id: int,
        new_status: BookingStatus,
        approved_by: Optional[str] = None,
        rejection_reason: Optional[str] = None,
        notes: Optional[str] = None,
        changed_by: Optional[str] = None,
    ) -> Booking:
        """Move a booking to ``new_status`` and record the transition.

        The booking update and the history row are written in the same unit
        of work, so either both are stored or neither is. Every call appends
        one history row, also when the status does not actually change.
        """
        new_status = BookingStatus(new_status)
        with self.uow:
            booking = self.get_booking(booking_id)
            previous_status = BookingStatus(booking.status)
            if self.settings.enforce_transitions and new_status != previous_status:
                if new_status not in ALLOWED_TRANSITIONS[previous_status]:
                    logger.error(f"Transition {previous_status.name} -> {new_status.name} refused for booking {booking_id}")
                    raise BookingValidationError(
                        f"Cannot change status from {previous_status.name} to {new_status.name}"
                    )

            now = self._next_timestamp(booking)
            booking.status = int(new_status)
            booking.updated_at = now
            approved_by = clean_optional_text(approved_by)
            if approved_by:
                booking.approved_by = approved_by
            rejection_reason = clean_optional_text(rejection_reason)
            if rejection_reason:
                booking.rejection_reason = rejection_reason
            self.uow.bookings.update(booking)

            self.uow.history.append(
                StatusHistory(
                    booking_id=booking.id,
                    previous_status=int(previous_status),
                    new_status=int(new_status),
                    notes=notes,
                    changed_by=clean_optional_text(changed_by) or SYSTEM_ACTOR,
                    changed_at=now,
                )
            )
        logger.debug(f"Booking {booking_id} status: {previous_status.name} -> {new_status.name}")
        return booking

    def list_status_history(self, booking_id: int) -> List[StatusHistory]:
        self.get_booking(booking_id)
        return self.uow.history.list_for_booking(booking_id)

    def _check_window(self, room_id: int, start_time: datetime, end_time: datetime, exclude_id: Optional[int] = None):
        if self.settings.enforce_time_order and start_time >= end_time:
            logger.error(f"Invalid time range: {start_time} to {end_time}")
            raise BookingValidationError("End time must be after start time")
        if self.settings.reject_overlaps:
            overlapping = self.uow.bookings.find_overlapping(room_id, start_time, end_time, exclude_id=exclude_id)
            if overlapping:
                logger.error(
                    f"Overlapping booking {overlapping.id} found for room_id: {room_id}, time: {start_time} to {end_time}"
                )
                raise BookingValidationError("Room is already booked for this time slot")

    @staticmethod
    def _next_timestamp(booking: Booking) -> datetime:
        """Current time, nudged forward so ``updated_at`` never goes backwards."""
        now = utcnow()
        last = ensure_utc(booking.updated_at or booking.created_at)
        if last is not None and now <= last:
            now = last + timedelta(microseconds=1)
        return now
