from typing import List
from fastapi import APIRouter, Depends, status
from app.dependencies import get_booking_service
from app.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    StatusChangeRequest,
    StatusHistoryResponse,
)
from app.services.booking_service import BookingService

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


@router.get(
    "",
    response_model=List[BookingResponse],
    summary="List all bookings",
    description="Retrieve every booking, unfiltered."
)
def get_bookings(service: BookingService = Depends(get_booking_service)):
    return service.list_bookings()


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
    description="Retrieve a specific booking by its ID."
)
def get_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    return service.get_booking(booking_id)


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Create a pending booking for an existing room."
)
def create_booking(
    booking: BookingCreate,
    service: BookingService = Depends(get_booking_service),
):
    """
    Create a new booking. The booking starts out as Pending.

    - **roomId**: ID of the room to book, must exist.
    - **title**: Title of the booking.
    - **description**: (Optional) Free text.
    - **startTime** / **endTime**: Time window, ISO-8601.
    - **bookedBy**: Name of the person booking.
    """
    return service.create_booking(
        room_id=booking.room_id,
        title=booking.title,
        description=booking.description,
        start_time=booking.start_time,
        end_time=booking.end_time,
        booked_by=booking.booked_by,
    )


@router.put(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a booking",
    description="Update title, description and time window of a booking."
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    service: BookingService = Depends(get_booking_service),
):
    """
    Update a booking's details. Room, booker and status cannot be changed here.
    """
    service.update_booking(
        booking_id,
        title=booking_update.title,
        description=booking_update.description,
        start_time=booking_update.start_time,
        end_time=booking_update.end_time,
    )
    return None


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a booking",
    description="Delete a booking together with its status history."
)
def delete_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    service.delete_booking(booking_id)
    return None


@router.put(
    "/{booking_id}/status",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change booking status",
    description="Set a new status and append an entry to the booking's status history."
)
def change_booking_status(
    booking_id: int,
    status_change: StatusChangeRequest,
    service: BookingService = Depends(get_booking_service),
):
    """
    Change the status of a booking.

    - **status** (or **newStatus**): Integer status code, 0=Pending, 1=Approved,
      2=Rejected, 3=Completed, 4=Cancelled.
    - **approvedBy**: (Optional) Stored on the booking when not empty.
    - **rejectionReason**: (Optional) Stored on the booking when not empty.
    - **notes**: (Optional) Stored on the history entry.
    - **changedBy**: (Optional) Defaults to "System".
    """
    service.change_status(
        booking_id,
        status_change.status,
        approved_by=status_change.approved_by,
        rejection_reason=status_change.rejection_reason,
        notes=status_change.notes,
        changed_by=status_change.changed_by,
    )
    return None


@router.get(
    "/{booking_id}/history",
    response_model=List[StatusHistoryResponse],
    summary="Booking status history",
    description="List the status transitions of a booking, oldest first."
)
def get_booking_history(booking_id: int, service: BookingService = Depends(get_booking_service)):
    return service.list_status_history(booking_id)
