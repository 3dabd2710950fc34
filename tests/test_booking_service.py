import pytest
from datetime import timedelta

from app.config import Settings
from app.exceptions import BookingValidationError, InvalidReferenceError, NotFoundError, StorageError
from app.models.booking import BookingStatus
from app.repositories.memory import InMemoryStatusHistoryRepository
from app.services.booking_service import BookingService
from tests.conf_tests import END_TIME, START_TIME, booking_service, memory_room, memory_uow


def new_booking(service, room_id, **overrides):
    fields = {
        "room_id": room_id,
        "title": "Sync",
        "description": None,
        "start_time": START_TIME,
        "end_time": END_TIME,
        "booked_by": "Bob",
    }
    fields.update(overrides)
    return service.create_booking(**fields)


def test_create_booking_starts_pending(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    assert booking.id == 1
    assert booking.status == BookingStatus.PENDING
    assert booking.approved_by is None
    assert booking.rejection_reason is None
    assert booking.updated_at is None
    assert booking.created_at is not None


def test_create_booking_unknown_room(booking_service, memory_uow):  # pylint: disable=redefined-outer-name
    with pytest.raises(InvalidReferenceError):
        new_booking(booking_service, 999999)
    assert memory_uow.bookings.list() == []


def test_get_booking_not_found(booking_service):  # pylint: disable=redefined-outer-name
    with pytest.raises(NotFoundError):
        booking_service.get_booking(42)


def test_get_booking_repeated_reads_match(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    first = booking_service.get_booking(booking.id)
    second = booking_service.get_booking(booking.id)
    columns = [column.key for column in first.__table__.columns]
    assert [getattr(first, key) for key in columns] == [getattr(second, key) for key in columns]


def test_update_booking_keeps_room_owner_and_status(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    booking_service.change_status(booking.id, BookingStatus.APPROVED)
    new_start = START_TIME + timedelta(days=2)

    booking_service.update_booking(booking.id, "Retro", "Sprint retro", new_start, new_start + timedelta(hours=1))

    stored = booking_service.get_booking(booking.id)
    assert stored.title == "Retro"
    assert stored.description == "Sprint retro"
    assert stored.start_time == new_start
    assert stored.room_id == memory_room.id
    assert stored.booked_by == "Bob"
    assert stored.status == BookingStatus.APPROVED


def test_update_booking_not_found(booking_service):  # pylint: disable=redefined-outer-name
    with pytest.raises(NotFoundError):
        booking_service.update_booking(7, "Retro", None, START_TIME, END_TIME)


def test_change_status_appends_one_history_row(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    booking_service.change_status(booking.id, BookingStatus.REJECTED, rejection_reason="Conflict")

    stored = booking_service.get_booking(booking.id)
    assert stored.status == BookingStatus.REJECTED
    assert stored.rejection_reason == "Conflict"

    history = booking_service.list_status_history(booking.id)
    assert len(history) == 1
    assert history[0].previous_status == BookingStatus.PENDING
    assert history[0].new_status == BookingStatus.REJECTED
    assert history[0].changed_by == "System"
    assert history[0].changed_at == stored.updated_at


def test_change_status_updated_at_strictly_increases(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    stamps = []
    for _ in range(5):
        booking_service.change_status(booking.id, BookingStatus.PENDING)
        stamps.append(booking_service.get_booking(booking.id).updated_at)
    assert all(earlier < later for earlier, later in zip(stamps, stamps[1:]))
    assert stamps[0] > booking.created_at


def test_change_status_approver_kept_when_blank(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    booking_service.change_status(booking.id, BookingStatus.APPROVED, approved_by="Alice")
    booking_service.change_status(booking.id, BookingStatus.COMPLETED, approved_by="", changed_by="  ")

    stored = booking_service.get_booking(booking.id)
    assert stored.approved_by == "Alice"
    assert booking_service.list_status_history(booking.id)[-1].changed_by == "System"


def test_change_status_no_op_transition_recorded(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    booking_service.change_status(booking.id, BookingStatus.PENDING, notes="still waiting", changed_by="Dave")
    history = booking_service.list_status_history(booking.id)
    assert len(history) == 1
    assert history[0].previous_status == history[0].new_status == BookingStatus.PENDING
    assert history[0].notes == "still waiting"
    assert history[0].changed_by == "Dave"


def test_change_status_completed_back_to_pending_allowed(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    booking_service.change_status(booking.id, BookingStatus.COMPLETED)
    booking_service.change_status(booking.id, BookingStatus.PENDING)
    assert booking_service.get_booking(booking.id).status == BookingStatus.PENDING


def test_change_status_is_atomic(booking_service, memory_room, monkeypatch):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)

    def broken_append(self, record):
        raise StorageError("Database write failed")

    monkeypatch.setattr(InMemoryStatusHistoryRepository, "append", broken_append)
    with pytest.raises(StorageError):
        booking_service.change_status(booking.id, BookingStatus.APPROVED, approved_by="Alice")
    monkeypatch.undo()

    stored = booking_service.get_booking(booking.id)
    assert stored.status == BookingStatus.PENDING
    assert stored.approved_by is None
    assert stored.updated_at is None
    assert booking_service.list_status_history(booking.id) == []


def test_delete_booking_cascades_history(booking_service, memory_room, memory_uow):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    other = new_booking(booking_service, memory_room.id, title="Other")
    booking_service.change_status(booking.id, BookingStatus.APPROVED)
    booking_service.change_status(other.id, BookingStatus.APPROVED)

    booking_service.delete_booking(booking.id)

    with pytest.raises(NotFoundError):
        booking_service.get_booking(booking.id)
    assert memory_uow.history.list_for_booking(booking.id) == []
    assert len(memory_uow.history.list_for_booking(other.id)) == 1


def test_change_status_after_delete(booking_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(booking_service, memory_room.id)
    booking_service.delete_booking(booking.id)
    with pytest.raises(NotFoundError):
        booking_service.change_status(booking.id, BookingStatus.APPROVED)


def test_delete_booking_not_found(booking_service):  # pylint: disable=redefined-outer-name
    with pytest.raises(NotFoundError):
        booking_service.delete_booking(3)


def test_end_to_end_rejection(memory_uow, memory_room):  # pylint: disable=redefined-outer-name
    service = BookingService(memory_uow, Settings())
    booking = service.create_booking(memory_room.id, "Sync", None, START_TIME, END_TIME, "Bob")
    service.change_status(booking.id, BookingStatus.REJECTED, rejection_reason="Conflict")

    stored = service.get_booking(booking.id)
    assert stored.status == BookingStatus.REJECTED
    assert stored.rejection_reason == "Conflict"
    history = service.list_status_history(booking.id)
    assert [(h.previous_status, h.new_status) for h in history] == [
        (BookingStatus.PENDING, BookingStatus.REJECTED)
    ]


@pytest.fixture
def strict_service(memory_uow):  # pylint: disable=redefined-outer-name
    return BookingService(
        memory_uow, Settings(enforce_time_order=True, reject_overlaps=True, enforce_transitions=True)
    )


def test_strict_time_order(strict_service, memory_room):  # pylint: disable=redefined-outer-name
    with pytest.raises(BookingValidationError):
        new_booking(strict_service, memory_room.id, start_time=END_TIME, end_time=START_TIME)
    with pytest.raises(BookingValidationError):
        new_booking(strict_service, memory_room.id, end_time=START_TIME)


def test_strict_overlap(strict_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(strict_service, memory_room.id)
    with pytest.raises(BookingValidationError):
        new_booking(strict_service, memory_room.id, start_time=START_TIME - timedelta(minutes=30))
    # back-to-back is fine
    new_booking(strict_service, memory_room.id, start_time=END_TIME, end_time=END_TIME + timedelta(hours=1))
    # moving a booking within its own slot does not clash with itself
    strict_service.update_booking(booking.id, "Sync", None, START_TIME, END_TIME - timedelta(minutes=15))


def test_strict_transitions(strict_service, memory_room):  # pylint: disable=redefined-outer-name
    booking = new_booking(strict_service, memory_room.id)
    strict_service.change_status(booking.id, BookingStatus.APPROVED)
    strict_service.change_status(booking.id, BookingStatus.APPROVED)
    with pytest.raises(BookingValidationError):
        strict_service.change_status(booking.id, BookingStatus.REJECTED)
    strict_service.change_status(booking.id, BookingStatus.COMPLETED)
    with pytest.raises(BookingValidationError):
        strict_service.change_status(booking.id, BookingStatus.PENDING)
    assert len(strict_service.list_status_history(booking.id)) == 3
