"""Dictionary-backed repositories, mainly for tests and local experiments.

Rows are kept as plain dicts of column values; every read hands out a fresh
model instance, so changes only reach the store through ``create``/``update``.
Each :class:`InMemoryStore` is independent, there is no module-level state.
"""
from datetime import datetime
from typing import Dict, List, Optional

from app.models.booking import Booking, BookingStatus
from app.models.room import Room
from app.models.status_history import StatusHistory
from app.repositories.base import (
    BookingRepository,
    RoomRepository,
    StatusHistoryRepository,
    UnitOfWork,
)
from app.utils.validation_helpers import ensure_utc

INACTIVE_STATUSES = (BookingStatus.REJECTED, BookingStatus.CANCELLED)


def _row(instance) -> dict:
    return {column.key: getattr(instance, column.key) for column in instance.__table__.columns}


class InMemoryStore:
    def __init__(self):
        self.tables: Dict[str, Dict[int, dict]] = {"rooms": {}, "bookings": {}, "status_histories": {}}
        self.next_ids: Dict[str, int] = {name: 1 for name in self.tables}

    def insert(self, table: str, instance):
        instance.id = self.next_ids[table]
        self.next_ids[table] += 1
        self.tables[table][instance.id] = _row(instance)
        return instance

    def snapshot(self):
        tables = {name: {key: dict(row) for key, row in rows.items()} for name, rows in self.tables.items()}
        return tables, dict(self.next_ids)

    def restore(self, snapshot):
        self.tables, self.next_ids = snapshot


class _InMemoryRepository:
    table: str
    model: type

    def __init__(self, store: InMemoryStore):
        self.store = store

    @property
    def rows(self) -> Dict[int, dict]:
        return self.store.tables[self.table]

    def _load(self, row: Optional[dict]):
        return self.model(**row) if row is not None else None


class InMemoryRoomRepository(_InMemoryRepository, RoomRepository):
    table = "rooms"
    model = Room

    def list(self) -> List[Room]:
        return [self._load(row) for row in self.rows.values()]

    def get(self, room_id: int) -> Optional[Room]:
        return self._load(self.rows.get(room_id))

    def create(self, room: Room) -> Room:
        return self.store.insert(self.table, room)


class InMemoryBookingRepository(_InMemoryRepository, BookingRepository):
    table = "bookings"
    model = Booking

    def list(self) -> List[Booking]:
        return [self._load(row) for row in self.rows.values()]

    def get(self, booking_id: int) -> Optional[Booking]:
        return self._load(self.rows.get(booking_id))

    def create(self, booking: Booking) -> Booking:
        return self.store.insert(self.table, booking)

    def update(self, booking: Booking) -> Booking:
        if booking.id not in self.rows:
            raise KeyError(booking.id)
        self.rows[booking.id] = _row(booking)
        return booking

    def delete(self, booking_id: int) -> bool:
        if self.rows.pop(booking_id, None) is None:
            return False
        history = self.store.tables["status_histories"]
        for record_id in [key for key, row in history.items() if row["booking_id"] == booking_id]:
            del history[record_id]
        return True

    def find_overlapping(
        self, room_id: int, start_time: datetime, end_time: datetime, exclude_id: Optional[int] = None
    ) -> Optional[Booking]:
        for row in self.rows.values():
            if row["room_id"] != room_id or row["id"] == exclude_id:
                continue
            if row["status"] in INACTIVE_STATUSES:
                continue
            if ensure_utc(row["start_time"]) < end_time and ensure_utc(row["end_time"]) > start_time:
                return self._load(row)
        return None


class InMemoryStatusHistoryRepository(_InMemoryRepository, StatusHistoryRepository):
    table = "status_histories"
    model = StatusHistory

    def append(self, record: StatusHistory) -> StatusHistory:
        if record.booking_id not in self.store.tables["bookings"]:
            raise KeyError(record.booking_id)
        return self.store.insert(self.table, record)

    def list_for_booking(self, booking_id: int) -> List[StatusHistory]:
        rows = [row for row in self.rows.values() if row["booking_id"] == booking_id]
        rows.sort(key=lambda row: (row["changed_at"], row["id"]))
        return [self._load(row) for row in rows]


class InMemoryUnitOfWork(UnitOfWork):
    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()
        self.rooms = InMemoryRoomRepository(self.store)
        self.bookings = InMemoryBookingRepository(self.store)
        self.history = InMemoryStatusHistoryRepository(self.store)
        self._snapshot = None

    def __enter__(self) -> "InMemoryUnitOfWork":
        self._snapshot = self.store.snapshot()
        return self

    def commit(self) -> None:
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is not None:
            self.store.restore(self._snapshot)
            self._snapshot = None
