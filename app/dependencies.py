"""FastAPI dependencies wiring routers to the services."""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.db import get_db
from app.repositories.base import UnitOfWork
from app.repositories.sql import SqlUnitOfWork
from app.services.booking_service import BookingService
from app.services.room_service import RoomService


def get_uow(db: Session = Depends(get_db)) -> UnitOfWork:
    return SqlUnitOfWork(db)


def get_room_service(uow: UnitOfWork = Depends(get_uow)) -> RoomService:
    return RoomService(uow)


def get_booking_service(
    uow: UnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    return BookingService(uow, settings)
