import enum
from sqlalchemy.orm import relationship
from sqlalchemy import Boolean, Column, Integer, String, Text
from app.db import Base


class RoomType(enum.IntEnum):
    CLASS_ROOM = 0
    MEETING_ROOM = 1
    CONFERENCE_ROOM = 2
    LABORATORY = 3


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), index=True, nullable=False)
    location = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    type = Column(Integer, nullable=False, default=int(RoomType.MEETING_ROOM))
    is_available = Column(Boolean, nullable=False, default=True)
    description = Column(Text, nullable=True)

    # no cascade: a room with bookings cannot be deleted
    bookings = relationship("Booking", back_populates="room", passive_deletes="all")
