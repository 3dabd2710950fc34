import enum
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from app.db import Base


class BookingStatus(enum.IntEnum):
    PENDING = 0
    APPROVED = 1
    REJECTED = 2
    COMPLETED = 3
    CANCELLED = 4


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    booked_by = Column(String(255), nullable=False)
    status = Column(Integer, nullable=False, default=int(BookingStatus.PENDING))
    approved_by = Column(String(255), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    room = relationship("Room", back_populates="bookings")
    status_history = relationship(
        "StatusHistory",
        back_populates="booking",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="StatusHistory.id",
    )
