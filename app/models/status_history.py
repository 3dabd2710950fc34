from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from app.db import Base

SYSTEM_ACTOR = "System"


class StatusHistory(Base):
    """Append-only record of one booking status transition."""

    __tablename__ = "status_histories"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    previous_status = Column(Integer, nullable=False)
    new_status = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    changed_by = Column(String(255), nullable=False, default=SYSTEM_ACTOR)
    changed_at = Column(DateTime(timezone=True), nullable=False)

    booking = relationship("Booking", back_populates="status_history")
