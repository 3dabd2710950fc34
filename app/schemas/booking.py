from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional
from app.models.booking import BookingStatus
from app.utils.validation_helpers import ensure_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingBase(CamelModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def as_utc(cls, value):
        return ensure_utc(value)


class BookingCreate(BookingBase):
    room_id: int
    booked_by: str = Field(..., max_length=255)


class BookingUpdate(BookingBase):
    """Only the time window, title and description are mutable."""


class BookingResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    room_id: int
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    booked_by: str
    status: BookingStatus
    approved_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, value):
        return ensure_utc(value)


class StatusChangeRequest(CamelModel):
    status: BookingStatus = Field(..., validation_alias=AliasChoices("status", "newStatus"))
    approved_by: Optional[str] = Field(None, max_length=255)
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    changed_by: Optional[str] = Field(None, max_length=255)


class StatusHistoryResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    booking_id: int
    previous_status: BookingStatus
    new_status: BookingStatus
    notes: Optional[str] = None
    changed_by: str
    changed_at: datetime

    @field_validator("changed_at")
    @classmethod
    def as_utc(cls, value):
        return ensure_utc(value)
