"""Client-facing booking and availability schemas."""

from datetime import datetime
from typing import List

from pydantic import EmailStr, Field

from ..core.constants import MAX_CLIENT_NAME_LENGTH, MIN_CLIENT_NAME_LENGTH
from .base import StandardizedModel, StrictModel


class BookingCreate(StrictModel):
    slot_id: int = Field(ge=1, description="Slot to reserve")
    client_name: str = Field(
        min_length=MIN_CLIENT_NAME_LENGTH,
        max_length=MAX_CLIENT_NAME_LENGTH,
        description="Client full name",
    )
    client_email: EmailStr = Field(description="Client email address")


class BookingCreatedResponse(StandardizedModel):
    booking_id: int
    slot_id: int
    advisor_id: int
    client_name: str
    client_email: str
    status: str
    created_at: datetime


class AdvisorResponse(StandardizedModel):
    id: int
    name: str
    timezone: str


class AvailableSlot(StandardizedModel):
    id: int
    start_utc: datetime
    end_utc: datetime


class AvailabilityResponse(AdvisorResponse):
    available_slots: List[AvailableSlot]


class BookingSummary(StandardizedModel):
    id: int
    slot_id: int
    advisor_id: int
    advisor_name: str
    advisor_timezone: str
    client_name: str
    client_email: str
    status: str
    start_utc: datetime
    end_utc: datetime
    created_at: datetime
    updated_at: datetime
