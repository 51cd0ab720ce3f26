"""Admin panel schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ..core.enums import BookingStatus
from .base import StandardizedModel, StrictModel
from .booking import BookingSummary


class BookingStatusUpdate(StrictModel):
    status: BookingStatus = Field(description="confirmed, cancelled or completed")


class StatusTransitionResponse(StandardizedModel):
    booking_id: int
    previous_status: str
    new_status: str
    slot_id: int
    slot_status: str


class EmailLogEntry(StandardizedModel):
    id: int
    type: str
    status: str
    attempts: int
    sent_at: Optional[datetime] = None
    error_message: Optional[str] = None
    created_at: datetime


class EmailLogListEntry(EmailLogEntry):
    booking_id: int
    client_name: str
    client_email: str
    advisor_name: str


class BookingDetail(BookingSummary):
    email_logs: List[EmailLogEntry] = []


class AdminStats(StandardizedModel):
    total_bookings: int
    confirmed_bookings: int
    cancelled_bookings: int
    completed_bookings: int
    total_advisors: int
    available_slots: int
    booked_slots: int
    blocked_slots: int
    pending_emails: int
    sent_emails: int
    failed_emails: int


class ResendResult(StandardizedModel):
    booking_id: int
    delivered: bool
