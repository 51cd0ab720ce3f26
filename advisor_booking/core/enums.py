# advisor_booking/core/enums.py
"""
Status and type enumerations shared by models, services and schemas.

Values are stored as plain strings in the database, guarded by CHECK
constraints, so the members double as the persisted representation.
"""

from enum import Enum


class SlotStatus(str, Enum):
    FREE = "free"
    BOOKED = "booked"
    BLOCKED = "blocked"


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @classmethod
    def active(cls) -> tuple["BookingStatus", ...]:
        """Statuses that hold a slot."""
        return (cls.CONFIRMED, cls.COMPLETED)


class EmailType(str, Enum):
    CONFIRMATION = "confirmation"
    REMINDER_24H = "reminder_24h"
    REMINDER_1H = "reminder_1h"

    @classmethod
    def reminders(cls) -> tuple["EmailType", ...]:
        return (cls.REMINDER_24H, cls.REMINDER_1H)


class EmailStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
