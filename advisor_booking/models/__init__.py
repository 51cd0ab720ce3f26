# advisor_booking/models/__init__.py
"""
SQLAlchemy models for the advisor booking service.

Importing this package registers every table on ``Base.metadata``.
"""

from .admin import Admin
from .advisor import Advisor
from .booking import Booking
from .email_log import EmailLog
from .time_slot import TimeSlot

__all__ = [
    "Admin",
    "Advisor",
    "Booking",
    "EmailLog",
    "TimeSlot",
]
