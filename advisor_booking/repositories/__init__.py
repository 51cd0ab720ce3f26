# advisor_booking/repositories/__init__.py
"""
Repository layer: data access for every table.

Repositories flush but never commit; services own transactions.
"""

from .admin_repository import AdminRepository
from .advisor_repository import AdvisorRepository
from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .email_log_repository import EmailLogRepository
from .factory import RepositoryFactory
from .slot_repository import SlotRepository

__all__ = [
    "AdminRepository",
    "AdvisorRepository",
    "BaseRepository",
    "BookingRepository",
    "EmailLogRepository",
    "RepositoryFactory",
    "SlotRepository",
]
