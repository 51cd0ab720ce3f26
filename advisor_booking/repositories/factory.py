# advisor_booking/repositories/factory.py
"""
Repository Factory

Centralizes repository creation so services build all of their
repositories against the same session.
"""

from sqlalchemy.orm import Session

from .admin_repository import AdminRepository
from .advisor_repository import AdvisorRepository
from .booking_repository import BookingRepository
from .email_log_repository import EmailLogRepository
from .slot_repository import SlotRepository


class RepositoryFactory:
    @staticmethod
    def create_advisor_repository(db: Session) -> AdvisorRepository:
        return AdvisorRepository(db)

    @staticmethod
    def create_slot_repository(db: Session) -> SlotRepository:
        return SlotRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> BookingRepository:
        return BookingRepository(db)

    @staticmethod
    def create_email_log_repository(db: Session) -> EmailLogRepository:
        return EmailLogRepository(db)

    @staticmethod
    def create_admin_repository(db: Session) -> AdminRepository:
        return AdminRepository(db)
