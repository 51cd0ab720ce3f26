# advisor_booking/services/booking_service.py
"""
Booking Service

Creates bookings against pre-generated slots. Exclusivity rests on one
rule: the slot row is locked before its status is read, and the status
check, booking insert, slot update and pending confirmation log all happen
in that same transaction. Of any number of concurrent callers for one
slot, exactly one observes ``free``; the rest get ``SlotUnavailable``.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..core.enums import BookingStatus, EmailStatus, EmailType, SlotStatus
from ..core.exceptions import SlotNotFoundException, SlotUnavailableException
from ..core.validators import normalize_client_name, normalize_email, require_positive_id
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingCreated:
    booking_id: int
    slot_id: int
    advisor_id: int
    client_name: str
    client_email: str
    status: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BookingService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.slot_repository = RepositoryFactory.create_slot_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.email_log_repository = RepositoryFactory.create_email_log_repository(db)

    @BaseService.measure_operation("create_booking")
    def create_booking(self, slot_id: int, client_name: str, client_email: str) -> BookingCreated:
        """
        Reserve ``slot_id`` for a client.

        The confirmation email is not sent here; callers dispatch it after
        this returns (see ``NotificationService.send_confirmation``).

        Raises:
            ValidationException: malformed slot id, name or email
            SlotNotFoundException: no such slot
            SlotUnavailableException: the slot is booked or blocked
            DatabaseUnavailableException: connectivity loss or lock timeout
        """
        slot_id = require_positive_id(slot_id, "slot_id")
        name = normalize_client_name(client_name)
        email = normalize_email(client_email)

        try:
            with self.transaction():
                slot = self.slot_repository.get_for_update(slot_id)
                if slot is None:
                    raise SlotNotFoundException(slot_id)
                if not slot.is_free:
                    raise SlotUnavailableException(slot_id, slot.status)

                booking = self.booking_repository.create(
                    slot_id=slot.id,
                    advisor_id=slot.advisor_id,
                    client_name=name,
                    client_email=email,
                    status=BookingStatus.CONFIRMED.value,
                )
                self.slot_repository.set_status(slot, SlotStatus.BOOKED)
                self.email_log_repository.record(
                    booking.id, EmailType.CONFIRMATION, EmailStatus.PENDING
                )
                created = BookingCreated(
                    booking_id=booking.id,
                    slot_id=slot.id,
                    advisor_id=slot.advisor_id,
                    client_name=booking.client_name,
                    client_email=booking.client_email,
                    status=booking.status,
                    created_at=booking.created_at,
                )
        except SlotUnavailableException:
            prometheus_metrics.record_booking_attempt("unavailable")
            raise
        except SlotNotFoundException:
            prometheus_metrics.record_booking_attempt("not_found")
            raise

        prometheus_metrics.record_booking_attempt("created")
        self.log_operation("booking_created", booking_id=created.booking_id, slot_id=slot_id)
        return created
