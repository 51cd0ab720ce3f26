# advisor_booking/services/booking_status_service.py
"""
Booking Status Service

Applies admin-driven status changes and keeps slot occupancy consistent:

    any -> cancelled            slot becomes free
    any -> confirmed/completed  slot becomes booked, unless another active
                                booking already holds it (SlotConflict)

Lock order is booking row, then slot row. Booking creation only ever
locks the slot, so the two paths cannot deadlock, and every decision is
made on state read after both locks are held.
"""

from dataclasses import asdict, dataclass
import logging
from typing import Any, Dict, Union

from sqlalchemy.orm import Session

from ..core.enums import BookingStatus, SlotStatus
from ..core.exceptions import (
    BookingNotFoundException,
    InvalidTransitionException,
    ServiceException,
    SlotConflictException,
)
from ..core.validators import parse_enum, require_positive_id
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusTransition:
    booking_id: int
    previous_status: str
    new_status: str
    slot_id: int
    slot_status: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BookingStatusService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.slot_repository = RepositoryFactory.create_slot_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("update_booking_status")
    def update_booking_status(
        self, booking_id: int, new_status: Union[str, BookingStatus]
    ) -> StatusTransition:
        """
        Move a booking to ``new_status`` and reconcile its slot.

        Raises:
            ValidationException: bad id or unknown status
            BookingNotFoundException: no such booking
            InvalidTransitionException: ``new_status`` equals the current status
            SlotConflictException: another confirmed/completed booking holds the slot
        """
        booking_id = require_positive_id(booking_id, "booking_id")
        target = parse_enum(BookingStatus, new_status, "status")

        with self.transaction():
            booking = self.booking_repository.get_for_update(booking_id)
            if booking is None:
                raise BookingNotFoundException(booking_id)

            previous = booking.status
            if previous == target.value:
                raise InvalidTransitionException(
                    f"Booking status is already {previous}",
                    details={"booking_id": booking_id, "status": previous},
                )

            slot = self.slot_repository.get_for_update(booking.slot_id)
            if slot is None:
                raise ServiceException(
                    f"Booking {booking_id} references missing slot {booking.slot_id}"
                )

            if target == BookingStatus.CANCELLED:
                slot_status = SlotStatus.FREE
            else:
                holder = self.booking_repository.find_active_on_slot(
                    slot.id, exclude_booking_id=booking.id
                )
                if holder is not None:
                    raise SlotConflictException(slot.id, holder.id)
                slot_status = SlotStatus.BOOKED

            self.booking_repository.update(booking, status=target.value)
            self.slot_repository.set_status(slot, slot_status)
            transition = StatusTransition(
                booking_id=booking.id,
                previous_status=previous,
                new_status=target.value,
                slot_id=slot.id,
                slot_status=slot_status.value,
            )

        self.log_operation(
            "booking_status_changed",
            booking_id=booking_id,
            previous_status=previous,
            new_status=target.value,
        )
        return transition

    def cancel_booking(self, booking_id: int) -> StatusTransition:
        """Admin "delete": a transition to cancelled, never a physical delete."""
        return self.update_booking_status(booking_id, BookingStatus.CANCELLED)
