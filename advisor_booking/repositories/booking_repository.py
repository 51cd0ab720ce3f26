# advisor_booking/repositories/booking_repository.py
"""
Booking Repository

Implements all data access operations for bookings:
- Row-locked lookups used by status transitions
- Active-booking checks per slot
- Client and admin listings joined with slot and advisor
- The reminder due-window query
- Booking statistics
"""

from datetime import date, datetime, time, timedelta, timezone
import logging
from typing import Dict, List, Optional

from sqlalchemy import and_, exists, func
from sqlalchemy.orm import Session, contains_eager

from ..core.enums import BookingStatus, EmailStatus, EmailType
from ..models.advisor import Advisor
from ..models.booking import Booking
from ..models.email_log import EmailLog
from ..models.time_slot import TimeSlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = [status.value for status in BookingStatus.active()]


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def get_for_update(self, booking_id: int) -> Optional[Booking]:
        """Load a booking while holding an exclusive lock on its row."""
        with self._guard("lock"):
            query = self.db.query(Booking).filter(Booking.id == booking_id)
            return self._locked(query).first()

    def find_active_on_slot(
        self, slot_id: int, *, exclude_booking_id: Optional[int] = None
    ) -> Optional[Booking]:
        """Return a confirmed/completed booking holding ``slot_id``, if any."""
        with self._guard("find active"):
            query = self.db.query(Booking).filter(
                Booking.slot_id == slot_id,
                Booking.status.in_(ACTIVE_STATUSES),
            )
            if exclude_booking_id is not None:
                query = query.filter(Booking.id != exclude_booking_id)
            return query.populate_existing().order_by(Booking.id.asc()).first()

    def _joined_query(self):
        return (
            self.db.query(Booking)
            .join(TimeSlot, Booking.slot_id == TimeSlot.id)
            .join(Advisor, Booking.advisor_id == Advisor.id)
            .options(contains_eager(Booking.slot), contains_eager(Booking.advisor))
        )

    def get_with_details(self, booking_id: int) -> Optional[Booking]:
        with self._guard("retrieve"):
            return self._joined_query().filter(Booking.id == booking_id).first()

    def find_by_client_email(self, email: str) -> List[Booking]:
        with self._guard("list"):
            return (
                self._joined_query()
                .filter(func.lower(func.trim(Booking.client_email)) == email)
                .order_by(TimeSlot.start_utc.asc(), Booking.id.asc())
                .all()
            )

    def list_filtered(
        self,
        *,
        advisor_id: Optional[int] = None,
        status: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> List[Booking]:
        """
        Admin listing. Date bounds are inclusive and apply to the slot's
        start date in UTC.
        """
        with self._guard("list"):
            query = self._joined_query()
            if advisor_id is not None:
                query = query.filter(Booking.advisor_id == advisor_id)
            if status is not None:
                query = query.filter(Booking.status == status)
            if from_date is not None:
                start = datetime.combine(from_date, time.min, tzinfo=timezone.utc)
                query = query.filter(TimeSlot.start_utc >= start)
            if to_date is not None:
                end = datetime.combine(to_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
                query = query.filter(TimeSlot.start_utc < end)
            return query.order_by(TimeSlot.start_utc.asc(), Booking.id.asc()).all()

    def find_due_for_reminder(
        self,
        window_start: datetime,
        window_end: datetime,
        reminder_type: EmailType,
    ) -> List[Booking]:
        """
        Confirmed bookings whose slot starts within ``[window_start, window_end]``
        and that have no ``sent`` log row for ``reminder_type``.
        """
        already_sent = exists().where(
            and_(
                EmailLog.booking_id == Booking.id,
                EmailLog.type == reminder_type.value,
                EmailLog.status == EmailStatus.SENT.value,
            )
        )
        with self._guard("find due"):
            return (
                self._joined_query()
                .filter(
                    Booking.status == BookingStatus.CONFIRMED.value,
                    TimeSlot.start_utc >= window_start,
                    TimeSlot.start_utc <= window_end,
                    ~already_sent,
                )
                .order_by(TimeSlot.start_utc.asc(), Booking.id.asc())
                .all()
            )

    def count_by_status(self) -> Dict[str, int]:
        with self._guard("count"):
            rows = self.db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
        counts = {status.value: 0 for status in BookingStatus}
        counts.update({status: total for status, total in rows})
        return counts
