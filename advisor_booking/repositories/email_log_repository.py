# advisor_booking/repositories/email_log_repository.py
"""
EmailLog Repository

Rows are only ever inserted. ``has_sent`` is the single source of truth for
"this (booking, type) notification was delivered".
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy import and_, distinct, exists, func
from sqlalchemy.orm import Session, aliased, contains_eager

from ..core.constants import EMAIL_LOG_QUERY_LIMIT
from ..core.enums import EmailStatus, EmailType
from ..models.advisor import Advisor
from ..models.booking import Booking
from ..models.email_log import EmailLog
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class EmailLogRepository(BaseRepository[EmailLog]):
    def __init__(self, db: Session):
        super().__init__(db, EmailLog)

    def record(
        self,
        booking_id: int,
        email_type: EmailType,
        status: EmailStatus,
        *,
        attempts: int = 0,
        sent_at: Optional[datetime] = None,
        error_message: Optional[str] = None,
    ) -> EmailLog:
        return self.create(
            booking_id=booking_id,
            type=email_type.value,
            status=status.value,
            attempts=attempts,
            sent_at=sent_at,
            error_message=error_message,
        )

    def has_sent(self, booking_id: int, email_type: EmailType) -> bool:
        return self.exists(
            booking_id=booking_id, type=email_type.value, status=EmailStatus.SENT.value
        )

    def list_for_booking(self, booking_id: int) -> List[EmailLog]:
        with self._guard("list"):
            return (
                self.db.query(EmailLog)
                .filter(EmailLog.booking_id == booking_id)
                .order_by(EmailLog.id.asc())
                .all()
            )

    def list_recent(
        self,
        *,
        email_type: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = EMAIL_LOG_QUERY_LIMIT,
    ) -> List[EmailLog]:
        """Newest first, with booking and advisor eagerly loaded."""
        with self._guard("list"):
            query = (
                self.db.query(EmailLog)
                .join(Booking, EmailLog.booking_id == Booking.id)
                .join(Advisor, Booking.advisor_id == Advisor.id)
                .options(
                    contains_eager(EmailLog.booking).contains_eager(Booking.advisor),
                )
            )
            if email_type is not None:
                query = query.filter(EmailLog.type == email_type)
            if status is not None:
                query = query.filter(EmailLog.status == status)
            return query.order_by(EmailLog.created_at.desc(), EmailLog.id.desc()).limit(limit).all()

    def count_with_status(self, status: EmailStatus) -> int:
        return self.count(status=status.value)

    def count_bookings_pending(self) -> int:
        """Distinct bookings with a ``pending`` row whose type was never sent."""
        sent = aliased(EmailLog)
        delivered = exists().where(
            and_(
                sent.booking_id == EmailLog.booking_id,
                sent.type == EmailLog.type,
                sent.status == EmailStatus.SENT.value,
            )
        )
        with self._guard("count"):
            return (
                self.db.query(func.count(distinct(EmailLog.booking_id)))
                .filter(EmailLog.status == EmailStatus.PENDING.value, ~delivered)
                .scalar()
                or 0
            )
