# advisor_booking/models/email_log.py
"""
EmailLog model: append-only audit trail of notification attempts.

Several rows may exist per (booking, type). Whether a reminder has been
delivered is decided solely by the existence of a ``sent`` row.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.enums import EmailStatus
from ..database import Base
from .types import UTCDateTime, utcnow


class EmailLog(Base):
    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(20), nullable=False)
    status = Column(
        String(20),
        nullable=False,
        default=EmailStatus.PENDING.value,
        server_default=EmailStatus.PENDING.value,
    )
    attempts = Column(Integer, nullable=False, default=0, server_default="0")
    sent_at = Column(UTCDateTime(), nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)

    booking = relationship("Booking", back_populates="email_logs")

    __table_args__ = (
        CheckConstraint(
            "type IN ('confirmation', 'reminder_24h', 'reminder_1h')", name="ck_email_logs_type"
        ),
        CheckConstraint("status IN ('pending', 'sent', 'failed')", name="ck_email_logs_status"),
        Index("ix_email_logs_booking_type_status", "booking_id", "type", "status"),
    )

    def __repr__(self) -> str:
        return f"<EmailLog {self.id} booking={self.booking_id} {self.type}/{self.status}>"
