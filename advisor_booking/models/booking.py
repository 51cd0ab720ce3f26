# advisor_booking/models/booking.py
"""
Booking model.

A booking reserves exactly one slot. A slot may accumulate historical
(cancelled) bookings, but at most one confirmed/completed booking holds it
at any time. ``advisor_id`` is copied from the slot when the booking is made.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from ..core.enums import BookingStatus
from ..database import Base
from .types import TimestampMixin


class Booking(TimestampMixin, Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_id = Column(Integer, ForeignKey("time_slots.id", ondelete="CASCADE"), nullable=False)
    advisor_id = Column(Integer, ForeignKey("advisors.id", ondelete="CASCADE"), nullable=False)
    client_name = Column(String(255), nullable=False)
    client_email = Column(String(255), nullable=False)
    status = Column(
        String(20),
        nullable=False,
        default=BookingStatus.CONFIRMED.value,
        server_default=BookingStatus.CONFIRMED.value,
    )

    slot = relationship("TimeSlot")
    advisor = relationship("Advisor")
    email_logs = relationship(
        "EmailLog", back_populates="booking", lazy="select", order_by="EmailLog.id"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed')", name="ck_bookings_status"
        ),
        Index("ix_bookings_slot_id", "slot_id"),
        Index("ix_bookings_client_email", "client_email"),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.id} slot={self.slot_id} {self.status}>"
