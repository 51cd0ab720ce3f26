# advisor_booking/models/time_slot.py
"""
TimeSlot model.

A slot is a pre-generated, fixed-duration interval ``[start_utc, end_utc)``
owned by one advisor. Its status is changed only by booking creation and
booking status transitions, always under a lock on the slot row.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.enums import SlotStatus
from ..database import Base
from .types import TimestampMixin, UTCDateTime


class TimeSlot(TimestampMixin, Base):
    __tablename__ = "time_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    advisor_id = Column(Integer, ForeignKey("advisors.id", ondelete="CASCADE"), nullable=False)
    start_utc = Column(UTCDateTime(), nullable=False)
    end_utc = Column(UTCDateTime(), nullable=False)
    status = Column(
        String(20),
        nullable=False,
        default=SlotStatus.FREE.value,
        server_default=SlotStatus.FREE.value,
    )

    advisor = relationship("Advisor")

    __table_args__ = (
        UniqueConstraint("advisor_id", "start_utc", "end_utc", name="uq_time_slots_advisor_range"),
        CheckConstraint("status IN ('free', 'booked', 'blocked')", name="ck_time_slots_status"),
        CheckConstraint("end_utc > start_utc", name="ck_time_slots_range"),
        Index("ix_time_slots_advisor_start_status", "advisor_id", "start_utc", "status"),
    )

    @property
    def is_free(self) -> bool:
        return self.status == SlotStatus.FREE.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "advisor_id": self.advisor_id,
            "start_utc": self.start_utc,
            "end_utc": self.end_utc,
            "status": self.status,
        }

    def __repr__(self) -> str:
        return f"<TimeSlot {self.id} advisor={self.advisor_id} {self.start_utc} {self.status}>"
