# advisor_booking/repositories/slot_repository.py
"""
Slot Repository

Data access for time slots. ``get_for_update`` is the lock every booking
mutation takes first; all decisions about a slot are made on the row it
returns.
"""

from datetime import datetime
import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.enums import SlotStatus
from ..models.time_slot import TimeSlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SlotRepository(BaseRepository[TimeSlot]):
    def __init__(self, db: Session):
        super().__init__(db, TimeSlot)

    def get_for_update(self, slot_id: int) -> Optional[TimeSlot]:
        """
        Load a slot while holding an exclusive lock on its row.

        ``populate_existing`` discards any copy already in the identity map so
        the status is always read after the lock is granted.
        """
        with self._guard("lock"):
            query = self.db.query(TimeSlot).filter(TimeSlot.id == slot_id)
            return self._locked(query).first()

    def set_status(self, slot: TimeSlot, status: SlotStatus) -> TimeSlot:
        return self.update(slot, status=status.value)

    def find_free_in_range(
        self, advisor_id: int, range_start: datetime, range_end: datetime
    ) -> List[TimeSlot]:
        """Free slots lying entirely within ``[range_start, range_end]``, earliest first."""
        with self._guard("list free"):
            return (
                self.db.query(TimeSlot)
                .filter(
                    TimeSlot.advisor_id == advisor_id,
                    TimeSlot.status == SlotStatus.FREE.value,
                    TimeSlot.start_utc >= range_start,
                    TimeSlot.end_utc <= range_end,
                )
                .order_by(TimeSlot.start_utc.asc(), TimeSlot.id.asc())
                .all()
            )

    def count_by_status(self) -> Dict[str, int]:
        with self._guard("count"):
            rows = (
                self.db.query(TimeSlot.status, func.count(TimeSlot.id))
                .group_by(TimeSlot.status)
                .all()
            )
        counts = {status.value: 0 for status in SlotStatus}
        counts.update({status: total for status, total in rows})
        return counts

    def existing_starts(self, advisor_id: int, range_start: datetime, range_end: datetime) -> set:
        with self._guard("list"):
            rows = (
                self.db.query(TimeSlot.start_utc)
                .filter(
                    TimeSlot.advisor_id == advisor_id,
                    TimeSlot.start_utc >= range_start,
                    TimeSlot.start_utc < range_end,
                )
                .all()
            )
        return {row[0] for row in rows}
