# advisor_booking/models/advisor.py
"""Advisor model: the owner of bookable time slots."""

from sqlalchemy import Column, Integer, String

from ..database import Base
from .types import TimestampMixin


class Advisor(TimestampMixin, Base):
    __tablename__ = "advisors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    timezone = Column(String(50), nullable=False, default="UTC", server_default="UTC")

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "timezone": self.timezone}

    def __repr__(self) -> str:
        return f"<Advisor {self.id} {self.name!r} tz={self.timezone}>"
