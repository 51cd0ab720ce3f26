# advisor_booking/models/admin.py
from sqlalchemy import Column, Integer, String

from ..database import Base
from .types import TimestampMixin


class Admin(TimestampMixin, Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Admin {self.id} {self.email}>"
