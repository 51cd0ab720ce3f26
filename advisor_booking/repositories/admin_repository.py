# advisor_booking/repositories/admin_repository.py
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.admin import Admin
from .base_repository import BaseRepository


class AdminRepository(BaseRepository[Admin]):
    def __init__(self, db: Session):
        super().__init__(db, Admin)

    def get_by_email(self, email: str) -> Optional[Admin]:
        normalized = (email or "").strip().lower()
        with self._guard("retrieve"):
            return self.db.query(Admin).filter(func.lower(Admin.email) == normalized).first()
