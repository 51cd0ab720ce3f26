# advisor_booking/repositories/advisor_repository.py
from typing import List

from sqlalchemy.orm import Session

from ..models.advisor import Advisor
from .base_repository import BaseRepository


class AdvisorRepository(BaseRepository[Advisor]):
    def __init__(self, db: Session):
        super().__init__(db, Advisor)

    def list_ordered(self) -> List[Advisor]:
        with self._guard("list"):
            return self.db.query(Advisor).order_by(Advisor.name.asc(), Advisor.id.asc()).all()

    def get_by_name(self, name: str) -> Advisor | None:
        return self.find_one_by(name=name)
