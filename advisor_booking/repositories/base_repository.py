# advisor_booking/repositories/base_repository.py
"""
Base Repository Pattern

Repositories are the only code that reads or writes tables. They flush but
never commit: the owning service decides the transaction boundary.

Low-level failures are translated here so services only ever see
``DatabaseUnavailableException`` (connectivity, lock timeouts) or
``RepositoryException`` (everything else).
"""

from contextlib import contextmanager
import logging
from typing import Any, Generic, Iterator, List, NoReturn, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import DatabaseUnavailableException, RepositoryException
from ..database.errors import is_connectivity_error
from ..database.session_utils import supports_row_locks

# Type variable for generic model support
T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Common CRUD operations for one model.

    Attributes:
        db: SQLAlchemy session (managed by the service layer)
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def _locked(self, query: Query) -> Query:
        """
        Apply ``FOR UPDATE`` where the backend has row locks.

        On SQLite the write lock is already held from ``BEGIN IMMEDIATE``.
        """
        if supports_row_locks(self.db):
            query = query.with_for_update()
        return query.populate_existing()

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        """Translate SQLAlchemy errors raised while performing ``action``."""
        try:
            yield
        except SQLAlchemyError as exc:
            self._raise_translated(action, exc)

    def _raise_translated(self, action: str, exc: SQLAlchemyError) -> NoReturn:
        name = self.model.__name__
        if is_connectivity_error(exc):
            self.logger.error("Database unavailable while trying to %s %s: %s", action, name, exc)
            raise DatabaseUnavailableException() from exc
        if isinstance(exc, IntegrityError):
            self.logger.error("Integrity error trying to %s %s: %s", action, name, exc)
            raise RepositoryException(f"Integrity constraint violated: {exc}") from exc
        self.logger.error("Error trying to %s %s: %s", action, name, exc)
        raise RepositoryException(f"Failed to {action} {name}: {exc}") from exc

    def get_by_id(self, id: int) -> Optional[T]:
        with self._guard("retrieve"):
            return self.db.query(self.model).filter(self.model.id == id).first()

    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Note: Does NOT commit - transaction management is handled by service layer.
        """
        with self._guard("create"):
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()  # Get ID without committing
            return entity

    def bulk_create(self, rows: List[dict]) -> List[T]:
        with self._guard("bulk create"):
            entities = [self.model(**data) for data in rows]
            self.db.add_all(entities)
            self.db.flush()
            return entities

    def update(self, entity: T, **kwargs: Any) -> T:
        """Set the provided fields on an already-loaded entity and flush."""
        with self._guard("update"):
            for key, value in kwargs.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            self.db.flush()
            return entity

    def exists(self, **kwargs: Any) -> bool:
        with self._guard("check existence of"):
            return self.db.query(self.model).filter_by(**kwargs).first() is not None

    def count(self, **kwargs: Any) -> int:
        with self._guard("count"):
            return self.db.query(self.model).filter_by(**kwargs).count()

    def find_one_by(self, **kwargs: Any) -> Optional[T]:
        with self._guard("find"):
            return self.db.query(self.model).filter_by(**kwargs).first()
