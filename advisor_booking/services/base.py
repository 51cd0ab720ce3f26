# advisor_booking/services/base.py
"""
Base Service Pattern

Provides common functionality for all service classes:
- Transaction management (the persistence gateway's ``with_transaction``)
- Logging
- Error translation
- Performance monitoring
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Iterator, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import DatabaseUnavailableException, RepositoryException, ServiceException
from ..database.errors import is_connectivity_error
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for all service layer components.

    A service owns the transaction boundary for the session it is given;
    repositories built on the same session never commit on their own.
    """

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Run a block in one database transaction.

        Commits on success. On any error the whole transaction is rolled
        back, so no partial slot/booking mutation persists. Connectivity
        failures and lock timeouts surface as ``DatabaseUnavailableException``.

        Usage:
            with self.transaction():
                slot = self.slot_repository.get_for_update(slot_id)
                ...
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except SQLAlchemyError as e:
            self.db.rollback()
            if is_connectivity_error(e):
                self.logger.error("Database unavailable, transaction rolled back: %s", e)
                raise DatabaseUnavailableException() from e
            self.logger.error("Transaction failed: %s", e)
            raise ServiceException(f"Database operation failed: {e}") from e
        except RepositoryException as e:
            self.db.rollback()
            self.logger.error("Transaction failed in repository: %s", e)
            raise ServiceException(str(e)) from e
        except Exception:
            self.db.rollback()
            raise

    def with_transaction(self, fn: Callable[[Session], T]) -> T:
        """Execute ``fn(session)`` inside :meth:`transaction` and return its result."""
        with self.transaction() as session:
            return fn(session)

    def end_read(self) -> None:
        """
        Close the implicit read transaction so no lock outlives a query.

        Commit rather than rollback: sessions use ``expire_on_commit=False``,
        so objects already loaded stay usable without another round trip.
        """
        self.db.commit()

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("create_booking")
            def create_booking(self, data):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                start_time = time.perf_counter()
                success = False
                error_type = None
                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - start_time
                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(
                            "Slow operation detected: %s took %.2fs", operation_name, elapsed
                        )
                    prometheus_metrics.record_service_operation(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        duration=elapsed,
                        status="success" if success else "error",
                        error_type=error_type,
                    )

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        """Log an operation with context."""
        self.logger.info("Operation: %s", operation, extra={"operation": operation, **context})
