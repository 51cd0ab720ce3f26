"""Classification of low-level database errors."""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError, TimeoutError

_LOCK_TIMEOUT_SNIPPETS = (
    "database is locked",
    "lock timeout",
    "canceling statement due to lock timeout",
    "canceling statement due to statement timeout",
)


def is_connectivity_error(exc: BaseException) -> bool:
    """True when ``exc`` means the database is unreachable or a lock wait timed out."""
    if isinstance(exc, (DisconnectionError, TimeoutError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if isinstance(exc, OperationalError):
        return True
    message = str(exc).lower()
    return any(snippet in message for snippet in _LOCK_TIMEOUT_SNIPPETS)
