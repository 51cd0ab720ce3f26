"""
Helpers for working with SQLAlchemy sessions in a dialect-agnostic way.
"""

from __future__ import annotations

from sqlalchemy.orm import Session


def get_dialect_name(session: Session, default: str = "sqlite") -> str:
    """Return the SQLAlchemy dialect name of the engine bound to ``session``."""
    bind = session.get_bind()
    dialect = getattr(bind, "dialect", None)
    return getattr(dialect, "name", None) or default


def supports_row_locks(session: Session) -> bool:
    """SQLite has no row locks; its transactions take the database write lock at BEGIN instead."""
    return get_dialect_name(session) != "sqlite"
