"""Database module for SQLAlchemy models and session management."""

from fiscal_ledger.core.database import Base, async_session_maker, engine
from fiscal_ledger.database.models import Company, Person, Transaction

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "Company",
    "Person",
    "Transaction",
]
