"""Repositories for database access."""

from fiscal_ledger.repositories.base_repository import BaseRepository
from fiscal_ledger.repositories.company_repository import CompanyRepository
from fiscal_ledger.repositories.person_repository import PersonRepository
from fiscal_ledger.repositories.transaction_repository import TransactionRepository

__all__ = [
    "BaseRepository",
    "CompanyRepository",
    "PersonRepository",
    "TransactionRepository",
]
