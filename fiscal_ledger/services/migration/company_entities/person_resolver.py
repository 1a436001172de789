"""Resolve valid-CPF transactions to persons."""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_ledger.database.models import Person
from fiscal_ledger.repositories.person_repository import PersonRepository
from fiscal_ledger.services.migration.company_entities.base_resolver import BaseEntityResolver
from fiscal_ledger.services.migration.company_entities.dry_run import DryRunStats
from fiscal_ledger.services.migration.company_entities.transaction_backfiller import (
    BackfillFailureMode,
)
from fiscal_ledger.services.migration.company_entities.types import DocumentKind, EntityType


class PersonResolver(BaseEntityResolver):
    """Links CPF transactions to persons.

    A failed backfill is logged and reported as ``updated=0``; the person
    stays created.
    """

    entity_type = EntityType.PERSON
    document_kind = DocumentKind.CPF
    failure_mode = BackfillFailureMode.SOFT

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.person_repository = PersonRepository(session)

    async def find_existing(self, identifier: str) -> Optional[Person]:
        return await self.person_repository.find_by_cpf(identifier)

    async def insert(self, payload: Dict[str, Any]) -> Optional[Person]:
        return await self.person_repository.insert(payload)

    def record_would_create(
        self,
        dry_run_stats: DryRunStats,
        identifier: str,
        payload: Dict[str, Any],
        transaction: Any,
    ) -> None:
        dry_run_stats.add_person_record(identifier, payload, transaction)
