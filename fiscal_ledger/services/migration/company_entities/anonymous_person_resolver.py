"""Resolve masked-CPF transactions to anonymous persons."""

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


class AnonymousPersonResolver(BaseEntityResolver):
    """Links masked-CPF transactions to anonymous persons keyed by the mask."""

    entity_type = EntityType.ANONYMOUS
    document_kind = DocumentKind.ANONYMIZED_CPF
    failure_mode = BackfillFailureMode.SOFT

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.person_repository = PersonRepository(session)

    async def find_existing(self, identifier: str) -> Optional[Person]:
        return await self.person_repository.find_by_raw_cpf(identifier)

    async def insert(self, payload: Dict[str, Any]) -> Optional[Person]:
        return await self.person_repository.insert(payload)

    def record_would_create(
        self,
        dry_run_stats: DryRunStats,
        identifier: str,
        payload: Dict[str, Any],
        transaction: Any,
    ) -> None:
        dry_run_stats.add_anonymous_person_record(identifier, payload, transaction)
