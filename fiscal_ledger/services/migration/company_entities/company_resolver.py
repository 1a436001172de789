"""Resolve CNPJ transactions to companies."""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_ledger.database.models import Company
from fiscal_ledger.repositories.company_repository import CompanyRepository
from fiscal_ledger.services.migration.company_entities.base_resolver import BaseEntityResolver
from fiscal_ledger.services.migration.company_entities.dry_run import DryRunStats
from fiscal_ledger.services.migration.company_entities.transaction_backfiller import (
    BackfillFailureMode,
)
from fiscal_ledger.services.migration.company_entities.types import DocumentKind, EntityType


class CompanyResolver(BaseEntityResolver):
    """Links CNPJ transactions to companies.

    A failed backfill aborts the whole run.
    """

    entity_type = EntityType.COMPANY
    document_kind = DocumentKind.CNPJ
    failure_mode = BackfillFailureMode.FATAL

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.company_repository = CompanyRepository(session)

    async def find_existing(self, identifier: str) -> Optional[Company]:
        return await self.company_repository.find_by_cnpj(identifier)

    async def insert(self, payload: Dict[str, Any]) -> Optional[Company]:
        return await self.company_repository.insert(payload)

    def record_would_create(
        self,
        dry_run_stats: DryRunStats,
        identifier: str,
        payload: Dict[str, Any],
        transaction: Any,
    ) -> None:
        dry_run_stats.add_company_record(identifier, payload, transaction)
