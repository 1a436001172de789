"""Lookup-or-create resolution shared by the company and person resolvers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_ledger.repositories.transaction_repository import TransactionRepository
from fiscal_ledger.services.migration.company_entities.dry_run import DryRunStats
from fiscal_ledger.services.migration.company_entities.entity_adapters import EntityFactory
from fiscal_ledger.services.migration.company_entities.transaction_backfiller import (
    BackfillFailureMode,
    TransactionBackfiller,
)
from fiscal_ledger.services.migration.company_entities.types import (
    EMPTY_RESULT,
    DocumentKind,
    EntityType,
    ProcessedEntityCache,
    ProcessingResult,
)
from fiscal_ledger.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseEntityResolver(ABC):
    """Resolves a transaction's counterparty to a canonical entity.

    Subclasses supply the document kind, the store lookup and insert, and
    the dry-run recorder; the resolution algorithm itself lives in
    ``process``. All store calls go through repositories bound to the
    session the resolver was built with.
    """

    entity_type: EntityType
    document_kind: DocumentKind
    failure_mode: BackfillFailureMode = BackfillFailureMode.FATAL

    def __init__(self, session: AsyncSession):
        """Initialize the resolver.

        Args:
            session: Session of the current migration run
        """
        self.session = session
        self.backfiller = TransactionBackfiller(TransactionRepository(session))

    @abstractmethod
    async def find_existing(self, identifier: str) -> Optional[Any]:
        """Look up the canonical entity for a raw identifier."""

    @abstractmethod
    async def insert(self, payload: Dict[str, Any]) -> Optional[Any]:
        """Insert a new canonical entity."""

    def build_payload(self, transaction: Any) -> Optional[Dict[str, Any]]:
        """Build the insert payload with the adapter for this resolver's kind."""
        return EntityFactory.create_entity(transaction, self.document_kind)

    @abstractmethod
    def record_would_create(
        self,
        dry_run_stats: DryRunStats,
        identifier: str,
        payload: Dict[str, Any],
        transaction: Any,
    ) -> None:
        """Add a would-create row to the dry-run collector."""

    @staticmethod
    def display_name(entity: Any) -> str:
        if isinstance(entity, dict):
            return (
                entity.get("corporate_name")
                or entity.get("trade_name")
                or entity.get("full_name")
                or ""
            )
        return (
            getattr(entity, "corporate_name", None)
            or getattr(entity, "trade_name", None)
            or getattr(entity, "full_name", None)
            or ""
        )

    async def process(
        self,
        transaction: Any,
        processed_entities: ProcessedEntityCache,
        dry_run: bool = False,
        dry_run_stats: Optional[DryRunStats] = None,
    ) -> ProcessingResult:
        """Resolve one transaction.

        Args:
            transaction: Transaction whose ``company_cnpj`` is being resolved
            processed_entities: Run-scoped cache of handled identifiers
            dry_run: Record decisions instead of writing
            dry_run_stats: Collector for dry-run decisions

        Returns:
            ProcessingResult with created/skipped/updated flags

        Raises:
            Any storage error; nothing is recovered here.
        """
        identifier = transaction.company_cnpj

        existing = await self.find_existing(identifier)
        if existing is not None:
            LOGGER.info(
                f"{self.entity_type.value.capitalize()} already exists: "
                f"{self.display_name(existing)}",
                extra={"identifier": identifier, "entity_id": str(existing.id)}
            )

            if dry_run:
                if dry_run_stats is not None:
                    dry_run_stats.add_existing_entity(identifier, existing, self.entity_type)
                # An already linked transaction would be left alone
                updated = transaction.company_id is None
                if updated and dry_run_stats is not None:
                    dry_run_stats.increment_transaction_updates()
            else:
                updated = await self.backfiller.backfill(
                    transaction, existing.id, self.failure_mode
                )

            processed_entities[identifier] = True
            return ProcessingResult(created=0, skipped=1, updated=int(updated))

        payload = self.build_payload(transaction)
        if payload is None:
            return EMPTY_RESULT

        if dry_run:
            LOGGER.info(
                f"Would create {self.entity_type.value}: {self.display_name(payload)}",
                extra={"identifier": identifier}
            )
            if dry_run_stats is not None:
                self.record_would_create(dry_run_stats, identifier, payload, transaction)
                dry_run_stats.increment_transaction_updates()
            processed_entities[identifier] = True
            return ProcessingResult(created=1, skipped=0, updated=1)

        created = await self.insert(payload)
        if created is None:
            LOGGER.warning(
                f"Insert returned no {self.entity_type.value}",
                extra={"identifier": identifier}
            )
            processed_entities[identifier] = True
            return EMPTY_RESULT

        LOGGER.info(
            f"Created {self.entity_type.value}: {self.display_name(payload)}",
            extra={"identifier": identifier, "entity_id": str(created.id)}
        )

        updated = await self.backfiller.backfill(transaction, created.id, self.failure_mode)
        processed_entities[identifier] = True
        return ProcessingResult(created=1, skipped=0, updated=int(updated))
