"""Migrate embedded counterparty data on transactions into companies and persons.

Every transaction that still carries a ``company_cnpj`` is classified and
resolved to a canonical company, person or anonymous person; the
transaction is then linked through ``company_id`` and its embedded
columns are cleared.

A real run writes inside a single database transaction, so either every
transaction is migrated or nothing is. A dry run performs the same
classification and lookups but never writes, and returns a DryRunReport.
Transactions are processed one at a time because the run-scoped dedup
cache relies on each lookup-or-create finishing before the next starts.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from fiscal_ledger.core.database import async_session_maker
from fiscal_ledger.core.exceptions import MigrationError
from fiscal_ledger.repositories.transaction_repository import TransactionRepository
from fiscal_ledger.schemas.migration import DryRunReport, MigrationStats
from fiscal_ledger.services.base_service import BaseService
from fiscal_ledger.services.migration.company_entities.anonymous_person_resolver import (
    AnonymousPersonResolver,
)
from fiscal_ledger.services.migration.company_entities.base_resolver import BaseEntityResolver
from fiscal_ledger.services.migration.company_entities.company_resolver import CompanyResolver
from fiscal_ledger.services.migration.company_entities.document_classifier import (
    DocumentClassifier,
    get_document_identifier,
    has_document_data,
)
from fiscal_ledger.services.migration.company_entities.dry_run import (
    DryRunReporter,
    DryRunStats,
)
from fiscal_ledger.services.migration.company_entities.person_resolver import PersonResolver
from fiscal_ledger.services.migration.company_entities.types import (
    DocumentKind,
    ProcessedEntityCache,
)
from fiscal_ledger.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Counter fields per resolvable kind: (created, updated)
_COUNTERS = {
    DocumentKind.CNPJ: ("companies_created", "companies_updated"),
    DocumentKind.CPF: ("persons_created", "persons_updated"),
    DocumentKind.ANONYMIZED_CPF: ("anonymous_persons_created", "anonymous_persons_updated"),
}

MigrationResult = Union[MigrationStats, DryRunReport]


class CompanyEntityMigrationService(BaseService):
    """Moves transaction counterparties into the companies and persons tables."""

    def __init__(
        self,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
        classifier: Optional[DocumentClassifier] = None,
        preview_limit: Optional[int] = None,
        existing_preview_limit: Optional[int] = None,
    ):
        """Initialize the migration service.

        Args:
            session_factory: Callable returning an AsyncSession context manager
            classifier: Document classifier; defaults to DocumentClassifier()
            preview_limit: Would-create rows listed per section in the summary
            existing_preview_limit: Existing entities listed in the summary
        """
        super().__init__()
        self.session_factory = session_factory or async_session_maker
        self.classifier = classifier or DocumentClassifier()
        self.reporter = DryRunReporter(preview_limit, existing_preview_limit)

    async def migrate(self, dry_run: bool = False) -> MigrationResult:
        """Run the migration.

        Args:
            dry_run: Analyse and report without writing anything

        Returns:
            MigrationStats for a real run, DryRunReport for a dry run
        """
        return await self.execute(dry_run=dry_run)

    async def run(self, dry_run: bool = False) -> MigrationResult:
        mode = "dry run" if dry_run else "migration"
        LOGGER.info(f"Starting company and person data {mode} from transactions with CNPJ/CPF")

        async with self.session_factory() as session:
            try:
                transactions = await TransactionRepository(session).find_all_with_company_cnpj()
                LOGGER.info(
                    f"Found {len(transactions)} transactions with CNPJ/CPF to analyze",
                    extra={"dry_run": dry_run}
                )

                if not transactions:
                    LOGGER.info("No transactions found, nothing to migrate")
                    return DryRunReport() if dry_run else MigrationStats()

                if dry_run:
                    return await self._run_dry(session, transactions)

                # End the implicit read transaction so the writes get their own
                if session.in_transaction():
                    await session.commit()

                async with session.begin():
                    stats = await self._process_transactions(session, transactions)

                LOGGER.info(
                    "Company and person data migration completed",
                    extra={"stats": stats.model_dump()}
                )
                return stats

            except Exception as e:
                LOGGER.error(
                    f"Error during company and person data {mode}: {e}",
                    exc_info=True,
                    extra={"dry_run": dry_run}
                )
                raise

    async def _run_dry(
        self, session: AsyncSession, transactions: List[Any]
    ) -> DryRunReport:
        dry_run_stats = DryRunStats(transactions_analyzed=len(transactions))

        try:
            await self._process_transactions(
                session, transactions, dry_run=True, dry_run_stats=dry_run_stats
            )
        except Exception as e:
            self.reporter.display(dry_run_stats)
            raise MigrationError(
                f"Dry run aborted: {e}",
                original_error=e,
                report=self.reporter.generate_report(dry_run_stats),
            ) from e

        self.reporter.display(dry_run_stats)
        return self.reporter.generate_report(dry_run_stats)

    def _build_resolvers(self, session: AsyncSession) -> Dict[DocumentKind, BaseEntityResolver]:
        return {
            DocumentKind.CNPJ: CompanyResolver(session),
            DocumentKind.CPF: PersonResolver(session),
            DocumentKind.ANONYMIZED_CPF: AnonymousPersonResolver(session),
        }

    async def _process_transactions(
        self,
        session: AsyncSession,
        transactions: List[Any],
        dry_run: bool = False,
        dry_run_stats: Optional[DryRunStats] = None,
    ) -> MigrationStats:
        """Process transactions sequentially, in fetch order.

        Args:
            session: Session of the current run
            transactions: Transactions to process
            dry_run: Record decisions instead of writing
            dry_run_stats: Collector for dry-run decisions

        Returns:
            MigrationStats accumulated over the loop
        """
        resolvers = self._build_resolvers(session)
        processed_entities: ProcessedEntityCache = {}
        stats = MigrationStats(transactions_analyzed=len(transactions))

        for transaction in transactions:
            try:
                await self._process_transaction(
                    transaction, processed_entities, resolvers, stats, dry_run, dry_run_stats
                )
            except Exception as e:
                LOGGER.error(
                    f"Error processing transaction {transaction.id}: {e}",
                    extra={"transaction_id": str(transaction.id)}
                )
                if dry_run and dry_run_stats is not None:
                    dry_run_stats.add_failed_record(transaction, str(e))
                    dry_run_stats.unique_entities_processed = len(processed_entities)
                raise

        stats.unique_entities_processed = len(processed_entities)
        if dry_run_stats is not None:
            dry_run_stats.unique_entities_processed = len(processed_entities)
        return stats

    async def _process_transaction(
        self,
        transaction: Any,
        processed_entities: ProcessedEntityCache,
        resolvers: Dict[DocumentKind, BaseEntityResolver],
        stats: MigrationStats,
        dry_run: bool,
        dry_run_stats: Optional[DryRunStats],
    ) -> None:
        """Classify one transaction and hand it to the matching resolver.

        Identifiers already in ``processed_entities`` are skipped, so a
        later transaction repeating an identifier stays embedded for this
        run and is linked to the existing entity on the next run.
        """
        if not has_document_data(transaction):
            return

        identifier = get_document_identifier(transaction)
        if identifier in processed_entities:
            return

        classification = self.classifier.classify(identifier)

        if classification.is_anonymized:
            kind = DocumentKind.ANONYMIZED_CPF
        elif classification.is_valid and classification.kind in resolvers:
            kind = classification.kind
        else:
            LOGGER.info(
                f"Invalid document identifier: {identifier}",
                extra={"transaction_id": str(transaction.id)}
            )
            stats.invalid_documents_skipped += 1
            return

        result = await resolvers[kind].process(
            transaction, processed_entities, dry_run=dry_run, dry_run_stats=dry_run_stats
        )

        created_field, updated_field = _COUNTERS[kind]
        setattr(stats, created_field, getattr(stats, created_field) + result.created)
        setattr(stats, updated_field, getattr(stats, updated_field) + result.updated)
        stats.entities_existing += result.skipped


async def migrate_company_data_to_company_collection(dry_run: bool = False) -> MigrationResult:
    """Run the company entity migration with the default session factory.

    Args:
        dry_run: Analyse and report without writing anything

    Returns:
        MigrationStats for a real run, DryRunReport for a dry run
    """
    return await CompanyEntityMigrationService().migrate(dry_run=dry_run)
