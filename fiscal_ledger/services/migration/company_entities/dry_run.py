"""Dry-run bookkeeping and reporting for the company entity migration.

During a dry run the resolvers record what they would have done into a
``DryRunStats`` collector. ``DryRunReporter`` turns the collector into a
human-readable summary and into the ``DryRunReport`` returned to callers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fiscal_ledger.core.config import settings
from fiscal_ledger.schemas.migration import (
    DryRunDetails,
    DryRunReport,
    DryRunSummary,
    EntitySection,
    ExistingEntityRecord,
    FailedRecord,
    FailedTransaction,
    WouldCreateRecord,
)
from fiscal_ledger.services.migration.company_entities.types import EntityType
from fiscal_ledger.utils.logging import get_logger

LOGGER = get_logger(__name__)

RULE = "=" * 80


def _source(transaction: Any) -> str:
    return f"Transaction ID: {getattr(transaction, 'id', None) or 'Unknown'}"


@dataclass
class DryRunStats:
    """Mutable collector filled in by the resolvers during a dry run."""

    transactions_analyzed: int = 0
    unique_entities_processed: int = 0
    transactions_would_update: int = 0
    company_records: List[WouldCreateRecord] = field(default_factory=list)
    person_records: List[WouldCreateRecord] = field(default_factory=list)
    anonymous_person_records: List[WouldCreateRecord] = field(default_factory=list)
    existing_entities: List[ExistingEntityRecord] = field(default_factory=list)
    failed_records: List[FailedRecord] = field(default_factory=list)
    companies_existing: int = 0
    persons_existing: int = 0
    anonymous_persons_existing: int = 0

    @property
    def companies_would_create(self) -> int:
        return len(self.company_records)

    @property
    def persons_would_create(self) -> int:
        return len(self.person_records)

    @property
    def anonymous_persons_would_create(self) -> int:
        return len(self.anonymous_person_records)

    @property
    def total_would_create(self) -> int:
        return (
            self.companies_would_create
            + self.persons_would_create
            + self.anonymous_persons_would_create
        )

    @property
    def total_existing(self) -> int:
        return self.companies_existing + self.persons_existing + self.anonymous_persons_existing

    @property
    def total_failed(self) -> int:
        return len(self.failed_records)

    def add_company_record(
        self, identifier: str, data: Dict[str, Any], transaction: Any
    ) -> None:
        self.company_records.append(
            WouldCreateRecord(
                identifier=identifier,
                name=data.get("corporate_name") or data.get("trade_name") or "Unnamed Company",
                type=EntityType.COMPANY.value,
                data=data,
                source=_source(transaction),
            )
        )

    def add_person_record(
        self, identifier: str, data: Dict[str, Any], transaction: Any
    ) -> None:
        self.person_records.append(
            WouldCreateRecord(
                identifier=identifier,
                name=data.get("full_name") or "Unnamed Person",
                type=EntityType.PERSON.value,
                data=data,
                source=_source(transaction),
            )
        )

    def add_anonymous_person_record(
        self, identifier: str, data: Dict[str, Any], transaction: Any
    ) -> None:
        self.anonymous_person_records.append(
            WouldCreateRecord(
                identifier=identifier,
                name=data.get("full_name") or "Anonymous Person",
                type=EntityType.ANONYMOUS.value,
                data=data,
                source=_source(transaction),
            )
        )

    def add_existing_entity(
        self, identifier: str, entity: Any, entity_type: EntityType
    ) -> None:
        name = (
            getattr(entity, "corporate_name", None)
            or getattr(entity, "trade_name", None)
            or getattr(entity, "full_name", None)
            or "Unnamed Entity"
        )
        self.existing_entities.append(
            ExistingEntityRecord(
                identifier=identifier,
                name=name,
                type=entity_type.value,
                id=str(getattr(entity, "id", "")),
            )
        )

        if entity_type is EntityType.COMPANY:
            self.companies_existing += 1
        elif entity_type is EntityType.PERSON:
            self.persons_existing += 1
        else:
            self.anonymous_persons_existing += 1

    def add_failed_record(self, transaction: Any, error: str) -> None:
        transaction_id = getattr(transaction, "id", None)
        self.failed_records.append(
            FailedRecord(
                identifier=getattr(transaction, "company_cnpj", None) or "Unknown",
                transaction=FailedTransaction(
                    id=str(transaction_id) if transaction_id is not None else "Unknown",
                    company_cnpj=getattr(transaction, "company_cnpj", None),
                    company_name=getattr(transaction, "company_name", None),
                    description=getattr(transaction, "description", None),
                ),
                error=error,
            )
        )

    def increment_transaction_updates(self) -> None:
        self.transactions_would_update += 1


class DryRunReporter:
    """Renders DryRunStats as text and as a DryRunReport."""

    def __init__(
        self,
        preview_limit: Optional[int] = None,
        existing_preview_limit: Optional[int] = None,
    ):
        """Initialize the reporter.

        Args:
            preview_limit: Would-create rows listed per section
            existing_preview_limit: Existing entities listed in the sample
        """
        self.preview_limit = (
            preview_limit if preview_limit is not None else settings.migration.preview_limit
        )
        self.existing_preview_limit = (
            existing_preview_limit
            if existing_preview_limit is not None
            else settings.migration.existing_preview_limit
        )

    def _preview(self, lines: List[str], heading: str, rows: List[str], limit: int) -> None:
        if not rows:
            return
        lines.append("")
        lines.append(f"   {heading}:")
        for index, row in enumerate(rows[:limit], start=1):
            lines.append(f"      {index}. {row}")
        if len(rows) > limit:
            lines.append(f"      ... and {len(rows) - limit} more")

    def render_summary(self, stats: DryRunStats) -> str:
        """Build the multi-line dry-run summary."""
        lines = [
            RULE,
            "DRY RUN MIGRATION ANALYSIS COMPLETE",
            RULE,
            "",
            "OVERVIEW:",
            f"   - Transactions Analyzed: {stats.transactions_analyzed}",
            f"   - Unique Entities Processed: {stats.unique_entities_processed}",
            f"   - Transactions That Would Update: {stats.transactions_would_update}",
        ]

        sections = (
            ("COMPANIES (CNPJ)", "Companies", stats.company_records, stats.companies_existing),
            ("PERSONS (CPF)", "Persons", stats.person_records, stats.persons_existing),
            (
                "ANONYMOUS PERSONS (Anonymized CPF)",
                "Anonymous persons",
                stats.anonymous_person_records,
                stats.anonymous_persons_existing,
            ),
        )
        for title, label, records, existing in sections:
            lines.append("")
            lines.append(f"{title}:")
            lines.append(f"   - Would Create: {len(records)}")
            lines.append(f"   - Already Exist: {existing}")
            self._preview(
                lines,
                f"{label} that would be created",
                [f"{r.identifier} - {r.name}" for r in records],
                self.preview_limit,
            )

        if stats.existing_entities:
            lines.append("")
            lines.append("EXISTING ENTITIES (Would Skip):")
            lines.append(f"   - Total: {len(stats.existing_entities)}")
            self._preview(
                lines,
                "Sample existing entities",
                [f"{e.identifier} - {e.name} ({e.type})" for e in stats.existing_entities],
                self.existing_preview_limit,
            )

        if stats.failed_records:
            lines.append("")
            lines.append("FAILED RECORDS:")
            lines.append(f"   - Total Failed: {stats.total_failed}")
            lines.append("")
            lines.append("   Failed transactions:")
            for index, failed in enumerate(stats.failed_records, start=1):
                lines.append(f"      {index}. {failed.identifier} - {failed.error}")
                lines.append(f"         Company: {failed.transaction.company_name or 'N/A'}")

        attempted = stats.total_would_create + stats.total_existing + stats.total_failed
        succeeded = stats.total_would_create + stats.total_existing
        success_rate = (succeeded / attempted * 100) if attempted else 100.0

        lines.extend([
            "",
            "SUMMARY:",
            f"   - Total Records That Would Be Created: {stats.total_would_create}",
            f"   - Total Existing Records (Would Skip): {stats.total_existing}",
            f"   - Total Failed Records: {stats.total_failed}",
            f"   - Success Rate: {success_rate:.1f}%",
            "",
            RULE,
            "This was a DRY RUN - no changes were made to the database",
            RULE,
        ])
        return "\n".join(lines)

    def display(self, stats: DryRunStats) -> None:
        """Log the summary at INFO level."""
        LOGGER.info("\n" + self.render_summary(stats))

    def generate_report(self, stats: DryRunStats) -> DryRunReport:
        """Assemble the DryRunReport for a finished (or aborted) dry run."""
        return DryRunReport(
            summary=DryRunSummary(
                is_dry_run=True,
                transactions_analyzed=stats.transactions_analyzed,
                unique_entities_processed=stats.unique_entities_processed,
                transactions_would_update=stats.transactions_would_update,
                total_would_create=stats.total_would_create,
                total_existing=stats.total_existing,
                total_failed=stats.total_failed,
            ),
            details=DryRunDetails(
                companies=EntitySection(
                    would_create=stats.companies_would_create,
                    existing=stats.companies_existing,
                    records=list(stats.company_records),
                ),
                persons=EntitySection(
                    would_create=stats.persons_would_create,
                    existing=stats.persons_existing,
                    records=list(stats.person_records),
                ),
                anonymous_persons=EntitySection(
                    would_create=stats.anonymous_persons_would_create,
                    existing=stats.anonymous_persons_existing,
                    records=list(stats.anonymous_person_records),
                ),
                existing_entities=list(stats.existing_entities),
                failed_records=list(stats.failed_records),
            ),
        )
