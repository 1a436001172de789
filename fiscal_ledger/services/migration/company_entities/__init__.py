"""Company and person entity migration from transaction data."""

from fiscal_ledger.services.migration.company_entities.document_classifier import (
    DocumentClassifier,
)
from fiscal_ledger.services.migration.company_entities.dry_run import (
    DryRunReporter,
    DryRunStats,
)
from fiscal_ledger.services.migration.company_entities.migration_service import (
    CompanyEntityMigrationService,
    migrate_company_data_to_company_collection,
)
from fiscal_ledger.services.migration.company_entities.types import (
    EMPTY_RESULT,
    DocumentClassification,
    DocumentKind,
    ProcessingResult,
)

__all__ = [
    "CompanyEntityMigrationService",
    "DocumentClassification",
    "DocumentClassifier",
    "DocumentKind",
    "DryRunReporter",
    "DryRunStats",
    "EMPTY_RESULT",
    "ProcessingResult",
    "migrate_company_data_to_company_collection",
]
