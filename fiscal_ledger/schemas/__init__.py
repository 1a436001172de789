"""Pydantic schemas."""

from fiscal_ledger.schemas.migration import (
    DryRunDetails,
    DryRunReport,
    DryRunSummary,
    EntitySection,
    ExistingEntityRecord,
    FailedRecord,
    FailedTransaction,
    MigrationStats,
    WouldCreateRecord,
)

__all__ = [
    "DryRunDetails",
    "DryRunReport",
    "DryRunSummary",
    "EntitySection",
    "ExistingEntityRecord",
    "FailedRecord",
    "FailedTransaction",
    "MigrationStats",
    "WouldCreateRecord",
]
