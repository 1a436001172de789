"""Result schemas for the company entity migration.

Both the real-run statistics and the dry-run report serialise with
camelCase keys (``model_dump(by_alias=True)``) so that existing consumers
of the JSON report keep working.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model emitting camelCase aliases while accepting field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MigrationStats(CamelModel):
    """Counters returned by a real migration run."""

    success: bool = True
    transactions_analyzed: int = 0
    companies_created: int = 0
    companies_updated: int = 0
    persons_created: int = 0
    persons_updated: int = 0
    anonymous_persons_created: int = 0
    anonymous_persons_updated: int = 0
    entities_existing: int = 0
    invalid_documents_skipped: int = 0
    unique_entities_processed: int = 0

    @property
    def total_created(self) -> int:
        return self.companies_created + self.persons_created + self.anonymous_persons_created

    @property
    def total_updated(self) -> int:
        return self.companies_updated + self.persons_updated + self.anonymous_persons_updated


class WouldCreateRecord(CamelModel):
    """An entity a dry run would have inserted."""

    identifier: str
    name: str
    type: str = Field(..., description="company, person or anonymous")
    data: Dict[str, Any] = Field(default_factory=dict, description="Insert payload")
    source: str


class ExistingEntityRecord(CamelModel):
    """An entity a dry run found already stored."""

    identifier: str
    name: str
    type: str
    id: str


class FailedTransaction(CamelModel):
    id: Optional[str] = None
    company_cnpj: Optional[str] = None
    company_name: Optional[str] = None
    description: Optional[str] = None


class FailedRecord(CamelModel):
    """A transaction whose processing raised during a dry run."""

    identifier: Optional[str] = None
    transaction: FailedTransaction
    error: str


class EntitySection(CamelModel):
    would_create: int = 0
    existing: int = 0
    records: List[WouldCreateRecord] = Field(default_factory=list)


class DryRunSummary(CamelModel):
    is_dry_run: bool = True
    transactions_analyzed: int = 0
    unique_entities_processed: int = 0
    transactions_would_update: int = 0
    total_would_create: int = 0
    total_existing: int = 0
    total_failed: int = 0


class DryRunDetails(CamelModel):
    companies: EntitySection = Field(default_factory=EntitySection)
    persons: EntitySection = Field(default_factory=EntitySection)
    anonymous_persons: EntitySection = Field(default_factory=EntitySection)
    existing_entities: List[ExistingEntityRecord] = Field(default_factory=list)
    failed_records: List[FailedRecord] = Field(default_factory=list)


class DryRunReport(CamelModel):
    """Everything a dry run decided, without anything having been written."""

    summary: DryRunSummary = Field(default_factory=DryRunSummary)
    details: DryRunDetails = Field(default_factory=DryRunDetails)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialise with camelCase keys and JSON-safe values."""
        return self.model_dump(by_alias=True, mode="json")
