"""SQLAlchemy models for all database tables."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    String,
    Text,
    TIMESTAMP,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_ledger.core.database import Base


class Transaction(Base):
    """Financial transaction.

    Older rows embed the counterparty as raw ``company_*`` columns; the
    entity migration moves those into ``companies``/``persons`` and leaves
    only ``company_id`` behind.
    """

    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    transaction_date: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_value: Mapped[str | None] = mapped_column(String, nullable=True)
    transaction_type: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="credit or debit"
    )
    transaction_source: Mapped[str | None] = mapped_column(String, nullable=True)

    # Embedded counterparty, cleared once company_id is set
    company_cnpj: Mapped[str | None] = mapped_column(
        String, nullable=True, index=True, comment="Raw CNPJ/CPF, possibly anonymized"
    )
    company_name: Mapped[str | None] = mapped_column(String, nullable=True)
    company_seller_name: Mapped[str | None] = mapped_column(String, nullable=True)

    # Points at companies.id or persons.id, hence no FK constraint
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()", onupdate=datetime.utcnow
    )


class Company(Base):
    """Canonical company (CNPJ holder)."""

    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_cnpj: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    company_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    corporate_name: Mapped[str] = mapped_column(
        String, nullable=False, default="", comment="razao social"
    )
    trade_name: Mapped[str] = mapped_column(
        String, nullable=False, default="", comment="nome fantasia"
    )
    foundation_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    company_size: Mapped[str] = mapped_column(String, nullable=False, default="")
    legal_nature: Mapped[str] = mapped_column(String, nullable=False, default="")
    micro_entrepreneur_option: Mapped[bool] = mapped_column(Boolean, default=False)
    simplified_tax_option: Mapped[bool] = mapped_column(Boolean, default=False)
    share_capital: Mapped[str] = mapped_column(String, nullable=False, default="")
    company_type: Mapped[str] = mapped_column(
        String, nullable=False, default="Matriz", comment="Matriz or Filial"
    )
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    status_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    contacts: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    address: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    activities: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    corporate_structure: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    statistics: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    data_source: Mapped[str | None] = mapped_column(String, nullable=True)
    source_transaction_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()", onupdate=datetime.utcnow
    )


class Person(Base):
    """Canonical person (CPF holder), including anonymized CPFs."""

    __tablename__ = "persons"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    cpf: Mapped[str] = mapped_column(
        String,
        unique=True,
        nullable=False,
        comment="Formatted CPF, or the raw string for anonymized CPFs",
    )
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default="active", comment="active, inactive, blocked, anonymous"
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    personal_business: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)

    data_source: Mapped[str | None] = mapped_column(String, nullable=True)
    source_transaction_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()", onupdate=datetime.utcnow
    )
