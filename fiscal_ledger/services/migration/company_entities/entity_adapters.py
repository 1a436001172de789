"""Adapters turning a transaction's embedded counterparty into entity payloads.

Each adapter returns a dict of ORM column values ready for
``Repository.insert``, or None when the transaction has no document.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fiscal_ledger.services.migration.company_entities.document_classifier import (
    has_document_data,
)
from fiscal_ledger.services.migration.company_entities.types import (
    DATA_SOURCE,
    DocumentKind,
    EntityStatus,
)
from fiscal_ledger.utils.document_validators import format_cpf

UNNAMED_PERSON = "Nome não informado"
ANONYMOUS_PERSON = "Pessoa Anônima"
ANONYMOUS_NOTE = "Pessoa criada a partir de CPF anonimizado em transação"
SELLER_ROLE = "Vendedor"
COUNTRY = "Brasil"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _seller_differs(transaction: Any) -> bool:
    seller = transaction.company_seller_name
    return bool(seller) and seller != transaction.company_name


class CompanyAdapter:
    """Builds a company payload from a CNPJ transaction."""

    @staticmethod
    def from_transaction(transaction: Any) -> Optional[Dict[str, Any]]:
        if transaction is None or not has_document_data(transaction):
            return None

        name = transaction.company_name or ""
        seller = transaction.company_seller_name
        now = _now()

        return {
            "company_name": name,
            "company_cnpj": transaction.company_cnpj,
            "corporate_name": name,
            "trade_name": name,
            "foundation_date": None,
            "company_size": "",
            "legal_nature": "",
            "micro_entrepreneur_option": False,
            "simplified_tax_option": False,
            "share_capital": "",
            "company_type": "Matriz",
            "status": EntityStatus.ACTIVE.value,
            "status_date": None,
            "contacts": {
                "email": "",
                "phones": [],
                "website": "",
                "socialMedia": [],
            },
            "address": {
                "street": "",
                "number": "",
                "complement": "",
                "neighborhood": "",
                "zipCode": "",
                "city": "",
                "state": "",
                "country": COUNTRY,
            },
            "activities": {
                "primary": {"code": "", "description": ""},
                "secondary": [],
            },
            "corporate_structure": (
                [{"name": seller, "type": SELLER_ROLE, "cnpj": "", "country": COUNTRY}]
                if seller
                else []
            ),
            "statistics": {
                "totalTransactions": 0,
                "totalTransactionValue": "0",
                "lastTransaction": None,
            },
            "data_source": DATA_SOURCE,
            "source_transaction_id": transaction.id,
            "created_at": now,
            "updated_at": now,
        }


class PersonAdapter:
    """Builds a person payload from a valid-CPF transaction."""

    @staticmethod
    def from_transaction(transaction: Any) -> Optional[Dict[str, Any]]:
        if transaction is None or not has_document_data(transaction):
            return None

        now = _now()
        payload = {
            "full_name": (
                transaction.company_name
                or transaction.company_seller_name
                or UNNAMED_PERSON
            ),
            "cpf": format_cpf(transaction.company_cnpj),
            "status": EntityStatus.ACTIVE.value,
            "notes": None,
            "personal_business": {"hasPersonalBusiness": False},
            "data_source": DATA_SOURCE,
            "source_transaction_id": transaction.id,
            "created_at": now,
            "updated_at": now,
        }

        if _seller_differs(transaction):
            payload["notes"] = f"Nome do vendedor: {transaction.company_seller_name}"

        return payload


class AnonymousPersonAdapter:
    """Builds a person payload from a masked CPF, keeping the mask verbatim."""

    @staticmethod
    def from_transaction(transaction: Any) -> Optional[Dict[str, Any]]:
        if transaction is None or not has_document_data(transaction):
            return None

        notes = ANONYMOUS_NOTE
        if _seller_differs(transaction):
            notes += f". Vendedor: {transaction.company_seller_name}"

        now = _now()
        return {
            "full_name": (
                transaction.company_name
                or transaction.company_seller_name
                or ANONYMOUS_PERSON
            ),
            "cpf": transaction.company_cnpj,
            "status": EntityStatus.ANONYMOUS.value,
            "notes": notes,
            "personal_business": {"hasPersonalBusiness": False},
            "data_source": DATA_SOURCE,
            "source_transaction_id": transaction.id,
            "created_at": now,
            "updated_at": now,
        }


class EntityFactory:
    """Picks the adapter for a document kind."""

    ADAPTERS = {
        DocumentKind.CNPJ: CompanyAdapter,
        DocumentKind.CPF: PersonAdapter,
        DocumentKind.ANONYMIZED_CPF: AnonymousPersonAdapter,
    }

    @classmethod
    def create_entity(
        cls, transaction: Any, kind: DocumentKind
    ) -> Optional[Dict[str, Any]]:
        """Build the entity payload for ``kind``; None for invalid documents."""
        adapter = cls.ADAPTERS.get(kind)
        if adapter is None:
            return None
        return adapter.from_transaction(transaction)
