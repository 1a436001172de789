"""Utility modules."""

from fiscal_ledger.utils.document_validators import (
    DocumentChecksumValidator,
    DocumentTypeInfo,
    format_cnpj,
    format_cpf,
    identify_document_type,
    is_valid_cnpj,
    is_valid_cpf,
)
from fiscal_ledger.utils.logging import get_logger

__all__ = [
    "DocumentChecksumValidator",
    "DocumentTypeInfo",
    "format_cnpj",
    "format_cpf",
    "get_logger",
    "identify_document_type",
    "is_valid_cnpj",
    "is_valid_cpf",
]
