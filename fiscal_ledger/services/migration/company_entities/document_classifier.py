"""Classify a transaction's counterparty document.

Anonymization is checked before any checksum validation. A masked CPF
such as ``123.***.*89-12`` would otherwise fail the checksum and be
discarded as garbage instead of becoming an anonymous person.
"""

import re
from typing import Any, Optional

from fiscal_ledger.services.migration.company_entities.types import (
    ANONYMIZATION_PATTERNS,
    FULLY_MASKED_PATTERN,
    MAX_ANONYMIZED_LENGTH,
    MIN_ANONYMIZED_LENGTH,
    DocumentClassification,
    DocumentKind,
)
from fiscal_ledger.utils.document_validators import DocumentChecksumValidator

_NON_DIGITS = re.compile(r"\D")
_HAS_DIGIT = re.compile(r"\d")

_INVALID = DocumentClassification(
    kind=DocumentKind.INVALID,
    is_valid=False,
    is_anonymized=False,
    clean_digits="",
)


def has_document_data(transaction: Any) -> bool:
    """True when the transaction carries a non-blank ``company_cnpj``."""
    value = getattr(transaction, "company_cnpj", None)
    return isinstance(value, str) and value.strip() != ""


def get_document_identifier(transaction: Any) -> str:
    """The raw ``company_cnpj`` of a transaction, or an empty string."""
    return getattr(transaction, "company_cnpj", None) or ""


class DocumentClassifier:
    """Decides whether an identifier is a CNPJ, a CPF, an anonymized CPF or junk."""

    def __init__(self, validator: Optional[DocumentChecksumValidator] = None):
        """Initialize the classifier.

        Args:
            validator: Checksum validator; defaults to DocumentChecksumValidator
        """
        self.validator = validator or DocumentChecksumValidator()

    def classify(self, raw: Any) -> DocumentClassification:
        """Classify a raw identifier.

        Args:
            raw: Identifier as found on the transaction

        Returns:
            DocumentClassification. For anonymized CPFs ``clean_digits`` is
            the trimmed raw string, since it is the only identity available.
        """
        if not isinstance(raw, str) or raw.strip() == "":
            return _INVALID

        trimmed = raw.strip()

        if self.is_anonymized_cpf(trimmed):
            return DocumentClassification(
                kind=DocumentKind.ANONYMIZED_CPF,
                is_valid=False,
                is_anonymized=True,
                clean_digits=trimmed,
            )

        info = self.validator.identify(trimmed)
        return DocumentClassification(
            kind=DocumentKind(info.type),
            is_valid=info.is_valid,
            is_anonymized=False,
            clean_digits=_NON_DIGITS.sub("", trimmed),
        )

    @staticmethod
    def is_anonymized_cpf(identifier: Any) -> bool:
        """Check whether an identifier looks like a masked CPF.

        It must match one of the mask patterns, be 8 to 15 characters long,
        and either contain a digit or consist only of mask characters and
        separators (``###.###.###-##``).
        """
        if not isinstance(identifier, str):
            return False

        candidate = identifier.strip()

        if not any(pattern.search(candidate) for pattern in ANONYMIZATION_PATTERNS):
            return False

        if not MIN_ANONYMIZED_LENGTH <= len(candidate) <= MAX_ANONYMIZED_LENGTH:
            return False

        return bool(_HAS_DIGIT.search(candidate)) or bool(
            FULLY_MASKED_PATTERN.match(candidate)
        )
