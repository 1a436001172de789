"""Shared types and constants for the company entity migration."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class DocumentKind(str, Enum):
    """What a transaction's ``company_cnpj`` turned out to be."""

    CNPJ = "cnpj"
    CPF = "cpf"
    ANONYMIZED_CPF = "anonymized_cpf"
    INVALID = "invalid"


class EntityStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"
    ANONYMOUS = "anonymous"


class EntityType(str, Enum):
    """Label used in logs and dry-run records."""

    COMPANY = "company"
    PERSON = "person"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class DocumentClassification:
    kind: DocumentKind
    is_valid: bool
    is_anonymized: bool
    # Digits only, or the trimmed raw string for anonymized CPFs
    clean_digits: str


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of resolving one transaction.

    Attributes:
        created: 1 if a new canonical entity was (or would be) inserted
        skipped: 1 if the entity already existed
        updated: 1 if the transaction was (or would be) linked to the entity
    """

    created: int = 0
    skipped: int = 0
    updated: int = 0


EMPTY_RESULT = ProcessingResult()

# Run-scoped dedup cache. Keyed by the raw, unnormalised identifier, so
# "11.111.111/0001-11" and "11111111000111" are distinct keys.
ProcessedEntityCache = Dict[str, bool]

ANONYMIZATION_PATTERNS = (
    re.compile(r"\*{3,}"),
    re.compile(r"x{3,}", re.IGNORECASE),
    re.compile(r"#{2,}"),
    re.compile(r"\.{3,}"),
    re.compile(r"\d{1,3}[*x#.]{3,}\d{1,3}", re.IGNORECASE),
)

# Mask characters plus the punctuation a formatted CPF carries
FULLY_MASKED_PATTERN = re.compile(r"^[*xX#.\-/ ]+$")

MIN_ANONYMIZED_LENGTH = 8
MAX_ANONYMIZED_LENGTH = 15

DATA_SOURCE = "transaction-migration"
