"""Brazilian CNPJ and CPF validation and formatting.

Both documents carry two mod-11 check digits. Strings made of a single
repeated digit pass the arithmetic but are never issued, so they are
rejected up front.
"""

import re
from dataclasses import dataclass

_NON_DIGITS = re.compile(r"\D")

CNPJ_LENGTH = 14
CPF_LENGTH = 11


@dataclass(frozen=True)
class DocumentTypeInfo:
    """Result of identifying a document string by its digit count."""

    type: str  # "cnpj", "cpf" or "invalid"
    is_valid: bool


INVALID_DOCUMENT = DocumentTypeInfo(type="invalid", is_valid=False)


def only_digits(value: str) -> str:
    """Strip every non-digit character from ``value``."""
    return _NON_DIGITS.sub("", value or "")


def _check_digit(total: int) -> int:
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def _is_repeated(digits: str) -> bool:
    return len(set(digits)) == 1


def is_valid_cnpj(cnpj: str) -> bool:
    """Validate a CNPJ, with or without punctuation.

    Args:
        cnpj: CNPJ string

    Returns:
        True if the string holds 14 digits with correct check digits
    """
    digits = only_digits(cnpj)
    if len(digits) != CNPJ_LENGTH or _is_repeated(digits):
        return False

    # Weights cycle 2..9 from the rightmost digit leftwards
    def weighted_sum(body: str) -> int:
        total, weight = 0, 2
        for char in reversed(body):
            total += int(char) * weight
            weight = 2 if weight == 9 else weight + 1
        return total

    first = _check_digit(weighted_sum(digits[:12]))
    if int(digits[12]) != first:
        return False

    second = _check_digit(weighted_sum(digits[:13]))
    return int(digits[13]) == second


def is_valid_cpf(cpf: str) -> bool:
    """Validate a CPF, with or without punctuation.

    Args:
        cpf: CPF string

    Returns:
        True if the string holds 11 digits with correct check digits
    """
    digits = only_digits(cpf)
    if len(digits) != CPF_LENGTH or _is_repeated(digits):
        return False

    first = _check_digit(sum(int(d) * (10 - i) for i, d in enumerate(digits[:9])))
    if int(digits[9]) != first:
        return False

    second = _check_digit(sum(int(d) * (11 - i) for i, d in enumerate(digits[:10])))
    return int(digits[10]) == second


def identify_document_type(document: str) -> DocumentTypeInfo:
    """Decide whether a string is a CNPJ, a CPF or neither.

    The type is chosen by digit count alone (14 or 11); ``is_valid`` then
    reports whether the check digits hold.
    """
    if not document:
        return INVALID_DOCUMENT

    digits = only_digits(document)

    if len(digits) == CNPJ_LENGTH:
        return DocumentTypeInfo(type="cnpj", is_valid=is_valid_cnpj(digits))

    if len(digits) == CPF_LENGTH:
        return DocumentTypeInfo(type="cpf", is_valid=is_valid_cpf(digits))

    return INVALID_DOCUMENT


def format_cnpj(cnpj: str) -> str:
    """Format as ``##.###.###/####-##``; other lengths come back unchanged."""
    if not cnpj:
        return ""

    digits = only_digits(cnpj)
    if len(digits) != CNPJ_LENGTH:
        return cnpj

    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"


def format_cpf(cpf: str) -> str:
    """Format as ``###.###.###-##``; other lengths come back unchanged."""
    if not cpf:
        return ""

    digits = only_digits(cpf)
    if len(digits) != CPF_LENGTH:
        return cpf

    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


class DocumentChecksumValidator:
    """Checksum and formatting capability handed to the document classifier."""

    def identify(self, document: str) -> DocumentTypeInfo:
        return identify_document_type(document)

    def format_cpf(self, cpf: str) -> str:
        return format_cpf(cpf)

    def format_cnpj(self, cnpj: str) -> str:
        return format_cnpj(cnpj)
