from __future__ import annotations

import re
from enum import Enum
from typing import Any

from fiscal.config import strict_company_id_from_env

CHECKSUM_ALPHABET = "TRWAGMYFPDXBNJZSQVHLCKE"

_PERSONAL_PATTERN = re.compile(r"^[0-9]{8}[A-Z]$")
_FOREIGN_PATTERN = re.compile(r"^[XYZ][0-9]{7}[A-Z]$")
_COMPANY_PATTERN = re.compile(r"^[ABCDEFGHJNPQRSUVW][0-9]{7}[0-9A-J]$")
_FOREIGN_PREFIX = {"X": "0", "Y": "1", "Z": "2"}

# Company control character: letter for these entity types, digit for the
# next group, either for the rest.
_COMPANY_LETTER_CONTROL = frozenset("NPQRSW")
_COMPANY_DIGIT_CONTROL = frozenset("ABEH")
_COMPANY_CONTROL_LETTERS = "JABCDEFGHI"

BANK_ACCOUNT_COUNTRY = "ES"
BANK_ACCOUNT_LENGTH = 24
_BANK_ACCOUNT_PATTERN = re.compile(r"^ES[0-9]{22}$")


class TaxIdKind(str, Enum):
    PERSONAL = "personal"
    FOREIGN_RESIDENT = "foreign_resident"
    COMPANY = "company"


def normalize_tax_id(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().upper().replace(" ", "").replace("-", "")


def _checksum_letter(number: int) -> str:
    return CHECKSUM_ALPHABET[number % 23]


def is_valid_personal_id(value: Any) -> bool:
    nif = normalize_tax_id(value)
    if not _PERSONAL_PATTERN.match(nif):
        return False
    return _checksum_letter(int(nif[:8])) == nif[8]


def is_valid_foreign_id(value: Any, *, strict: bool = False) -> bool:
    nie = normalize_tax_id(value)
    if not _FOREIGN_PATTERN.match(nie):
        return False
    if not strict:
        return True
    number = int(_FOREIGN_PREFIX[nie[0]] + nie[1:8])
    return _checksum_letter(number) == nie[8]


def company_control_character(prefix: str) -> tuple[str, str]:
    """Return the (digit, letter) control pair for a company ID's first eight characters."""
    digits = [int(ch) for ch in prefix[1:8]]
    even_sum = sum(digits[1::2])
    odd_sum = 0
    for digit in digits[0::2]:
        doubled = digit * 2
        odd_sum += doubled // 10 + doubled % 10
    control = (10 - (even_sum + odd_sum) % 10) % 10
    return str(control), _COMPANY_CONTROL_LETTERS[control]


def is_valid_company_id(value: Any, *, strict: bool | None = None) -> bool:
    cif = normalize_tax_id(value)
    if not _COMPANY_PATTERN.match(cif):
        return False
    if strict is None:
        strict = strict_company_id_from_env()
    if not strict:
        return True
    digit, letter = company_control_character(cif[:8])
    control = cif[8]
    if cif[0] in _COMPANY_LETTER_CONTROL:
        return control == letter
    if cif[0] in _COMPANY_DIGIT_CONTROL:
        return control == digit
    return control in (digit, letter)


def classify_tax_id(value: Any) -> TaxIdKind | None:
    if is_valid_personal_id(value):
        return TaxIdKind.PERSONAL
    if is_valid_foreign_id(value):
        return TaxIdKind.FOREIGN_RESIDENT
    if is_valid_company_id(value):
        return TaxIdKind.COMPANY
    return None


def is_valid_tax_id(value: Any) -> bool:
    return classify_tax_id(value) is not None


def _mod97(numeral: str) -> int:
    remainder = 0
    for ch in numeral:
        remainder = (remainder * 10 + int(ch)) % 97
    return remainder


def is_valid_bank_account(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    iban = value.replace(" ", "").upper()
    if len(iban) != BANK_ACCOUNT_LENGTH or not _BANK_ACCOUNT_PATTERN.match(iban):
        return False
    rearranged = iban[4:] + iban[:4]
    numeral = "".join(str(ord(ch) - 55) if ch.isalpha() else ch for ch in rearranged)
    return _mod97(numeral) == 1


__all__ = [
    "CHECKSUM_ALPHABET",
    "BANK_ACCOUNT_COUNTRY",
    "BANK_ACCOUNT_LENGTH",
    "TaxIdKind",
    "normalize_tax_id",
    "is_valid_personal_id",
    "is_valid_foreign_id",
    "is_valid_company_id",
    "company_control_character",
    "classify_tax_id",
    "is_valid_tax_id",
    "is_valid_bank_account",
]
