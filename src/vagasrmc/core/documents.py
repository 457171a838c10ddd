"""Brazilian tax-id check digits (CPF for people, CNPJ for companies)."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")

CNPJ_WEIGHTS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def only_digits(value: str) -> str:
    return _NON_DIGITS.sub("", value or "")


def _all_same(digits: str) -> bool:
    return len(set(digits)) == 1


def _cpf_digit(digits: list[int], start_weight: int) -> int:
    total = sum(d * w for d, w in zip(digits, range(start_weight, 1, -1)))
    digit = 11 - (total % 11)
    return 0 if digit > 9 else digit


def _cnpj_digit(digits: list[int], weights: tuple[int, ...]) -> int:
    remainder = sum(d * w for d, w in zip(digits, weights)) % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_cpf(value: str) -> bool:
    cpf = only_digits(value)
    if len(cpf) != 11 or _all_same(cpf):
        return False

    digits = [int(c) for c in cpf]
    if _cpf_digit(digits[:9], 10) != digits[9]:
        return False
    return _cpf_digit(digits[:10], 11) == digits[10]


def is_valid_cnpj(value: str) -> bool:
    cnpj = only_digits(value)
    if len(cnpj) != 14 or _all_same(cnpj):
        return False

    digits = [int(c) for c in cnpj]
    if _cnpj_digit(digits[:12], CNPJ_WEIGHTS_1) != digits[12]:
        return False
    return _cnpj_digit(digits[:13], CNPJ_WEIGHTS_2) == digits[13]
