"""Helpers for the Chilean RUT (Rol Único Tributario)."""

import re

_RUT_PUNCTUATION = re.compile(r"[.\-\s]")


def clean_rut(rut: str) -> str:
    """Strip dots, dashes and spaces: ``18.209.442-0`` -> ``182094420``."""
    if rut is None:
        return ""
    return _RUT_PUNCTUATION.sub("", str(rut)).upper()


def compute_check_digit(body: str) -> str:
    total = 0
    factor = 2
    for digit in reversed(body):
        total += int(digit) * factor
        factor = 2 if factor == 7 else factor + 1
    remainder = 11 - (total % 11)
    if remainder == 11:
        return "0"
    if remainder == 10:
        return "K"
    return str(remainder)


def is_valid_rut(rut: str) -> bool:
    cleaned = clean_rut(rut)
    if len(cleaned) < 2:
        return False
    body, check_digit = cleaned[:-1], cleaned[-1]
    if not body.isdigit():
        return False
    return compute_check_digit(body) == check_digit


def format_rut(rut: str) -> str:
    """``182094420`` -> ``18.209.442-0``"""
    cleaned = clean_rut(rut)
    if len(cleaned) < 2:
        return cleaned
    body, check_digit = cleaned[:-1], cleaned[-1]
    groups = []
    while len(body) > 3:
        groups.insert(0, body[-3:])
        body = body[:-3]
    groups.insert(0, body)
    return f"{'.'.join(groups)}-{check_digit}"
