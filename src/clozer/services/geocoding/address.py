"""Address clean-up and query variants for geocoding French postal addresses."""

from __future__ import annotations

import re
from typing import Optional

_CARE_OF = re.compile(r"\bchez\s+\w+", re.IGNORECASE)
_PARENTHESES = re.compile(r"\([^)]*\)")
# A hamlet name in front of the actual street ("Les Riffauds 12 rue des Ecoles").
_LOCALITY_BEFORE_STREET = re.compile(
    r"^(?:le\s+|la\s+|les\s+|l')?[\w\s]+\s+(\d+\s+(?:rue|route|impasse|chemin|avenue|place|allée|boulevard)\b)",
    re.IGNORECASE,
)
_STREET_NUMBER = re.compile(r"^(\d+[\s,]*(?:bis|ter)?)\s*(.+)", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def _squash(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_address(address: str) -> str:
    cleaned = _CARE_OF.sub("", address)
    cleaned = _PARENTHESES.sub("", cleaned)
    match = _LOCALITY_BEFORE_STREET.match(cleaned)
    if match:
        cleaned = cleaned[match.start(1):]
    return _squash(cleaned)


def extract_street_number(address: str) -> tuple[Optional[str], str]:
    match = _STREET_NUMBER.match(address)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return None, address


def address_variants(address: str, postal_code: str, city: str, region_hint: str) -> list[str]:
    """Queries from most to least precise, duplicates removed."""
    variants: list[str] = []
    sanitized = sanitize_address(address)
    number, street = extract_street_number(sanitized)

    if sanitized:
        variants.append(f"{sanitized}, {postal_code} {city}, France")
    if address.strip() and address != sanitized:
        variants.append(f"{address}, {postal_code} {city}, France")
    if number and street:
        variants.append(f"{street}, {postal_code} {city}, France")
    variants.append(f"{postal_code} {city}, France")
    variants.append(f"{city}, {region_hint}, France")

    unique: list[str] = []
    for variant in variants:
        variant = _squash(variant)
        if variant not in unique:
            unique.append(variant)
    return unique
