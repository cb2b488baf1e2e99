"""
Cleansing and deduplication of materialized import records.

Each cleansing step is toggled independently by CleansingConfig:
    - trim_all: strip surrounding whitespace from every string value.
    - uppercase_code: upper-case the social credit code.
    - normalize_phone: keep digits only, at most 11.
    - validate_email: blank malformed e-mail addresses (counted).

Deduplication keeps the first record per dedup-key value; records with
an empty key are always kept. ZERO I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from srm_kernel.domain.values import CleansingConfig, SystemField

PHONE_MAX_DIGITS = 11

_NON_DIGITS = re.compile(r"\D+")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_CODE_FIELD = SystemField.SOCIAL_CREDIT_CODE.value
_PHONE_FIELD = SystemField.CONTACT_PHONE.value
_EMAIL_FIELD = SystemField.CONTACT_EMAIL.value


@dataclass(frozen=True)
class CleansedRecord:
    """A cleansed record and whether its e-mail was blanked."""

    record: dict[str, Any]
    email_rejected: bool = False


@dataclass(frozen=True)
class DedupResult:
    records: tuple[dict[str, Any], ...]
    removed_count: int


def normalize_phone(value: Any) -> str:
    return _NON_DIGITS.sub("", str(value))[:PHONE_MAX_DIGITS]


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and _EMAIL.match(value) is not None


def cleanse_record(record: Mapping[str, Any], config: CleansingConfig) -> CleansedRecord:
    """Apply the enabled cleansing steps to a copy of ``record``."""
    cleaned = dict(record)

    if config.trim_all:
        for key, value in cleaned.items():
            if isinstance(value, str):
                cleaned[key] = value.strip()

    if config.uppercase_code and cleaned.get(_CODE_FIELD):
        cleaned[_CODE_FIELD] = str(cleaned[_CODE_FIELD]).upper()

    if config.normalize_phone and cleaned.get(_PHONE_FIELD):
        cleaned[_PHONE_FIELD] = normalize_phone(cleaned[_PHONE_FIELD])

    rejected = False
    if config.validate_email and cleaned.get(_EMAIL_FIELD):
        if not is_valid_email(cleaned[_EMAIL_FIELD]):
            cleaned[_EMAIL_FIELD] = ""
            rejected = True

    return CleansedRecord(record=cleaned, email_rejected=rejected)


def deduplicate(records: Iterable[Mapping[str, Any]], dedup_key: str) -> DedupResult:
    """
    Stable first-occurrence-wins deduplication on ``dedup_key``.

    A record whose key is missing or empty is always kept.
    """
    seen: set[Any] = set()
    kept: list[dict[str, Any]] = []
    removed = 0
    for record in records:
        key = record.get(dedup_key)
        if not key:
            kept.append(dict(record))
            continue
        marker = key if isinstance(key, str) else str(key)
        if marker in seen:
            removed += 1
            continue
        seen.add(marker)
        kept.append(dict(record))
    return DedupResult(records=tuple(kept), removed_count=removed)
