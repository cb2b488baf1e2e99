"""
Module: srm_engines.qualification
Responsibility:
    Synthesize supplier qualification (licence/certificate) records with
    a realistic expiry distribution, and classify a record's expiry
    relative to an as-of date.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Purity: no clock access.  Every date is relative to the explicit
      ``as_of`` argument.
    - Expiry offsets follow a fixed distribution: 15% expired 1-30 days
      ago, 20% expiring within 1-30 days, 65% valid 31-365 days ahead.
    - ``classify_expiry`` boundaries: < 0 days expired, 0-30 expiring,
      > 30 valid.

Failure modes:
    - ValueError from ``QualificationRecord.from_dict`` when a stored
      date is not ISO formatted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Any

from srm_engines.hasher import unit_random
from srm_engines.tracer import traced_engine

QUALIFICATION_TYPES: tuple[str, ...] = (
    "营业执照",
    "药品经营许可证",
    "医疗器械经营许可证",
    "GSP认证",
    "开户许可证",
    "一般纳税人资格",
)

DEFAULT_ISSUER = "市场监管局"
ANNUAL_REVIEW_REMARK = "年审待提交"
EXPIRING_WINDOW_DAYS = 30

_EXPIRED_SHARE = 0.15
_EXPIRING_SHARE = 0.35  # cumulative


class ExpiryStatus(str, Enum):
    VALID = "valid"
    EXPIRING = "expiring"
    EXPIRED = "expired"


@dataclass(frozen=True)
class ExpiryAssessment:
    status: ExpiryStatus
    days_left: int


@dataclass(frozen=True)
class QualificationRecord:
    """One licence or certificate held by a supplier."""

    id: str
    type: str
    number: str
    issue_date: date
    expiry_date: date
    issuer: str = DEFAULT_ISSUER
    remark: str = ""
    attachments: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "number": self.number,
            "issue_date": self.issue_date.isoformat(),
            "expiry_date": self.expiry_date.isoformat(),
            "issuer": self.issuer,
            "remark": self.remark,
            "attachments": list(self.attachments),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QualificationRecord:
        return cls(
            id=str(data["id"]),
            type=str(data.get("type", "")),
            number=str(data.get("number", "")),
            issue_date=date.fromisoformat(data["issue_date"]),
            expiry_date=date.fromisoformat(data["expiry_date"]),
            issuer=str(data.get("issuer", DEFAULT_ISSUER)),
            remark=str(data.get("remark", "")),
            attachments=tuple(data.get("attachments") or ()),
        )


def sample_expiry_offset(seed: object, k: int) -> int:
    """Signed days from as-of to expiry for the k-th record of ``seed``."""
    r = unit_random(seed, k)
    if r < _EXPIRED_SHARE:
        return -1 - int(unit_random(seed, k + 7) * 30)
    if r < _EXPIRING_SHARE:
        return 1 + int(unit_random(seed, k + 19) * 30)
    return 31 + int(unit_random(seed, k + 37) * 335)


@traced_engine(
    "qualification", "1.0",
    fingerprint_fields=("supplier_id", "count", "as_of", "start_index"),
)
def synthesize_qualifications(
    supplier_id: str,
    count: int,
    as_of: date,
    start_index: int = 0,
) -> tuple[QualificationRecord, ...]:
    """
    ``count`` qualification records numbered from ``start_index + 1``.

    Passing the number of records a supplier already holds as
    ``start_index`` keeps ids and numbers unique when appending.
    """
    records = []
    for i in range(count):
        n = start_index + i + 1
        records.append(
            QualificationRecord(
                id=f"Q-{supplier_id}-{n}",
                type=QUALIFICATION_TYPES[n % len(QUALIFICATION_TYPES)],
                number=f"NO-{100000 + n}",
                issue_date=as_of - timedelta(days=365 + n % 500),
                expiry_date=as_of + timedelta(days=sample_expiry_offset(supplier_id, n)),
                remark=ANNUAL_REVIEW_REMARK if n % 11 == 0 else "",
            )
        )
    return tuple(records)


def classify_expiry(expiry_date: date, as_of: date) -> ExpiryAssessment:
    days = (expiry_date - as_of).days
    if days < 0:
        return ExpiryAssessment(ExpiryStatus.EXPIRED, days)
    if days <= EXPIRING_WINDOW_DAYS:
        return ExpiryAssessment(ExpiryStatus.EXPIRING, days)
    return ExpiryAssessment(ExpiryStatus.VALID, days)
