"""
Values -- Immutable configuration value objects shared across layers.

Responsibility:
    Provides the user-editable configuration shapes consumed by the
    scoring engine and the import normalization pipeline: grading
    categories and metrics, the grading rule that bundles them, the
    canonical system field set, and the cleansing toggles.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.
    Imported by srm_engines, srm_ingestion, srm_config and srm_services.

Invariants enforced:
    - Every value object is a frozen dataclass; editing produces a new
      instance (see ``GradingRule.replace_category``).
    - ``GradingRule.from_dict`` never raises for malformed entries:
      missing ``min_score``/``weight`` read as 0, non-list sections read
      as empty.  Strict parsing lives in ``srm_config.loader``.
    - Metric weights are arbitrary non-negative numbers; they are not
      required to sum to 100 and are normalized at evaluation time.

Failure modes:
    - None at construction; evaluation degrades to the unclassified label.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

# Label returned when a rule has no categories at all.
UNCLASSIFIED = "未分级"


class SystemField(str, Enum):
    """Canonical supplier fields an import column can be mapped to."""

    SUPPLIER_NAME = "supplier_name"
    SOCIAL_CREDIT_CODE = "social_credit_code"
    CONTACT_NAME = "contact_name"
    CONTACT_PHONE = "contact_phone"
    CONTACT_EMAIL = "contact_email"
    BANK_NAME = "bank_name"
    BANK_BRANCH = "bank_branch"
    BANK_ACCOUNT_NAME = "bank_account_name"
    BANK_ACCOUNT_NO = "bank_account_no"
    INVOICE_TITLE = "invoice_title"


SYSTEM_FIELD_LABELS: dict[SystemField, str] = {
    SystemField.SUPPLIER_NAME: "供应商名称",
    SystemField.SOCIAL_CREDIT_CODE: "统一社会信用代码",
    SystemField.CONTACT_NAME: "联系人姓名",
    SystemField.CONTACT_PHONE: "联系人手机",
    SystemField.CONTACT_EMAIL: "联系人邮箱",
    SystemField.BANK_NAME: "开户银行",
    SystemField.BANK_BRANCH: "开户支行",
    SystemField.BANK_ACCOUNT_NAME: "账户名称",
    SystemField.BANK_ACCOUNT_NO: "银行账号",
    SystemField.INVOICE_TITLE: "发票抬头",
}

# Field keys in declaration order; used for column ordering on export.
SYSTEM_FIELDS: tuple[str, ...] = tuple(f.value for f in SystemField)


def is_system_field(key: str | None) -> bool:
    """True if ``key`` names a canonical system field."""
    return key in SYSTEM_FIELDS


def _as_number(value: Any) -> float:
    """Read a loosely-typed numeric config value; anything unusable is 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    try:
        number = float(str(value).strip() or 0)
    except ValueError:
        return 0
    return number if math.isfinite(number) else 0


# =============================================================================
# Grading rule
# =============================================================================


@dataclass(frozen=True)
class GradingCategory:
    """A named tier with the minimum composite score that qualifies for it."""

    key: str
    name: str
    min_score: float = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GradingCategory:
        key = str(data.get("key") or data.get("name") or "")
        return cls(
            key=key,
            name=str(data.get("name") or key),
            min_score=_as_number(data.get("min_score", data.get("minScore"))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "name": self.name, "min_score": self.min_score}


@dataclass(frozen=True)
class GradingMetric:
    """A scored metric and its raw (un-normalized) weight."""

    key: str
    name: str
    weight: float = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GradingMetric:
        key = str(data.get("key") or "")
        return cls(
            key=key,
            name=str(data.get("name") or key),
            weight=_as_number(data.get("weight")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "name": self.name, "weight": self.weight}


@dataclass(frozen=True)
class GradingRule:
    """
    Categories plus weighted metrics.

    Contract:
        Categories are kept in declaration order; the scoring engine sorts
        them by ``min_score`` at evaluation time.
    Non-goals:
        - Does not require weights to sum to 100.
        - Does not require categories to be pre-sorted.
    """

    categories: tuple[GradingCategory, ...] = ()
    metrics: tuple[GradingMetric, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> GradingRule:
        if not isinstance(data, Mapping):
            return cls()
        raw_categories = data.get("categories")
        raw_metrics = data.get("metrics")
        categories = tuple(
            GradingCategory.from_dict(c)
            for c in (raw_categories if isinstance(raw_categories, list) else [])
            if isinstance(c, Mapping)
        )
        metrics = tuple(
            GradingMetric.from_dict(m)
            for m in (raw_metrics if isinstance(raw_metrics, list) else [])
            if isinstance(m, Mapping)
        )
        return cls(categories=categories, metrics=metrics)

    def to_dict(self) -> dict[str, Any]:
        return {
            "categories": [c.to_dict() for c in self.categories],
            "metrics": [m.to_dict() for m in self.metrics],
        }

    @property
    def total_weight(self) -> float:
        return sum(m.weight for m in self.metrics)

    def replace_category(self, index: int, **changes: Any) -> GradingRule:
        categories = list(self.categories)
        categories[index] = replace(categories[index], **changes)
        return replace(self, categories=tuple(categories))

    def replace_metric(self, metric_key: str, **changes: Any) -> GradingRule:
        metrics = tuple(
            replace(m, **changes) if m.key == metric_key else m
            for m in self.metrics
        )
        return replace(self, metrics=metrics)


# =============================================================================
# Cleansing toggles
# =============================================================================


@dataclass(frozen=True)
class CleansingConfig:
    """Independently toggled cleansing steps plus the dedup key."""

    trim_all: bool = True
    uppercase_code: bool = True
    normalize_phone: bool = True
    remove_duplicates: bool = True
    dedup_key: str = SystemField.SOCIAL_CREDIT_CODE.value
    validate_email: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> CleansingConfig:
        """Toggles that are not real booleans (e.g. the string "false") keep their default."""
        if not data:
            return cls()
        defaults = cls()

        def toggle(name: str) -> bool:
            value = data.get(name)
            return value if isinstance(value, bool) else getattr(defaults, name)

        return cls(
            trim_all=toggle("trim_all"),
            uppercase_code=toggle("uppercase_code"),
            normalize_phone=toggle("normalize_phone"),
            remove_duplicates=toggle("remove_duplicates"),
            dedup_key=str(data.get("dedup_key", defaults.dedup_key) or ""),
            validate_email=toggle("validate_email"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "trim_all": self.trim_all,
            "uppercase_code": self.uppercase_code,
            "normalize_phone": self.normalize_phone,
            "remove_duplicates": self.remove_duplicates,
            "dedup_key": self.dedup_key,
            "validate_email": self.validate_email,
        }
