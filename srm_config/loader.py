"""
Configuration Loader (``srm_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into typed
``srm_config.schema`` dataclass instances.  Runtime callers go through
``srm_config.get_active_config()`` rather than calling this directly.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on srm_kernel value
objects and exceptions only; never on engines or services.

Invariants enforced
-------------------
* Parsing is strict: required keys raise ``KeyError``; the tolerant
  ``GradingRule.from_dict`` is for user-edited data, not for files.
* Metric weights are non-negative numbers; category thresholds are
  numbers.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys in parsed dict  -> ``KeyError`` propagates.
* Empty category/metric list -> ``InvalidGradingRuleError``.
* Negative or non-numeric weight -> ``InvalidWeightError``.
* Unknown dedup key -> ``UnknownSystemFieldError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from srm_config.schema import SeedingConfig, SrmConfig
from srm_kernel.domain.values import (
    CleansingConfig,
    GradingCategory,
    GradingMetric,
    GradingRule,
    is_system_field,
)
from srm_kernel.exceptions import (
    InvalidGradingRuleError,
    InvalidWeightError,
    UnknownSystemFieldError,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidGradingRuleError(f"{what} must be a number, got {value!r}")
    return value


def parse_category(data: dict[str, Any]) -> GradingCategory:
    """Parse a GradingCategory; ``key``, ``name`` and ``min_score`` are required."""
    return GradingCategory(
        key=str(data["key"]),
        name=str(data["name"]),
        min_score=_number(data["min_score"], f"min_score of category {data['key']!r}"),
    )


def parse_metric(data: dict[str, Any]) -> GradingMetric:
    """Parse a GradingMetric; ``key``, ``name`` and ``weight`` are required."""
    weight = data["weight"]
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0:
        raise InvalidWeightError(str(data["key"]), weight)
    return GradingMetric(key=str(data["key"]), name=str(data["name"]), weight=weight)


def parse_grading_rule(data: dict[str, Any]) -> GradingRule:
    categories = tuple(parse_category(c) for c in data["categories"])
    metrics = tuple(parse_metric(m) for m in data["metrics"])
    if not categories:
        raise InvalidGradingRuleError("at least one category is required")
    if not metrics:
        raise InvalidGradingRuleError("at least one metric is required")
    return GradingRule(categories=categories, metrics=metrics)


def parse_cleansing(data: dict[str, Any] | None) -> CleansingConfig:
    config = CleansingConfig.from_dict(data)
    if config.dedup_key and not is_system_field(config.dedup_key):
        raise UnknownSystemFieldError(config.dedup_key)
    return config


def parse_seeding(data: dict[str, Any] | None) -> SeedingConfig:
    if not data:
        return SeedingConfig()
    defaults = SeedingConfig()
    seeding = SeedingConfig(
        supplier_count=int(data.get("supplier_count", defaults.supplier_count)),
        qualified_supplier_count=int(
            data.get("qualified_supplier_count", defaults.qualified_supplier_count)
        ),
        qualifications_min=int(data.get("qualifications_min", defaults.qualifications_min)),
        qualifications_max=int(data.get("qualifications_max", defaults.qualifications_max)),
        default_qualification_count=int(
            data.get("default_qualification_count", defaults.default_qualification_count)
        ),
        purchase_order_count=int(
            data.get("purchase_order_count", defaults.purchase_order_count)
        ),
    )
    if seeding.qualifications_max < seeding.qualifications_min:
        raise ValueError(
            f"qualifications_max ({seeding.qualifications_max}) is below "
            f"qualifications_min ({seeding.qualifications_min})"
        )
    return seeding


def parse_config(data: dict[str, Any]) -> SrmConfig:
    """
    Parse the root configuration dict.

    Raises:
        KeyError: ``config_id``, ``version`` or ``grading_rule`` missing.
    """
    return SrmConfig(
        config_id=str(data["config_id"]),
        version=int(data["version"]),
        grading_rule=parse_grading_rule(data["grading_rule"]),
        cleansing=parse_cleansing(data.get("cleansing")),
        default_rating=int(data.get("default_rating", 70)),
        seeding=parse_seeding(data.get("seeding")),
        region_codes={str(k): str(v) for k, v in (data.get("region_codes") or {}).items()},
        checksum=compute_checksum(data),
    )


def load_config(path: Path) -> SrmConfig:
    return parse_config(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str, ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
