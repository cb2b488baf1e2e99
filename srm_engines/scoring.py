"""
Module: srm_engines.scoring
Responsibility:
    Composite scoring and tier classification:

    - ``normalize_weights``: raw metric weights -> fractions of their sum.
    - ``compute_score``: weighted sum of a row's metric values, rounded
      half-up to 2 decimals.
    - ``map_category``: first category (by ``min_score`` descending,
      stable on declaration order) whose threshold the score reaches.
    - ``grade_row`` / ``tier_distribution``: convenience wrappers used by
      the grading service.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import srm_kernel/domain/values, srm_kernel.logging_config
    and sibling engine modules.

Invariants enforced:
    - Weights need not sum to 100; an all-zero weight set normalizes
      against 1, giving a score of 0 rather than a division error.
    - A score equal to a category's ``min_score`` belongs to that
      category (boundary is inclusive).
    - Tier mapping is monotonic: a higher score never maps to a category
      with a lower ``min_score``.
    - Ties on ``min_score`` resolve to the first declared category.

Failure modes:
    - Missing metric values read as 0 silently.
    - Unparsable metric values read as 0 and log
      ``metric_value_unparsable``.
    - No categories at all -> ``UNCLASSIFIED``.  Nothing here raises for
      bad data.

Usage:
    from srm_engines.scoring import compute_score, map_category
    from srm_kernel.domain.values import GradingRule

    rule = GradingRule.from_dict(config_dict)
    score = compute_score(row, rule.metrics)
    tier = map_category(score, rule.categories)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from srm_engines.tracer import traced_engine
from srm_kernel.domain.values import (
    UNCLASSIFIED,
    GradingCategory,
    GradingMetric,
    GradingRule,
)
from srm_kernel.logging_config import get_logger

logger = get_logger("engines.scoring")

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class NormalizedMetric:
    """A metric with its weight expressed as a fraction of the total."""

    key: str
    name: str
    weight: float
    normalized_weight: float


@dataclass(frozen=True)
class GradedRow:
    """
    A row of metric values with its composite score and tier.

    Contract:
        ``values`` holds the metric values exactly as given to the
        scorer; ``category`` is a category *name*.
    """

    values: Mapping[str, Any] = field(default_factory=dict)
    total_score: float = 0.0
    category: str = UNCLASSIFIED

    def to_dict(self) -> dict[str, Any]:
        return {**self.values, "total_score": self.total_score, "category": self.category}


def round2(value: float) -> float:
    """Round half-up to 2 decimal places."""
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def _rule_entries(entries: Any) -> list[Any]:
    # A bare string or mapping is not a list of entries.
    if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Iterable):
        return []
    return list(entries)


def _as_metrics(metrics: Any) -> list[GradingMetric]:
    return [
        m if isinstance(m, GradingMetric) else GradingMetric.from_dict(m)
        for m in _rule_entries(metrics)
        if isinstance(m, (GradingMetric, Mapping))
    ]


def _as_categories(categories: Any) -> list[GradingCategory]:
    return [
        c if isinstance(c, GradingCategory) else GradingCategory.from_dict(c)
        for c in _rule_entries(categories)
        if isinstance(c, (GradingCategory, Mapping))
    ]


def normalize_weights(
    metrics: Iterable[GradingMetric | Mapping[str, Any]],
) -> tuple[NormalizedMetric, ...]:
    """
    Express each weight as a fraction of the weight sum.

    Postconditions:
        For a non-zero sum the normalized weights sum to 1 (up to float
        error).  For an all-zero sum every normalized weight is 0.
        Entries that are neither a GradingMetric nor a mapping are skipped.
    """
    resolved = _as_metrics(metrics)
    total = sum(m.weight for m in resolved) or 1
    return tuple(
        NormalizedMetric(
            key=m.key,
            name=m.name,
            weight=m.weight,
            normalized_weight=m.weight / total,
        )
        for m in resolved
    )


def _metric_value(row: Mapping[str, Any], key: str) -> float:
    value = row.get(key)
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    try:
        parsed = float(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError):
        parsed = math.nan
    if math.isfinite(parsed):
        return parsed
    logger.warning(
        "metric_value_unparsable",
        extra={"metric_key": key, "value": str(value)},
    )
    return 0


def compute_score(
    row: Mapping[str, Any],
    metrics: Iterable[GradingMetric | Mapping[str, Any]],
) -> float:
    """Weighted composite score of ``row``, rounded half-up to 2 decimals."""
    if not isinstance(row, Mapping):
        row = {}
    score = sum(
        _metric_value(row, m.key) * m.normalized_weight
        for m in normalize_weights(metrics)
    )
    if not math.isfinite(score):
        logger.warning("score_not_finite", extra={"score": str(score)})
        return 0.0
    return round2(score)


def map_category(
    score: float,
    categories: Sequence[GradingCategory | Mapping[str, Any]] | None,
) -> str:
    """
    Name of the tier ``score`` falls into.

    Categories are ranked by ``min_score`` descending (stable, so the
    first declared wins a tie).  A score below every threshold gets the
    lowest category.  No usable categories (none, or only malformed
    entries) gives ``UNCLASSIFIED``.
    """
    resolved = _as_categories(categories)
    if not resolved:
        return UNCLASSIFIED
    if not isinstance(score, (int, float)) or not math.isfinite(score):
        score = 0
    ranked = sorted(
        resolved,
        key=lambda c: c.min_score,
        reverse=True,
    )
    for category in ranked:
        if category.min_score <= score:
            return category.name
    return ranked[-1].name


@traced_engine("scoring", "1.0", fingerprint_fields=("row", "rule"))
def grade_row(row: Mapping[str, Any], rule: GradingRule | Mapping[str, Any]) -> GradedRow:
    """Score ``row`` against ``rule`` and classify it; a raw rule dict is parsed leniently."""
    if not isinstance(rule, GradingRule):
        rule = GradingRule.from_dict(rule)
    if not isinstance(row, Mapping):
        row = {}
    score = compute_score(row, rule.metrics)
    return GradedRow(
        values=dict(row),
        total_score=score,
        category=map_category(score, rule.categories),
    )


def tier_distribution(graded: Iterable[GradedRow], rule: GradingRule) -> dict[str, int]:
    """
    Row count per category name.

    Every category of ``rule`` is present (ranked by ``min_score``
    descending), zero when empty; ``UNCLASSIFIED`` appears only when a
    row carries it.
    """
    ranked = sorted(rule.categories, key=lambda c: c.min_score, reverse=True)
    counts: dict[str, int] = {c.name: 0 for c in ranked}
    for row in graded:
        counts[row.category] = counts.get(row.category, 0) + 1
    return counts
