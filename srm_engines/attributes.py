"""
Module: srm_engines.attributes
Responsibility:
    Derive correlated, bounded synthetic performance metrics for an
    entity from its base rating.  The three metrics share the base but
    are salted and spread independently, so they move together without
    being identical.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - metric = round_half_up(clamp(base + (u - 0.5) * spread, lo, hi))
      where u = unit_random(seed, salt).
    - Every metric is an int within its bounds, whatever the base.

Failure modes:
    - None.  A base outside 0-100 is simply clamped by the bounds.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from srm_engines.hasher import unit_random
from srm_engines.tracer import traced_engine


@dataclass(frozen=True)
class MetricSpec:
    """Salt, spread and clamp bounds for one synthetic metric."""

    key: str
    salt: str
    spread: float
    lower: int
    upper: int


METRIC_SPECS: tuple[MetricSpec, ...] = (
    MetricSpec("on_time_delivery", "onTime", 20, 55, 99),
    MetricSpec("quality_score", "quality", 18, 55, 98),
    MetricSpec("compliance_score", "compliance", 22, 55, 99),
)


@dataclass(frozen=True)
class SyntheticMetricSet:
    """Synthetic on-time, quality and compliance metrics for one entity."""

    on_time_delivery: int
    quality_score: int
    compliance_score: int

    def as_row(self) -> dict[str, int]:
        """Metric values keyed by metric key, ready for the scoring engine."""
        return {
            "on_time_delivery": self.on_time_delivery,
            "quality_score": self.quality_score,
            "compliance_score": self.compliance_score,
        }


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _derive(seed: object, base_rating: float, spec: MetricSpec) -> int:
    raw = base_rating + (unit_random(seed, spec.salt) - 0.5) * spec.spread
    return _round_half_up(min(spec.upper, max(spec.lower, raw)))


@traced_engine("attributes", "1.0", fingerprint_fields=("seed", "base_rating"))
def synthesize_metrics(seed: object, base_rating: float) -> SyntheticMetricSet:
    """Deterministic metric set for ``seed`` centred on ``base_rating``."""
    values = {spec.key: _derive(seed, base_rating, spec) for spec in METRIC_SPECS}
    return SyntheticMetricSet(**values)
