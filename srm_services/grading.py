"""
srm_services.grading -- Editable grading rule and supplier grading.

Responsibility:
    ``GradingRuleBook`` holds the user-editable grading rule (categories
    and weighted metrics), applies explicit setter edits, and persists
    the rule on submit.  ``GradingService`` synthesizes performance
    metrics for suppliers, scores them and classifies them into tiers.

Architecture position:
    Services -- orchestration over engines + kernel.
    Receives a RepositoryGateway by constructor injection; the engines
    it calls never see the repository.

Invariants enforced:
    - Edits go through setters only; each edit replaces the immutable
      GradingRule held by the book.
    - Weights are non-negative numbers; a total other than 100 is a
      warning, never an error, because scoring normalizes weights.
    - Metrics for a supplier are a pure function of its id and rating,
      so grading the same catalogue twice gives identical results.

Failure modes:
    - CategoryNotFoundError for an out-of-range category index.
    - MetricNotFoundError for an unknown metric key.
    - InvalidWeightError for a negative or non-numeric weight.
    - InvalidGradingRuleError for a non-numeric threshold or a blank
      category name.
    - RepositoryValueError propagates from ``submit``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from srm_config.schema import SrmConfig
from srm_engines.attributes import SyntheticMetricSet, synthesize_metrics
from srm_engines.scoring import GradedRow, grade_row, tier_distribution
from srm_kernel.domain.values import GradingCategory, GradingMetric, GradingRule
from srm_kernel.exceptions import (
    CategoryNotFoundError,
    InvalidGradingRuleError,
    InvalidWeightError,
    MetricNotFoundError,
)
from srm_kernel.logging_config import LogContext, get_logger
from srm_kernel.repository import RepositoryGateway
from srm_services.storage_keys import CATEGORY_RULES_KEY, SRM_COLLECTION, SUPPLIERS_KEY

logger = get_logger("services.grading")

RECOMMENDED_WEIGHT_TOTAL = 100


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class GradingRuleBook:
    """
    Editable grading rule.

    Contract:
        Built from a GradingRule (usually the stored one, else the
        configured default).  Setters validate and replace the rule;
        ``submit`` persists it under ``srm_category_rules``.
    """

    def __init__(self, rule: GradingRule):
        self._rule = rule

    @classmethod
    def load(cls, repository: RepositoryGateway, default: GradingRule) -> GradingRuleBook:
        """The stored rule, or ``default`` when nothing usable is stored."""
        stored = repository.get(SRM_COLLECTION, CATEGORY_RULES_KEY)
        rule = GradingRule.from_dict(stored)
        if not rule.categories and not rule.metrics:
            return cls(default)
        return cls(rule)

    @property
    def rule(self) -> GradingRule:
        return self._rule

    @property
    def categories(self) -> tuple[GradingCategory, ...]:
        return self._rule.categories

    @property
    def metrics(self) -> tuple[GradingMetric, ...]:
        return self._rule.metrics

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._rule.categories):
            raise CategoryNotFoundError(index, len(self._rule.categories))

    def set_category_name(self, index: int, name: str) -> None:
        self._check_index(index)
        if not str(name).strip():
            raise InvalidGradingRuleError(f"category {index} needs a name")
        self._rule = self._rule.replace_category(index, name=str(name).strip())

    def set_category_min_score(self, index: int, min_score: float) -> None:
        self._check_index(index)
        if not _is_number(min_score):
            raise InvalidGradingRuleError(f"min_score must be a number, got {min_score!r}")
        self._rule = self._rule.replace_category(index, min_score=min_score)

    def set_metric_weight(self, metric_key: str, weight: float) -> None:
        if all(m.key != metric_key for m in self._rule.metrics):
            raise MetricNotFoundError(metric_key)
        if not _is_number(weight) or weight < 0:
            raise InvalidWeightError(metric_key, weight)
        self._rule = self._rule.replace_metric(metric_key, weight=weight)

    @property
    def total_weight(self) -> float:
        return self._rule.total_weight

    def weight_total_is_advisory(self) -> bool:
        """
        True when the weights do not add up to 100.

        The total is then only a recommendation: scoring normalizes the
        weights anyway.  Logs a warning so the editor can surface it.
        """
        total = self.total_weight
        if total == RECOMMENDED_WEIGHT_TOTAL:
            return False
        logger.warning(
            "grading_weight_total_not_recommended",
            extra={"total_weight": total, "recommended": RECOMMENDED_WEIGHT_TOTAL},
        )
        return True

    def snapshot(self) -> dict[str, Any]:
        return self._rule.to_dict()

    def submit(self, repository: RepositoryGateway) -> None:
        repository.put(SRM_COLLECTION, CATEGORY_RULES_KEY, self.snapshot())
        logger.info(
            "grading_rule_submitted",
            extra={
                "category_count": len(self._rule.categories),
                "metric_count": len(self._rule.metrics),
                "total_weight": self.total_weight,
            },
        )


@dataclass(frozen=True)
class SupplierGrade:
    """Graded supplier: synthetic metrics, composite score and tier."""

    supplier_id: str
    supplier_name: str
    metrics: SyntheticMetricSet
    graded: GradedRow

    @property
    def total_score(self) -> float:
        return self.graded.total_score

    @property
    def category(self) -> str:
        return self.graded.category

    def to_dict(self) -> dict[str, Any]:
        return {
            "supplier_id": self.supplier_id,
            "supplier_name": self.supplier_name,
            **self.metrics.as_row(),
            "total_score": self.total_score,
            "category": self.category,
        }


@dataclass(frozen=True)
class GradingReport:
    grades: tuple[SupplierGrade, ...] = ()
    distribution: dict[str, int] = field(default_factory=dict)


class GradingService:
    """
    Grades suppliers against the current rule.

    Contract:
        Receives a RepositoryGateway and SrmConfig via constructor
        injection.  Reads suppliers and the stored rule; never writes.
    """

    def __init__(self, repository: RepositoryGateway, config: SrmConfig):
        self._repository = repository
        self._config = config

    def current_rule(self) -> GradingRule:
        return GradingRuleBook.load(self._repository, self._config.grading_rule).rule

    def _base_rating(self, supplier: Mapping[str, Any]) -> float:
        rating = supplier.get("rating_score")
        if _is_number(rating) and rating:
            return rating
        return self._config.default_rating

    def grade_supplier(self, supplier: Mapping[str, Any], rule: GradingRule) -> SupplierGrade:
        supplier_id = str(supplier.get("id", ""))
        with LogContext.bind(supplier_id=supplier_id or None):
            metrics = synthesize_metrics(supplier_id, self._base_rating(supplier))
            graded = grade_row(metrics.as_row(), rule)
        return SupplierGrade(
            supplier_id=supplier_id,
            supplier_name=str(supplier.get("supplier_name", "")),
            metrics=metrics,
            graded=graded,
        )

    def grade_suppliers(
        self,
        suppliers: Iterable[Mapping[str, Any]],
        rule: GradingRule | None = None,
    ) -> GradingReport:
        """Grade ``suppliers`` in order; ``rule`` defaults to the current rule."""
        if rule is None:
            rule = self.current_rule()
        grades = tuple(self.grade_supplier(s, rule) for s in suppliers)
        distribution = tier_distribution((g.graded for g in grades), rule)
        logger.info(
            "suppliers_graded",
            extra={"supplier_count": len(grades), "distribution": distribution},
        )
        return GradingReport(grades=grades, distribution=distribution)

    def grade_catalogue(self, limit: int | None = None) -> GradingReport:
        """Grade the stored supplier catalogue (first ``limit`` entries)."""
        suppliers = self._repository.get(SRM_COLLECTION, SUPPLIERS_KEY, default=[]) or []
        if limit is not None:
            suppliers = suppliers[:limit]
        return self.grade_suppliers(suppliers)
