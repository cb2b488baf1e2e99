"""Pure domain value objects shared by engines, ingestion and services."""

from srm_kernel.domain.values import (
    SYSTEM_FIELD_LABELS,
    SYSTEM_FIELDS,
    UNCLASSIFIED,
    CleansingConfig,
    GradingCategory,
    GradingMetric,
    GradingRule,
    SystemField,
    is_system_field,
)

__all__ = [
    "SYSTEM_FIELD_LABELS",
    "SYSTEM_FIELDS",
    "UNCLASSIFIED",
    "CleansingConfig",
    "GradingCategory",
    "GradingMetric",
    "GradingRule",
    "SystemField",
    "is_system_field",
]
