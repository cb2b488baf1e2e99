"""
SRM configuration schema.

Typed, frozen shape of the YAML configuration. The loader parses YAML
into these types; services consume them through ``get_active_config()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from srm_kernel.domain.values import CleansingConfig, GradingRule

# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeedingConfig:
    """Sizes of the one-time demo catalogue written to an empty repository."""

    supplier_count: int = 80
    qualified_supplier_count: int = 60  # first N suppliers get qualifications
    qualifications_min: int = 10
    qualifications_max: int = 16
    default_qualification_count: int = 20
    purchase_order_count: int = 120

    def qualification_count(self, supplier_index: int) -> int:
        """Records for the supplier at ``supplier_index``: min..max, cycling."""
        span = self.qualifications_max - self.qualifications_min + 1
        return self.qualifications_min + supplier_index % span


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SrmConfig:
    """Root configuration object."""

    config_id: str
    version: int
    grading_rule: GradingRule
    cleansing: CleansingConfig = field(default_factory=CleansingConfig)
    default_rating: int = 70
    seeding: SeedingConfig = field(default_factory=SeedingConfig)
    region_codes: dict[str, str] = field(default_factory=dict)
    checksum: str = ""

    def region_table(self) -> dict[str, str] | None:
        """Region overrides for the identifier synthesizer, or None for built-ins."""
        return dict(self.region_codes) if self.region_codes else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "config_id": self.config_id,
            "version": self.version,
            "grading_rule": self.grading_rule.to_dict(),
            "cleansing": self.cleansing.to_dict(),
            "default_rating": self.default_rating,
            "seeding": {
                "supplier_count": self.seeding.supplier_count,
                "qualified_supplier_count": self.seeding.qualified_supplier_count,
                "qualifications_min": self.seeding.qualifications_min,
                "qualifications_max": self.seeding.qualifications_max,
                "default_qualification_count": self.seeding.default_qualification_count,
                "purchase_order_count": self.seeding.purchase_order_count,
            },
            "region_codes": dict(self.region_codes),
        }
