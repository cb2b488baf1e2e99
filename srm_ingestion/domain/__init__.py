"""Pure import-pipeline types."""

from srm_ingestion.domain.types import HeaderRule, ImportFieldMapping, NormalizationResult

__all__ = ["HeaderRule", "ImportFieldMapping", "NormalizationResult"]
