"""
srm_ingestion -- Import normalization for supplier master data.

Maps arbitrary tabular headers onto the canonical system fields, cleanses
values and deduplicates rows. Consumes and produces plain header-first
tables; reading and writing spreadsheet files is left to the caller.

Architecture:
    srm_ingestion/ is a top-level package. It imports srm_kernel and the
    engine tracer only; nothing below srm_services imports from it.
"""

from srm_ingestion.cleansing import cleanse_record, deduplicate, is_valid_email
from srm_ingestion.demo import TEMPLATE_HEADERS, generate_demo_table, template_table
from srm_ingestion.domain.types import HeaderRule, ImportFieldMapping, NormalizationResult
from srm_ingestion.mapping.engine import HEADER_RULES, auto_map_headers, match_header
from srm_ingestion.pipeline import normalize_and_dedup, split_table

__all__ = [
    "HEADER_RULES",
    "TEMPLATE_HEADERS",
    "HeaderRule",
    "ImportFieldMapping",
    "NormalizationResult",
    "auto_map_headers",
    "cleanse_record",
    "deduplicate",
    "generate_demo_table",
    "is_valid_email",
    "match_header",
    "normalize_and_dedup",
    "split_table",
    "template_table",
]
