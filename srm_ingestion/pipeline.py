"""
ImportNormalizationPipeline: raw table -> cleansed, deduplicated rows.

Steps:
    1. Header detection: the first row is the header row.
    2. Field mapping: caller-supplied, else auto-mapped from headers.
    3. Row materialization (later header wins on a shared field).
    4. Cleansing (toggle-gated; see srm_ingestion.cleansing).
    5. Deduplication on the configured key, first occurrence wins.

Malformed or empty input yields a result with zero rows; nothing here
raises for bad data. ZERO I/O beyond logging.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from srm_engines.tracer import traced_engine
from srm_ingestion.cleansing import cleanse_record, deduplicate
from srm_ingestion.domain.types import ImportFieldMapping, NormalizationResult
from srm_ingestion.mapping.engine import auto_map_headers, header_text, materialize_rows
from srm_kernel.domain.values import CleansingConfig
from srm_kernel.logging_config import get_logger

logger = get_logger("ingestion.pipeline")

_ROW_TYPES = (list, tuple, Mapping)


def split_table(table: Any) -> tuple[list[str], list[Sequence[Any] | Mapping[str, Any]]]:
    """
    Split a header-first table into (headers, data rows).

    Returns ``([], [])`` for anything that is not a non-empty sequence
    whose first row is a sequence. Data rows that are neither sequences
    nor mappings are dropped.
    """
    if not isinstance(table, (list, tuple)) or not table:
        return [], []
    header_row = table[0]
    if not isinstance(header_row, (list, tuple)):
        return [], []
    headers = [header_text(h) for h in header_row]
    rows = [row for row in table[1:] if isinstance(row, _ROW_TYPES)]
    dropped = len(table) - 1 - len(rows)
    if dropped:
        logger.warning("import_rows_dropped", extra={"dropped": dropped})
    return headers, rows


def resolve_mapping(
    mapping: ImportFieldMapping | Mapping[str, Any] | None,
    headers: Sequence[str],
) -> ImportFieldMapping:
    if isinstance(mapping, ImportFieldMapping):
        return mapping
    if mapping is None:
        return auto_map_headers(headers)
    return ImportFieldMapping.from_dict(mapping)


def resolve_config(config: CleansingConfig | Mapping[str, Any] | None) -> CleansingConfig:
    if isinstance(config, CleansingConfig):
        return config
    return CleansingConfig.from_dict(config)


@traced_engine("import_normalization", "1.0", fingerprint_fields=("mapping", "config"))
def normalize_and_dedup(
    raw_rows: Any,
    mapping: ImportFieldMapping | Mapping[str, Any] | None = None,
    config: CleansingConfig | Mapping[str, Any] | None = None,
) -> NormalizationResult:
    """
    Run the full import normalization over a header-first table.

    Args:
        raw_rows: Table whose first row holds the headers. Data rows are
            positional sequences or mappings keyed by header.
        mapping: Header -> field mapping; auto-mapped when None.
        config: Cleansing toggles; defaults when None.

    Returns:
        NormalizationResult with cleansed rows in input order.
    """
    headers, rows = split_table(raw_rows)
    if not headers:
        logger.info("normalization_empty_input")
        return NormalizationResult()

    field_mapping = resolve_mapping(mapping, headers)
    cleansing = resolve_config(config)

    records = materialize_rows(headers, rows, field_mapping)
    cleansed = [cleanse_record(r, cleansing) for r in records]
    invalid_emails = sum(1 for c in cleansed if c.email_rejected)
    output = [c.record for c in cleansed]

    removed = 0
    if cleansing.remove_duplicates and cleansing.dedup_key:
        dedup = deduplicate(output, cleansing.dedup_key)
        output = list(dedup.records)
        removed = dedup.removed_count

    result = NormalizationResult(
        rows=tuple(output),
        removed_count=removed,
        mapped_field_count=field_mapping.mapped_count(headers),
        raw_count=len(rows),
        invalid_email_count=invalid_emails,
    )

    logger.info(
        "normalization_completed",
        extra={
            "raw_count": result.raw_count,
            "row_count": result.row_count,
            "removed_count": result.removed_count,
            "mapped_field_count": result.mapped_field_count,
            "invalid_email_count": result.invalid_email_count,
        },
    )
    return result
