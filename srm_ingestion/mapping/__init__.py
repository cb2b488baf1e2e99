"""Header auto-mapping and row materialization."""

from srm_ingestion.mapping.engine import (
    HEADER_RULES,
    auto_map_headers,
    match_header,
    materialize_row,
    materialize_rows,
)

__all__ = [
    "HEADER_RULES",
    "auto_map_headers",
    "match_header",
    "materialize_row",
    "materialize_rows",
]
