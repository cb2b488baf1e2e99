"""
srm_services.preprocessing -- Interactive import preprocessing session.

Responsibility:
    Holds one import in progress: the raw table, the suggested header
    mapping and the caller's per-header overrides, the cleansing toggles,
    the last preview, and the submit of the cleansed result to the
    repository under ``srm_preprocess_last``.

Architecture position:
    Services -- stateful orchestration over srm_ingestion.  The pipeline
    itself stays pure; only ``submit`` touches the repository.

Invariants enforced:
    - Loading a table replaces the mapping with a fresh auto mapping and
      discards any previous preview.
    - Changing the mapping or the toggles discards the preview, so a
      submitted result always matches the current settings.
    - Overrides only target system fields.

Failure modes:
    - UnknownSystemFieldError for an override or dedup key that is not a
      system field.
    - TypeError from ``update_options`` for an unknown toggle name.
    - RepositoryValueError propagates from ``submit``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any
from uuid import uuid4

from srm_config import get_active_config
from srm_config.schema import SrmConfig
from srm_ingestion.demo import generate_demo_table
from srm_ingestion.domain.types import ImportFieldMapping, NormalizationResult
from srm_ingestion.mapping.engine import auto_map_headers
from srm_ingestion.pipeline import normalize_and_dedup, split_table
from srm_kernel.domain.values import CleansingConfig, is_system_field
from srm_kernel.exceptions import UnknownSystemFieldError
from srm_kernel.logging_config import LogContext, get_logger
from srm_kernel.repository import RepositoryGateway
from srm_services.storage_keys import PREPROCESS_LAST_KEY, SRM_COLLECTION

logger = get_logger("services.preprocessing")


class PreprocessingSession:
    """
    One import in progress.

    Contract:
        ``load_table`` -> optional ``set_mapping`` / ``update_options``
        -> ``preview`` -> ``submit``.

        The cleansing toggles start from ``config.cleansing`` unless
        ``options`` is given.  Records logged by the session, and by the
        pipeline during ``preview``, carry its ``session_id``.
    """

    def __init__(
        self,
        config: SrmConfig | None = None,
        *,
        options: CleansingConfig | None = None,
        session_id: str | None = None,
    ):
        if options is None:
            options = (config or get_active_config()).cleansing
        self._options = options
        self.session_id = session_id or uuid4().hex[:12]
        self._table: list[Any] = []
        self._headers: list[str] = []
        self._raw_count = 0
        self._mapping = ImportFieldMapping()
        self._preview: NormalizationResult | None = None

    # -- loading ---------------------------------------------------------------

    def load_table(self, table: Any) -> int:
        """
        Load a header-first table and auto-map its headers.

        Returns:
            Number of data rows (0 for empty or malformed input).
        """
        headers, rows = split_table(table)
        self._table = [headers, *rows] if headers else []
        self._headers = headers
        self._raw_count = len(rows)
        self._mapping = auto_map_headers(headers)
        self._preview = None
        with LogContext.bind(session_id=self.session_id):
            logger.info(
                "preprocess_table_loaded",
                extra={
                    "raw_count": self._raw_count,
                    "header_count": len(headers),
                    "mapped_field_count": self.mapped_field_count,
                },
            )
        return self._raw_count

    def load_demo(self, count: int = 300) -> int:
        return self.load_table(generate_demo_table(count))

    # -- state -----------------------------------------------------------------

    @property
    def headers(self) -> tuple[str, ...]:
        return tuple(self._headers)

    @property
    def raw_count(self) -> int:
        return self._raw_count

    @property
    def mapping(self) -> ImportFieldMapping:
        return self._mapping

    @property
    def options(self) -> CleansingConfig:
        return self._options

    @property
    def mapped_field_count(self) -> int:
        return self._mapping.mapped_count(self._headers)

    @property
    def mapped_progress(self) -> int:
        """Percentage of header columns that are mapped."""
        if not self._headers:
            return 0
        return round(self.mapped_field_count / len(self._headers) * 100)

    @property
    def last_preview(self) -> NormalizationResult | None:
        return self._preview

    # -- edits -----------------------------------------------------------------

    def set_mapping(self, header: str, field_key: str | None) -> None:
        """Map ``header`` to ``field_key``; None or "" unmaps it."""
        self._mapping = self._mapping.override(header, field_key)
        self._preview = None

    def update_options(self, **changes: Any) -> None:
        dedup_key = changes.get("dedup_key")
        if dedup_key and not is_system_field(dedup_key):
            raise UnknownSystemFieldError(str(dedup_key))
        self._options = replace(self._options, **changes)
        self._preview = None

    # -- run -------------------------------------------------------------------

    def preview(self) -> NormalizationResult:
        with LogContext.bind(session_id=self.session_id):
            self._preview = normalize_and_dedup(self._table, self._mapping, self._options)
        return self._preview

    def submit(self, repository: RepositoryGateway) -> bool:
        """
        Persist mapping, options and previewed rows.

        Returns:
            False (and writes nothing) when there is no non-empty preview.
        """
        with LogContext.bind(session_id=self.session_id):
            if self._preview is None or not self._preview.rows:
                logger.info("preprocess_submit_skipped", extra={"reason": "no_preview"})
                return False
            repository.put(
                SRM_COLLECTION,
                PREPROCESS_LAST_KEY,
                {
                    "mapping": self._mapping.to_dict(),
                    "options": self._options.to_dict(),
                    "rows": [dict(r) for r in self._preview.rows],
                },
            )
            logger.info(
                "preprocess_submitted",
                extra={
                    "row_count": self._preview.row_count,
                    "removed_count": self._preview.removed_count,
                },
            )
        return True
