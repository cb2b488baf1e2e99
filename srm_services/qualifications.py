"""
srm_services.qualifications -- Supplier qualification ledger.

Responsibility:
    List, save, edit and generate qualification records per supplier,
    stored as ``{"items": [...]}`` under
    ``srm_qualifications_<supplier id or DEFAULT>``.

Architecture position:
    Services -- orchestration over srm_engines.qualification and the
    injected RepositoryGateway.

Invariants enforced:
    - Newly generated or added records go first in the ledger.
    - Generated numbering continues after the highest sequence number
      already in the ledger, so generated ids stay unique per supplier.
    - Expiry status is always computed against an explicit as-of date.

Failure modes:
    - KeyError / ValueError from ``QualificationRecord.from_dict`` when a
      stored record lacks an id or holds a non-ISO date.
    - RepositoryValueError propagates from writes.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import date

from srm_engines.qualification import (
    ExpiryStatus,
    QualificationRecord,
    classify_expiry,
    synthesize_qualifications,
)
from srm_kernel.logging_config import LogContext, get_logger
from srm_kernel.repository import RepositoryGateway
from srm_services.storage_keys import (
    DEFAULT_QUALIFICATION_OWNER,
    SRM_COLLECTION,
    qualifications_key,
)

logger = get_logger("services.qualifications")


def _next_index(existing: Iterable[QualificationRecord], owner: str) -> int:
    """Highest generated sequence number in use (or the ledger size, if larger)."""
    prefix = f"Q-{owner}-"
    records = list(existing)
    numbers = [
        int(r.id[len(prefix):])
        for r in records
        if r.id.startswith(prefix) and r.id[len(prefix):].isdigit()
    ]
    return max([len(records), *numbers])


class QualificationLedger:
    """Per-supplier qualification records in the repository."""

    def __init__(self, repository: RepositoryGateway):
        self._repository = repository

    def items(self, supplier_id: str | None) -> tuple[QualificationRecord, ...]:
        document = self._repository.get(
            SRM_COLLECTION, qualifications_key(supplier_id), default={"items": []}
        )
        raw_items = document.get("items") if isinstance(document, dict) else None
        return tuple(QualificationRecord.from_dict(i) for i in raw_items or [])

    def save(self, supplier_id: str | None, records: Iterable[QualificationRecord]) -> None:
        """Replace the supplier's ledger with ``records``."""
        items = [r.to_dict() for r in records]
        self._repository.put(SRM_COLLECTION, qualifications_key(supplier_id), {"items": items})
        with LogContext.bind(supplier_id=supplier_id or DEFAULT_QUALIFICATION_OWNER):
            logger.info("qualifications_saved", extra={"item_count": len(items)})

    def upsert(self, supplier_id: str | None, record: QualificationRecord) -> None:
        """Replace the record with the same id, or add it first."""
        existing = list(self.items(supplier_id))
        for i, current in enumerate(existing):
            if current.id == record.id:
                existing[i] = record
                break
        else:
            existing.insert(0, record)
        self.save(supplier_id, existing)

    def remove(self, supplier_id: str | None, record_id: str) -> bool:
        existing = self.items(supplier_id)
        kept = [r for r in existing if r.id != record_id]
        if len(kept) == len(existing):
            return False
        self.save(supplier_id, kept)
        return True

    def generate(self, supplier_id: str | None, as_of: date, count: int = 50) -> int:
        """
        Prepend ``count`` synthetic records.

        Returns:
            Number of records added.
        """
        existing = self.items(supplier_id)
        owner = supplier_id or DEFAULT_QUALIFICATION_OWNER
        start = _next_index(existing, owner)
        added = synthesize_qualifications(owner, count, as_of, start_index=start)
        self.save(supplier_id, (*added, *existing))
        return len(added)

    def filter_by_status(
        self,
        supplier_id: str | None,
        status: ExpiryStatus | str,
        as_of: date,
    ) -> tuple[QualificationRecord, ...]:
        wanted = ExpiryStatus(status)
        return tuple(
            r for r in self.items(supplier_id)
            if classify_expiry(r.expiry_date, as_of).status is wanted
        )

    def status_summary(self, supplier_id: str | None, as_of: date) -> dict[ExpiryStatus, int]:
        counts = Counter(
            classify_expiry(r.expiry_date, as_of).status for r in self.items(supplier_id)
        )
        return {status: counts.get(status, 0) for status in ExpiryStatus}
