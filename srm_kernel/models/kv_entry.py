"""
Module: srm_kernel.models.kv_entry
Responsibility: ORM persistence for the key-value store behind
    ``SqlRepository``.  One row per (collection, key) pair holding an
    arbitrary JSON document.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - (collection, key) is unique; writes replace the stored document
      (last write wins).
    - updated_at moves forward on every replacement.

Failure modes:
    - IntegrityError on a concurrent insert of the same (collection, key)
      from two sessions; the repository does not retry.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from srm_kernel.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class KeyValueEntry(Base):
    """A stored JSON document addressed by collection and key."""

    __tablename__ = "srm_kv_entries"

    __table_args__ = (
        UniqueConstraint("collection", "key", name="uq_kv_collection_key"),
        Index("idx_kv_collection", "collection"),
    )

    collection: Mapped[str] = mapped_column(String(100), nullable=False)
    key: Mapped[str] = mapped_column(String(200), nullable=False)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry {self.collection}/{self.key}>"
