"""
Module: srm_kernel.db.base
Responsibility: Declarative base for the SQLAlchemy models backing the
    key-value repository.  Provides the UUID primary key convention and a
    type annotation map for consistent column types.
Architecture position: Kernel > DB.  Lowest-level import target within
    the kernel DB layer.  MUST NOT import from models/ or outer layers.

Invariants enforced:
    - UUID primary keys stored as String(36) for cross-database portability.
    - datetime columns are always timezone-aware.
    - dict/list annotations map to the portable JSON column type.
"""

from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID type stored as String(36) for cross-database portability.

    Guarantees:
        - process_bind_param: UUID -> str on INSERT/UPDATE.
        - process_result_value: str -> UUID on SELECT.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return PyUUID(value)
        return None


class Base(DeclarativeBase):
    """
    Declarative base for all SRM models.

    Guarantees:
        - id is always a uuid4-generated UUID stored as String(36).
        - datetime maps to DateTime(timezone=True).
        - dict[str, Any] maps to JSON.
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
        dict[str, Any]: JSON,
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )
