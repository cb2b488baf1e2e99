"""
srm_ingestion.domain.types -- Pure frozen dataclasses for the import pipeline.

ZERO I/O. Imports only from srm_kernel (domain values, exceptions).

Types:
    - HeaderRule: one row of the ordered header keyword table.
    - ImportFieldMapping: raw header -> canonical system field.
    - NormalizationResult: output of normalize_and_dedup().
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from srm_kernel.domain.values import SYSTEM_FIELDS, is_system_field
from srm_kernel.exceptions import UnknownSystemFieldError


# =============================================================================
# Header keyword rules
# =============================================================================


@dataclass(frozen=True)
class HeaderRule:
    """
    Keyword rule mapping a header to a system field.

    A lower-cased header matches when every group in ``all_of`` has at
    least one keyword contained in it, and no keyword of ``none_of`` is.
    """

    field: str
    all_of: tuple[tuple[str, ...], ...]
    none_of: tuple[str, ...] = ()

    def matches(self, header: str) -> bool:
        if any(word in header for word in self.none_of):
            return False
        return all(any(word in header for word in group) for group in self.all_of)


# =============================================================================
# Field mapping
# =============================================================================


@dataclass(frozen=True)
class ImportFieldMapping:
    """
    Immutable header -> field assignment, in header order.

    A header maps to at most one field; several headers may map to the
    same field (the later header wins during row materialization).
    ``None`` means the header is not imported.
    """

    entries: tuple[tuple[str, str | None], ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[Any, Any] | None) -> ImportFieldMapping:
        """Tolerant constructor: targets that are not system fields are dropped."""
        if not data:
            return cls()
        entries = []
        for header, target in data.items():
            target = target if isinstance(target, str) and is_system_field(target) else None
            entries.append(("" if header is None else str(header), target))
        return cls(entries=tuple(entries))

    @classmethod
    def identity(cls, fields: Iterable[str] = SYSTEM_FIELDS) -> ImportFieldMapping:
        """Every system field key maps to itself; re-imports ``to_table()`` output."""
        return cls(entries=tuple((f, f) for f in fields))

    def get(self, header: str) -> str | None:
        for name, target in self.entries:
            if name == header:
                return target
        return None

    def override(self, header: str, target: str | None) -> ImportFieldMapping:
        """
        Return a copy with ``header`` assigned to ``target``.

        ``None`` or ``""`` unmaps the header.

        Raises:
            UnknownSystemFieldError: ``target`` is not a system field.
        """
        if target is not None and target != "" and not is_system_field(target):
            raise UnknownSystemFieldError(str(target))
        target = target or None
        if any(name == header for name, _ in self.entries):
            entries = tuple(
                (name, target if name == header else current)
                for name, current in self.entries
            )
        else:
            entries = self.entries + ((header, target),)
        return ImportFieldMapping(entries=entries)

    def mapped_count(self, headers: Iterable[str]) -> int:
        """Number of ``headers`` positions that map to a field."""
        return sum(1 for h in headers if self.get(h))

    def to_dict(self) -> dict[str, str | None]:
        return dict(self.entries)


# =============================================================================
# Result
# =============================================================================


@dataclass(frozen=True)
class NormalizationResult:
    """
    Cleansed canonical rows plus counters.

    Contract:
        ``rows`` keep input order; ``removed_count`` is the number of rows
        dropped as duplicates; ``mapped_field_count`` counts header
        columns with a mapping.
    """

    rows: tuple[dict[str, Any], ...] = ()
    removed_count: int = 0
    mapped_field_count: int = 0
    raw_count: int = 0
    invalid_email_count: int = 0

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def columns(self) -> tuple[str, ...]:
        """Fields present in any row, in system field order."""
        present = {key for row in self.rows for key in row}
        ordered = [f for f in SYSTEM_FIELDS if f in present]
        extras = sorted(present.difference(SYSTEM_FIELDS))
        return tuple(ordered + extras)

    def to_table(self) -> list[list[Any]]:
        """Header-first table of the rows; missing cells are ``""``."""
        columns = self.columns()
        table: list[list[Any]] = [list(columns)]
        for row in self.rows:
            table.append([row.get(c, "") for c in columns])
        return table

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": [dict(r) for r in self.rows],
            "removed_count": self.removed_count,
            "mapped_field_count": self.mapped_field_count,
            "raw_count": self.raw_count,
            "invalid_email_count": self.invalid_email_count,
        }
