"""
Repository gateway over a persisted key-value store.

Contract:
    RepositoryGateway.get() returns a detached copy of the stored JSON
    document, or the default when the key is absent.
    RepositoryGateway.put() replaces the stored document (last write wins).

Architecture: srm_kernel. Engines and ingestion never import this module;
services receive a gateway by injection.
"""

from __future__ import annotations

import copy
import json
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from srm_kernel.exceptions import RepositoryValueError
from srm_kernel.logging_config import get_logger
from srm_kernel.models.kv_entry import KeyValueEntry

logger = get_logger("repository")


@runtime_checkable
class RepositoryGateway(Protocol):
    """Read/write of JSON documents addressed by (collection, key)."""

    def get(self, collection: str, key: str, default: Any = None) -> Any:
        """Return a copy of the stored document, or ``default``."""
        ...

    def put(self, collection: str, key: str, value: Any) -> None:
        """Store ``value``, replacing any previous document."""
        ...

    def delete(self, collection: str, key: str) -> bool:
        """Remove the document; True if something was removed."""
        ...

    def keys(self, collection: str) -> list[str]:
        """Keys present in ``collection``, sorted."""
        ...


def _to_json(collection: str, key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise RepositoryValueError(collection, key, str(exc)) from exc


class InMemoryRepository:
    """
    Dict-backed gateway. Stores JSON round-tripped copies so neither the
    writer nor a reader can mutate what is stored.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, str]] = {}

    def get(self, collection: str, key: str, default: Any = None) -> Any:
        raw = self._data.get(collection, {}).get(key)
        if raw is None:
            return copy.deepcopy(default)
        return json.loads(raw)

    def put(self, collection: str, key: str, value: Any) -> None:
        encoded = _to_json(collection, key, value)
        self._data.setdefault(collection, {})[key] = encoded
        logger.debug("repository_put", extra={"collection": collection, "key": key})

    def delete(self, collection: str, key: str) -> bool:
        removed = self._data.get(collection, {}).pop(key, None)
        return removed is not None

    def keys(self, collection: str) -> list[str]:
        return sorted(self._data.get(collection, {}))


class SqlRepository:
    """
    SQLAlchemy-backed gateway using the ``srm_kv_entries`` table.

    Each call runs in its own short transaction.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def _find(self, session: Session, collection: str, key: str) -> KeyValueEntry | None:
        stmt = select(KeyValueEntry).where(
            KeyValueEntry.collection == collection,
            KeyValueEntry.key == key,
        )
        return session.execute(stmt).scalar_one_or_none()

    def get(self, collection: str, key: str, default: Any = None) -> Any:
        with self._session_factory() as session:
            entry = self._find(session, collection, key)
            if entry is None:
                return copy.deepcopy(default)
            return copy.deepcopy(entry.value)

    def put(self, collection: str, key: str, value: Any) -> None:
        # Validate and detach from the caller's objects in one step.
        document = json.loads(_to_json(collection, key, value))
        with self._session_factory() as session, session.begin():
            entry = self._find(session, collection, key)
            if entry is None:
                session.add(KeyValueEntry(collection=collection, key=key, value=document))
            else:
                entry.value = document
        logger.debug("repository_put", extra={"collection": collection, "key": key})

    def delete(self, collection: str, key: str) -> bool:
        with self._session_factory() as session, session.begin():
            result = session.execute(
                delete(KeyValueEntry).where(
                    KeyValueEntry.collection == collection,
                    KeyValueEntry.key == key,
                )
            )
            return result.rowcount > 0

    def keys(self, collection: str) -> list[str]:
        with self._session_factory() as session:
            stmt = (
                select(KeyValueEntry.key)
                .where(KeyValueEntry.collection == collection)
                .order_by(KeyValueEntry.key)
            )
            return list(session.execute(stmt).scalars().all())
