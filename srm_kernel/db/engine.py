"""
Module: srm_kernel.db.engine
Responsibility: Open and close the SQL store behind ``SqlRepository``.
    One process-wide engine; ``SqlRepository`` receives the session
    factory and runs its own short transactions.
Architecture position: Kernel > DB.  May import from db/base.py and models/.

Invariants enforced:
    - SQLite URLs share a single connection (StaticPool), so an in-memory
      store lives until close_store()/reset_engine().
    - Server URLs pool connections with pre-ping.
    - Opening a store again disposes the previous engine first.

Failure modes:
    - RuntimeError from get_session_factory()/create_tables()/drop_tables()
      before init_engine_from_url().
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from srm_kernel.logging_config import get_logger

logger = get_logger("db.engine")

DEFAULT_STORE_URL = "sqlite://"

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _build_engine(database_url: str, echo: bool) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        echo=echo,
        poolclass=QueuePool,
        pool_pre_ping=True,
    )


def init_engine_from_url(database_url: str = DEFAULT_STORE_URL, echo: bool = False) -> Engine:
    """Open the store at ``database_url``, replacing any store already open."""
    global _engine, _SessionFactory

    reset_engine()
    _engine = _build_engine(database_url, echo)
    # Repository reads hand out deep copies, so nothing needs refreshing.
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info("sql_store_opened", extra={"dialect": _engine.dialect.name})
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _SessionFactory is None:
        raise RuntimeError("SQL store not open. Call init_engine_from_url() first.")
    return _SessionFactory


def _require_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("SQL store not open. Call init_engine_from_url() first.")
    return _engine


def create_tables() -> None:
    """Create the ``srm_kv_entries`` table if it does not exist."""
    from srm_kernel.db.base import Base
    import srm_kernel.models  # noqa: F401  (registers KeyValueEntry)

    Base.metadata.create_all(_require_engine())


def drop_tables() -> None:
    from srm_kernel.db.base import Base

    Base.metadata.drop_all(_require_engine())


def reset_engine() -> None:
    """Dispose the engine; an in-memory SQLite store is discarded with it."""
    global _engine, _SessionFactory

    if _engine is not None:
        dialect = _engine.dialect.name
        _engine.dispose()
        logger.info("sql_store_closed", extra={"dialect": dialect})
    _engine = None
    _SessionFactory = None
