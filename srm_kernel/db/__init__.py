"""SQL store behind SqlRepository: declarative base and engine lifecycle."""

from srm_kernel.db.base import Base, UUIDString
from srm_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)

__all__ = [
    "Base",
    "UUIDString",
    "create_tables",
    "drop_tables",
    "get_session_factory",
    "init_engine_from_url",
    "reset_engine",
]
