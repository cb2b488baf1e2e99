"""
Pytest fixtures for the SRM engine test suite.

Provides:
- Structured logging configured for the session, LogContext cleared per test
- captured_logs: parsed JSON log records emitted during a test
- memory_repository / sql_repository: RepositoryGateway implementations
- srm_config: the packaged default configuration
- AS_OF: fixed reference date so date-relative data is reproducible
"""

import json
import logging
from datetime import date
from io import StringIO

import pytest

from srm_config import get_active_config
from srm_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from srm_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from srm_kernel.repository import InMemoryRepository, SqlRepository

AS_OF = date(2025, 6, 30)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture srm_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            normalize_and_dedup(table)
            logs = captured_logs()
            assert any(r["message"] == "normalization_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("srm_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Repository fixtures
# =============================================================================


@pytest.fixture
def memory_repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def sql_repository():
    """SqlRepository over a fresh in-memory SQLite database."""
    init_engine_from_url("sqlite://")
    create_tables()
    yield SqlRepository(get_session_factory())
    drop_tables()
    reset_engine()


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Both gateway implementations, for contract tests."""
    if request.param == "memory":
        return request.getfixturevalue("memory_repository")
    return request.getfixturevalue("sql_repository")


# =============================================================================
# Configuration fixtures
# =============================================================================


@pytest.fixture(scope="session")
def srm_config():
    return get_active_config()


@pytest.fixture
def as_of() -> date:
    return AS_OF
