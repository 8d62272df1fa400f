"""Local fixtures for observability tests."""

from __future__ import annotations

import pytest

from context_reduction.observability.logging import (
    clear_context,
    clear_global_context,
    reset_logging,
)


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Restore structlog, stdlib logging and log contexts after each test."""
    yield
    reset_logging()
    clear_context()
    clear_global_context()
