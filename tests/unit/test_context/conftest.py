"""Local fixtures for token estimation and chunking tests."""

from __future__ import annotations

from typing import List

import pytest

from context_reduction.transcript import Entry


def sized_entry(tokens: int, label: str = "") -> Entry:
    """Create a prompt whose estimated size is exactly ``tokens``."""
    text = (label + "x" * (tokens * 4))[: tokens * 4]
    return Entry.prompt(text)


@pytest.fixture
def hundred_token_entries() -> List[Entry]:
    """Ten entries of 100 estimated tokens each."""
    return [sized_entry(100, label=f"e{i}:") for i in range(10)]
