# tests/conftest.py

"""Shared pytest fixtures for the engine tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from price_comparator.config.settings import Settings


@pytest.fixture(autouse=True)
def pinned_reference_date() -> Generator[None, None, None]:
    """Pin "today" so date-less requests are deterministic."""
    with patch.object(Settings, "REFERENCE_DATE", "2025-05-01"):
        yield
