"""Shared test configuration and pytest markers."""

import pytest

from services.xp_ledger import ledger


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: loads the real embedding model or calls Gemini (slow)"
    )


@pytest.fixture(autouse=True)
def _reset_ledger():
    """Start every test with empty XP accounts."""
    ledger.clear()
    yield
    ledger.clear()
