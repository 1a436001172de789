"""Pytest configuration and shared fixtures."""

import pytest

from tests.helpers import FakeSession, InMemoryLedger, patch_repositories


@pytest.fixture
def ledger():
    """In-memory ledger patched in place of every repository the engine uses."""
    with patch_repositories(InMemoryLedger()) as ledger:
        yield ledger


@pytest.fixture
def session(ledger):
    """Fake session bound to the ledger."""
    return FakeSession(ledger)
