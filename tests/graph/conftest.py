"""Pytest fixtures for graph tests."""

import tempfile

import pytest

from familyroots.graph.graphlite_store import GraphLiteStore
from familyroots.graph.store import InMemoryStore


@pytest.fixture
def memory_store():
    """In-memory store."""
    return InMemoryStore()


@pytest.fixture
def graphlite_store():
    """GraphLite store in a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield GraphLiteStore(
            persons_db_path=f"{tmpdir}/persons.db",
            graph_db_path=f"{tmpdir}/family_graph.db",
        )
