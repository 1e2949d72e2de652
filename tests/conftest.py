from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.graph_builder import GraphBuilder, Workspace


@pytest.fixture
def graph_builder() -> GraphBuilder:
    """Provide an empty package graph builder."""
    return GraphBuilder()


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    """Provide a throwaway repository rooted at the pytest tmp_path."""
    return Workspace(tmp_path)
