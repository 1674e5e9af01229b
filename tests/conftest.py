"""Shared fixtures and helpers for graph tests."""

import pathlib
import shutil
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]  # project root
sys.path.insert(0, str(ROOT))

from densegraph.core.graph import Graph  # noqa: E402

# ======================================================================
# FIXTURES
# ======================================================================


@pytest.fixture
def directed_graph():
    """Directed path A -> B -> C plus a back edge C -> A."""
    G = Graph(directed=True)
    G.add_vertex("A", 1.0)
    G.add_vertex("B", 2.0)
    G.add_vertex("C", 3.0)

    G.add_edge("A", "B", 1.5)
    G.add_edge("B", "C", 2.0)
    G.add_edge("C", "A", 0.5)

    return G


@pytest.fixture
def undirected_graph():
    """Undirected triangle-less graph with a self-loop on D."""
    G = Graph(directed=False, no_edge_value=-1.0)
    for v in ("A", "B", "C", "D"):
        G.add_vertex(v)

    G.add_edge("A", "B", 0.0)
    G.add_edge("B", "C", 4.0)
    G.add_edge("D", "D", 7.0)

    return G


@pytest.fixture
def tmpdir_fixture():
    """Temporary directory for file I/O (input/output) tests."""
    tmpdir = Path(tempfile.mkdtemp())
    yield tmpdir
    shutil.rmtree(tmpdir)


# ======================================================================
# HELPERS
# ======================================================================


def assert_index_consistent(G):
    """Assert the name/index tables and the matrix agree."""
    names = G.vertices()
    assert G.matrix.shape == (G.order, G.order), "Adjacency store is not square"
    assert len(names) == G.order, "Name list length differs from order"
    for i, name in enumerate(names):
        assert G.vertex_index(name) == i, f"Vertex {name} maps to {G.vertex_index(name)}, expected {i}"
    assert G.idx.is_contiguous()


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
