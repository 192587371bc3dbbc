import pytest

from evolvinggraphs import AttributeEvolvingGraph, EvolvingGraph


@pytest.fixture
def small_directed():
    """Four nodes, two timestamps, four directed edges."""
    g = EvolvingGraph(directed=True)
    g.add_edge(1, 2, 1)
    g.add_edge(2, 3, 1)
    g.add_edge(2, 3, 2)
    g.add_edge(2, 4, 2)
    return g


@pytest.fixture
def closeness_graph():
    """Undirected attribute graph over months."""
    g = AttributeEvolvingGraph(directed=False)
    g.add_edge("a", "b", "Jan", {"closeness": 0.2})
    g.add_edge("a", "b", "Feb", {"closeness": 0.8})
    g.add_edge("a", "c", "Jan", {"closeness": 0.7})
    g.add_edge("a", "c", "Feb", {"closeness": 0.2})
    g.add_edge("b", "c", "Jan", {"closeness": 0.5})
    g.add_edge("b", "c", "Feb", {"closeness": 0.5})
    return g


@pytest.fixture
def seven_node_graph():
    """Undirected 7-node, 3-timestamp communication graph (Grindrod-style)."""
    g = EvolvingGraph(directed=False)
    g.add_edges_from(
        [
            ("a", "b", 1),
            ("b", "g", 1),
            ("c", "d", 1),
            ("g", "e", 2),
            ("c", "f", 2),
            ("d", "f", 2),
            ("e", "f", 3),
            ("a", "c", 3),
            ("b", "d", 3),
        ]
    )
    return g


@pytest.fixture
def tmpdir_fixture(tmp_path):
    return tmp_path
