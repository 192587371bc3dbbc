"""Random evolving graphs for experiments and tests."""

from __future__ import annotations

import numpy as np

from .core.graph import EvolvingGraph


def random_evolving_graph(
    n_nodes: int,
    n_timestamps: int,
    p: float = 0.5,
    *,
    directed: bool = True,
    seed=None,
) -> EvolvingGraph:
    """Erdős–Rényi edges drawn independently at every timestamp.

    Nodes are labelled ``0..n_nodes-1`` and timestamps ``1..n_timestamps``.
    Self-loops are excluded; for undirected graphs each unordered pair is drawn
    once per timestamp. Timestamps and nodes that end up with no edge do not
    appear in the graph.

    Parameters
    ----------
    n_nodes, n_timestamps : int
        Must be non-negative.
    p : float
        Edge probability in ``[0, 1]``.
    directed : bool, default True
    seed : int | numpy.random.Generator | None
        Passed to ``numpy.random.default_rng``.

    Returns
    -------
    EvolvingGraph

    """
    if n_nodes < 0 or n_timestamps < 0:
        raise ValueError("n_nodes and n_timestamps must be non-negative")
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must lie in [0, 1], got {p}")
    rng = np.random.default_rng(seed)

    g = EvolvingGraph(directed)
    off_diagonal = ~np.eye(n_nodes, dtype=bool)
    if not directed:
        off_diagonal = np.triu(off_diagonal)
    for t in range(1, n_timestamps + 1):
        draws = (rng.random((n_nodes, n_nodes)) < p) & off_diagonal
        for i, j in zip(*np.nonzero(draws)):
            g.add_edge(int(i), int(j), t)
    return g


__all__ = ["random_evolving_graph"]
