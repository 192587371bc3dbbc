try:
    import networkx as nx
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "Optional dependency 'networkx' is not installed. "
        "Install with: pip install evolvinggraphs[networkx]"
    ) from e

import numbers

from ..core.graph import AttributeEvolvingGraph, EvolvingGraph


def to_nx(graph: "EvolvingGraph", t=None, *, time_attr: str = "time"):
    """
    Export an evolving graph to a NetworkX multigraph.

    Parameters
    ----------
    graph : EvolvingGraph
        Source graph.
    t : optional
        If given, export the snapshot at this timestamp; otherwise every edge,
        each tagged with its timestamp under ``time_attr``.
    time_attr : str
        Edge attribute name holding the timestamp.

    Returns
    -------
    networkx.MultiGraph | networkx.MultiDiGraph
        Directed graphs give a MultiDiGraph. Undirected graphs give a MultiGraph
        with one edge per insertion. All nodes are added, isolated or not.

    """
    G = nx.MultiDiGraph() if graph.directed else nx.MultiGraph()
    G.graph.update(graph.graph_attributes)
    G.add_nodes_from(graph.nodes())
    for e in graph.logical_edges(t):
        attrs = dict(e.attributes or {})
        attrs[time_attr] = e.time
        G.add_edge(e.source, e.target, **attrs)
    return G


def from_nx(nxG, *, time_attr: str = "time", attributes=None, directed=None):
    """
    Build an evolving graph from a NetworkX graph whose edges carry timestamps.

    Parameters
    ----------
    nxG : networkx.Graph
        Any NetworkX graph; every edge must carry ``time_attr``.
    time_attr : str
        Edge attribute holding the timestamp.
    attributes : list[str] | 'auto' | None
        Edge attributes to keep. ``'auto'`` keeps every numeric one. Any kept
        attribute yields an AttributeEvolvingGraph.
    directed : bool, optional
        Defaults to ``nxG.is_directed()``.

    Returns
    -------
    EvolvingGraph | AttributeEvolvingGraph

    Raises
    ------
    ValueError
        If an edge lacks ``time_attr``, or lacks every kept attribute while
        others carry some.

    Notes
    -----
    Isolated NetworkX nodes are dropped: evolving-graph nodes only come from
    edges.

    """
    if directed is None:
        directed = nxG.is_directed()

    rows = []
    for u, v, data in nxG.edges(data=True):
        if time_attr not in data:
            raise ValueError(f"Edge ({u!r}, {v!r}) has no {time_attr!r} attribute")
        if attributes == "auto":
            attrs = {
                k: val
                for k, val in data.items()
                if k != time_attr and isinstance(val, numbers.Real) and not isinstance(val, bool)
            }
        elif attributes:
            attrs = {k: data[k] for k in attributes if k in data}
        else:
            attrs = None
        rows.append((u, v, data[time_attr], attrs))

    keep_attrs = any(r[3] for r in rows)
    G = AttributeEvolvingGraph(directed) if keep_attrs else EvolvingGraph(directed)
    G.graph_attributes.update(nxG.graph)
    G.add_edges_from(r if keep_attrs else r[:3] for r in rows)
    return G


__all__ = ["to_nx", "from_nx"]
