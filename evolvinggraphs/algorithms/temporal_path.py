"""Shortest time-respecting paths over the implicit time-expanded graph.

States are ``(node, timestamp)`` pairs. From ``(u, t)`` two unit-cost moves
exist:

- **hop** to ``(v, t)`` for every edge ``u -> v`` at ``t``;
- **wait** to ``(u, t')`` where ``t'`` is the next timestamp of the graph.

Breadth-first search over these moves gives the minimum number of
transitions. States are expanded lazily from the edge store, so the
``nodes x timestamps`` product is never built. Among equally short paths the
one discovered first is returned: hops in edge insertion order, then the
wait. That choice is stable but carries no meaning.

Unreachable targets are an answer, not a failure: distances come back as
:data:`UNREACHABLE` (``math.inf``) and paths as ``None``.
"""

from __future__ import annotations

import math
import time
from typing import NamedTuple, Optional

from ..errors import SearchTimeoutError

UNREACHABLE = math.inf


class State(NamedTuple):
    """A ``(node, time)`` vertex of the time-expanded graph (external labels)."""

    node: object
    time: object


def _resolve(g, state):
    try:
        node, t = state
    except (TypeError, ValueError):
        raise ValueError(f"state must be a (node, timestamp) pair, got {state!r}") from None
    return g.node_index.id_of(node), g.timestamp_index.id_of(t)


def _as_state(g, key) -> State:
    return State(g.node_index.idx_to_label[key[0]], g.timestamp_index.idx_to_value[key[1]])


def _successors(store, u, t, horizon):
    """Successor keys of ``(u, t)`` restricted to timestamps ``<= horizon``."""
    for v, _ in store.iter_neighbors(u, t):
        yield (v, t)
    if t < horizon:
        yield (u, t + 1)


def _search(g, source, target, deadline):
    """Level-synchronous BFS; returns the parent map or ``None`` if unreachable."""
    src = _resolve(g, source)
    dst = _resolve(g, target)
    if src == dst:
        return src, dst, {src: None}
    # time never runs backwards
    if dst[1] < src[1]:
        return src, dst, None

    store = g.edge_store
    horizon = dst[1]
    stop_at = None if deadline is None else time.monotonic() + float(deadline)

    parent = {src: None}
    frontier = [src]
    while frontier:
        if stop_at is not None and time.monotonic() > stop_at:
            raise SearchTimeoutError(
                f"temporal search from {source!r} to {target!r} exceeded {deadline}s"
            )
        nxt = []
        for state in frontier:
            u, t = state
            for succ in _successors(store, u, t, horizon):
                if succ in parent:
                    continue
                parent[succ] = state
                if succ == dst:
                    return src, dst, parent
                nxt.append(succ)
        frontier = nxt
    return src, dst, None


def shortest_temporal_path(g, source, target, *, deadline: Optional[float] = None):
    """Shortest time-respecting walk between two states.

    Parameters
    ----------
    g : EvolvingGraph
    source, target : tuple
        ``(node, timestamp)`` pairs given with external labels.
    deadline : float, optional
        Wall-clock budget in seconds, checked between BFS levels.

    Returns
    -------
    list[State] or None
        States from ``source`` to ``target`` inclusive (a path with ``k``
        transitions has ``k + 1`` states), or ``None`` if no path exists.

    Raises
    ------
    NodeNotFoundError, TimestampNotFoundError
        If a label of either state is unknown.
    SearchTimeoutError
        If ``deadline`` elapses.

    """
    _src, dst, parent = _search(g, source, target, deadline)
    if parent is None:
        return None
    path = []
    key = dst
    while key is not None:
        path.append(_as_state(g, key))
        key = parent[key]
    path.reverse()
    return path


def shortest_temporal_distance(g, source, target, *, deadline: Optional[float] = None):
    """Number of transitions on a shortest path, or :data:`UNREACHABLE`."""
    path = shortest_temporal_path(g, source, target, deadline=deadline)
    if path is None:
        return UNREACHABLE
    return len(path) - 1


def is_reachable(g, source, target, *, deadline: Optional[float] = None) -> bool:
    _src, _dst, parent = _search(g, source, target, deadline)
    return parent is not None


def temporal_bfs(g, node, t):
    """Distances from ``(node, t)`` to every reachable state.

    Returns
    -------
    dict[State, int]
        Insertion ordered by discovery (so by non-decreasing distance).

    """
    src = _resolve(g, (node, t))
    store = g.edge_store
    horizon = g.timestamp_count() - 1
    dist = {src: 0}
    frontier = [src]
    level = 0
    while frontier:
        level += 1
        nxt = []
        for u, ts in frontier:
            for succ in _successors(store, u, ts, horizon):
                if succ not in dist:
                    dist[succ] = level
                    nxt.append(succ)
        frontier = nxt
    return {_as_state(g, key): d for key, d in dist.items()}


def forward_neighbors(g, node, t):
    """Out-states of ``(node, t)``: hop targets (first-seen order), then the wait."""
    u, ts = _resolve(g, (node, t))
    seen = set()
    keys = []
    for succ in _successors(g.edge_store, u, ts, g.timestamp_count() - 1):
        if succ not in seen:
            seen.add(succ)
            keys.append(succ)
    return [_as_state(g, key) for key in keys]


def backward_neighbors(g, node, t):
    """In-states of ``(node, t)``: hop sources (first-seen order), then the previous wait."""
    v, ts = _resolve(g, (node, t))
    seen = set()
    keys = []
    for u, _ in g.edge_store.predecessors(v, ts):
        if (u, ts) not in seen:
            seen.add((u, ts))
            keys.append((u, ts))
    prev = g.timestamp_index.previous_id(ts)
    if prev is not None:
        keys.append((v, prev))
    return [_as_state(g, key) for key in keys]


__all__ = [
    "UNREACHABLE",
    "State",
    "shortest_temporal_path",
    "shortest_temporal_distance",
    "is_reachable",
    "temporal_bfs",
    "forward_neighbors",
    "backward_neighbors",
]
