"""Append-only storage of time-stamped edges.

The store holds edges as internal ids only; label translation lives in
:class:`~evolvinggraphs.core.graph.EvolvingGraph`. Besides the
insertion-ordered sequence it maintains three secondary indices:

- ``(source, timestamp) -> [(target, attrs), ...]`` (out-adjacency)
- ``(target, timestamp) -> [(source, attrs), ...]`` (in-adjacency)
- ``timestamp -> [edge position, ...]``

All three are updated in O(1) amortized time by :meth:`EdgeStore.append`.
"""

from __future__ import annotations

from typing import NamedTuple, Optional


class TimeEdge(NamedTuple):
    """One materialized edge ``source -> target`` at ``timestamp`` (all ids)."""

    source: int
    target: int
    timestamp: int
    attributes: Optional[dict] = None


class EdgeStore:
    """Insertion-ordered multiset of :class:`TimeEdge` plus adjacency lookups."""

    def __init__(self):
        self._edges = []  # list[TimeEdge], insertion order
        self._out = {}  # (source, timestamp) -> list[(target, attrs)]
        self._in = {}  # (target, timestamp) -> list[(source, attrs)]
        self._by_time = []  # timestamp id -> list[int] positions in _edges

    def append(self, source: int, target: int, timestamp: int, attributes=None) -> TimeEdge:
        """Store one edge and index it.

        ``attributes`` is kept as given (callers pass a private copy).
        """
        edge = TimeEdge(source, target, timestamp, attributes)
        pos = len(self._edges)
        self._edges.append(edge)

        out = self._out.get((source, timestamp))
        if out is None:
            self._out[(source, timestamp)] = [(target, attributes)]
        else:
            out.append((target, attributes))

        inc = self._in.get((target, timestamp))
        if inc is None:
            self._in[(target, timestamp)] = [(source, attributes)]
        else:
            inc.append((source, attributes))

        while len(self._by_time) <= timestamp:
            self._by_time.append([])
        self._by_time[timestamp].append(pos)
        return edge

    def shift_timestamps(self, rank: int):
        """Renumber for a timestamp inserted at ``rank``: ids ``>= rank`` move up by one.

        O(E); only triggered by out-of-order timestamp insertion.
        """

        def bump(t):
            return t + 1 if t >= rank else t

        self._edges = [
            e if e.timestamp < rank else e._replace(timestamp=e.timestamp + 1)
            for e in self._edges
        ]
        self._out = {(node, bump(t)): lst for (node, t), lst in self._out.items()}
        self._in = {(node, bump(t)): lst for (node, t), lst in self._in.items()}
        if rank < len(self._by_time):
            self._by_time.insert(rank, [])

    def all(self) -> list[TimeEdge]:
        """All edges in insertion order."""
        return list(self._edges)

    def at(self, timestamp: int) -> list[TimeEdge]:
        """Edges at ``timestamp`` in insertion order."""
        if timestamp >= len(self._by_time):
            return []
        edges = self._edges
        return [edges[pos] for pos in self._by_time[timestamp]]

    def count_at(self, timestamp: int) -> int:
        if timestamp >= len(self._by_time):
            return 0
        return len(self._by_time[timestamp])

    def neighbors(self, source: int, timestamp: int) -> tuple:
        """``(target, attrs)`` pairs leaving ``source`` at ``timestamp``."""
        return tuple(self._out.get((source, timestamp), ()))

    def iter_neighbors(self, source: int, timestamp: int):
        """Iterate ``(target, attrs)`` pairs leaving ``source`` at ``timestamp`` without copying."""
        return iter(self._out.get((source, timestamp), ()))

    def predecessors(self, target: int, timestamp: int) -> tuple:
        """``(source, attrs)`` pairs entering ``target`` at ``timestamp``."""
        return tuple(self._in.get((target, timestamp), ()))

    def has_edge(self, source: int, target: int, timestamp: Optional[int] = None) -> bool:
        if timestamp is not None:
            return any(v == target for v, _ in self._out.get((source, timestamp), ()))
        return any(
            e.target == target for e in self._edges if e.source == source
        )

    def active_nodes(self, timestamp: int) -> set[int]:
        """Node ids with at least one incident edge at ``timestamp``."""
        active = set()
        for edge in self.at(timestamp):
            active.add(edge.source)
            active.add(edge.target)
        return active

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self):
        return iter(self._edges)

    def __repr__(self):
        return f"EdgeStore({len(self._edges)} edges)"
