import inspect
import numbers
import time
from copy import deepcopy
from datetime import UTC, datetime
from functools import wraps
from typing import NamedTuple, Optional

import polars as pl

from ..errors import AttributeNotFoundError
from .edges import EdgeStore, TimeEdge
from .index import NodeIndex, TimestampIndex


class Edge(NamedTuple):
    """A stored edge expressed with external labels."""

    source: object
    target: object
    time: object
    attributes: Optional[dict] = None


class EvolvingGraph:
    """Graph whose edge set is indexed by discrete, totally ordered timestamps.

    The graph owns a :class:`NodeIndex`, a :class:`TimestampIndex` and an
    :class:`EdgeStore`. It is append-only: nodes, timestamps and edges are
    created by :meth:`add_edge` and never removed.

    Parameters
    ----------
    directed : bool, default True
        Undirected graphs materialize every insertion ``(u, v, t)`` as the two
        edges ``u -> v`` and ``v -> u`` at ``t``; both count in
        :meth:`edge_count`.
    history : bool, default False
        Record every mutation in an in-memory log (see :meth:`history`).

    Notes
    -----
    - Node labels may be any hashable value; timestamps any hashable, totally
      ordered value. Ids are dense and assigned at first sight.
    - Timestamps may arrive in any order. Appending a new latest timestamp is
      O(1); one that falls between known timestamps re-ranks the later
      ordinals, an O(E) step. :meth:`add_edges_from` sorts its input first
      to stay on the fast path.
    - No internal locking: serialize mutation against reads when sharing a
      graph between threads.

    See Also
    --------
    add_edge, edges, evolvinggraphs.algorithms.matrix.matrix,
    evolvinggraphs.algorithms.temporal_path.shortest_temporal_path

    """

    _KIND = "EvolvingGraph"

    # Construction

    def __init__(self, directed=True, *, history: bool = False):
        self.directed = bool(directed)

        self.node_index = NodeIndex()
        self.edge_store = EdgeStore()
        self.timestamp_index = TimestampIndex(on_rerank=self.edge_store.shift_timestamps)

        self.graph_attributes = {}

        # History and Timeline
        self._history_enabled = bool(history)
        self._history = []  # list[dict]
        self._version = 0
        self._history_clock0 = time.perf_counter_ns()
        self._install_history_hooks()  # wrap mutating methods

    # Mutation

    def add_edge(self, source, target, t, attributes=None, **kwattrs):
        """Insert an edge ``source -> target`` at timestamp ``t``.

        Unknown labels and timestamps are created on the fly.

        Parameters
        ----------
        source, target : hashable
            Node labels.
        t : hashable, totally ordered
            Timestamp value. Values must be mutually comparable.
        attributes : Mapping[str, float], optional
            Attribute map stored on the edge. Keyword arguments are merged in.

        Returns
        -------
        None

        Raises
        ------
        TypeError
            If a label is unhashable, ``t`` is not comparable with the known
            timestamps, or an attribute value is not numeric.

        Notes
        -----
        For undirected graphs both mirrored edges receive independent copies of
        the attribute map.

        """
        attrs = self._normalize_attributes(attributes, kwattrs)
        hash(source)
        hash(target)

        # timestamp before nodes: an incomparable value must not leave orphan nodes
        tid = self.timestamp_index.ensure(t)
        u = self.node_index.ensure(source)
        v = self.node_index.ensure(target)

        store = self.edge_store
        store.append(u, v, tid, attrs)
        if not self.directed:
            store.append(v, u, tid, None if attrs is None else dict(attrs))
        self._version += 1

    def add_edges_from(self, edges):
        """Insert many edges given as ``(u, v, t)`` or ``(u, v, t, attrs)``.

        Input is stably sorted by timestamp first so no insertion re-ranks.

        Returns
        -------
        int
            Number of insertions performed.

        """
        items = list(edges)
        for item in items:
            if len(item) not in (3, 4):
                raise ValueError(f"Edge tuple must have 3 or 4 items, got {len(item)}")
        items.sort(key=lambda e: e[2])
        for item in items:
            self.add_edge(*item)
        return len(items)

    def _normalize_attributes(self, attributes, kwattrs):
        if attributes is None and not kwattrs:
            return None
        attrs = dict(attributes) if attributes is not None else {}
        attrs.update(kwattrs)
        for key, value in attrs.items():
            if not isinstance(key, str):
                raise TypeError(f"attribute names must be str, got {type(key).__name__}")
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise TypeError(
                    f"attribute {key!r} must be numeric, got {type(value).__name__}"
                )
        return attrs

    # Basic queries

    def nodes(self):
        """Node labels in id order."""
        return self.node_index.ordered_labels()

    def timestamps(self):
        """Timestamp values in ascending order."""
        return self.timestamp_index.ordered_labels()

    def edges(self, t=None):
        """Stored edges with labels, in insertion order.

        Parameters
        ----------
        t : optional
            Restrict to edges at this timestamp.

        Returns
        -------
        list[Edge]

        Raises
        ------
        TimestampNotFoundError
            If ``t`` is given and unknown.

        """
        return [self._labeled(e) for e in self.time_edges(t)]

    def time_edges(self, t=None):
        """Like :meth:`edges` but returns id-level :class:`TimeEdge` tuples."""
        if t is None:
            return self.edge_store.all()
        return self.edge_store.at(self.timestamp_index.id_of(t))

    def logical_edges(self, t=None):
        """One :class:`Edge` per :meth:`add_edge` call (mirrors of undirected edges dropped)."""
        edges = self.time_edges(t)
        if not self.directed:
            # undirected insertions always append their two halves back to back
            edges = edges[::2]
        return [self._labeled(e) for e in edges]

    def _labeled(self, edge: TimeEdge) -> Edge:
        nodes = self.node_index.idx_to_label
        times = self.timestamp_index.idx_to_value
        return Edge(
            nodes[edge.source],
            nodes[edge.target],
            times[edge.timestamp],
            None if edge.attributes is None else dict(edge.attributes),
        )

    def node_count(self) -> int:
        return self.node_index.size()

    def edge_count(self) -> int:
        """Number of stored edges (mirrored pairs count twice)."""
        return len(self.edge_store)

    def timestamp_count(self) -> int:
        return self.timestamp_index.size()

    def has_node(self, label) -> bool:
        return label in self.node_index

    def has_timestamp(self, value) -> bool:
        return value in self.timestamp_index

    def has_edge(self, source, target, t=None) -> bool:
        """True if an edge ``source -> target`` exists (at ``t`` if given)."""
        if source not in self.node_index or target not in self.node_index:
            return False
        if t is not None and t not in self.timestamp_index:
            return False
        u = self.node_index.id_of(source)
        v = self.node_index.id_of(target)
        tid = None if t is None else self.timestamp_index.id_of(t)
        return self.edge_store.has_edge(u, v, tid)

    def node_id(self, label) -> int:
        return self.node_index.id_of(label)

    def node_label(self, idx: int):
        return self.node_index.label_of(idx)

    def timestamp_id(self, value) -> int:
        return self.timestamp_index.id_of(value)

    def timestamp_value(self, idx: int):
        return self.timestamp_index.label_of(idx)

    def active_nodes(self, t=None):
        """Labels of nodes with at least one incident edge (at ``t`` if given).

        Returned in id order.
        """
        if t is None:
            active = set()
            for edge in self.edge_store:
                active.add(edge.source)
                active.add(edge.target)
        else:
            active = self.edge_store.active_nodes(self.timestamp_index.id_of(t))
        labels = self.node_index.idx_to_label
        return [labels[i] for i in sorted(active)]

    def out_neighbors(self, node, t):
        """Labels reachable from ``node`` by one edge at ``t`` (with repeats for multiedges)."""
        u = self.node_index.id_of(node)
        tid = self.timestamp_index.id_of(t)
        labels = self.node_index.idx_to_label
        return [labels[v] for v, _ in self.edge_store.neighbors(u, tid)]

    successors = out_neighbors

    def in_neighbors(self, node, t):
        """Labels with an edge into ``node`` at ``t``."""
        v = self.node_index.id_of(node)
        tid = self.timestamp_index.id_of(t)
        labels = self.node_index.idx_to_label
        return [labels[u] for u, _ in self.edge_store.predecessors(v, tid)]

    predecessors = in_neighbors

    def edge_attributes(self):
        """Sorted names of every attribute carried by at least one edge."""
        names = set()
        for edge in self.edge_store:
            if edge.attributes:
                names.update(edge.attributes)
        return sorted(names)

    def edges_df(self, t=None, logical: bool = False):
        """Edges as a Polars DF (DataFrame).

        Columns are ``source``, ``target``, ``time`` followed by one column per
        edge attribute (null where an edge lacks it). With ``logical=True``
        there is one row per insertion instead of one per stored edge.

        Returns
        -------
        polars.DataFrame

        """
        edges = self.logical_edges(t) if logical else self.edges(t)
        names = self.edge_attributes()
        data = {
            "source": [e.source for e in edges],
            "target": [e.target for e in edges],
            "time": [e.time for e in edges],
        }
        for name in names:
            data[name] = [(e.attributes or {}).get(name) for e in edges]
        return pl.DataFrame(data, strict=False)

    # Derived graphs

    def _empty_like(self):
        return type(self)(self.directed, history=self._history_enabled)

    def copy(self):
        """Independent deep copy (indices, edges and attribute maps).

        The mutation history is copied too; later events are logged separately
        on each graph.
        """
        out = self._empty_like()
        out.node_index = self.node_index.copy()
        out.timestamp_index = self.timestamp_index.copy(on_rerank=out.edge_store.shift_timestamps)
        for e in self.edge_store:
            out.edge_store.append(
                e.source, e.target, e.timestamp, None if e.attributes is None else dict(e.attributes)
            )
        out.graph_attributes = dict(self.graph_attributes)
        out._version = self._version
        out._history = deepcopy(self._history)
        out._history_clock0 = self._history_clock0
        return out

    def slice_timestamps(self, start=None, stop=None):
        """New graph holding the edges with ``start <= t <= stop``.

        The node index is copied whole so matrix rows line up with this graph.
        Bounds are inclusive; ``None`` leaves a side open.

        """
        out = self._empty_like()
        out.node_index = self.node_index.copy()
        remap = {}
        for tid, value in enumerate(self.timestamp_index.idx_to_value):
            if start is not None and value < start:
                continue
            if stop is not None and stop < value:
                continue
            remap[tid] = out.timestamp_index.ensure(value)
        for e in self.edge_store:
            new_tid = remap.get(e.timestamp)
            if new_tid is not None:
                out.edge_store.append(
                    e.source, e.target, new_tid, None if e.attributes is None else dict(e.attributes)
                )
        out.graph_attributes = dict(self.graph_attributes)
        return out

    # Rendering

    def __repr__(self):
        kind = "Directed" if self.directed else "Undirected"
        return (
            f"{kind} {self._KIND} ({self.node_count()} nodes, "
            f"{self.edge_count()} edges, {self.timestamp_count()} timestamps)"
        )

    def __len__(self):
        return self.node_count()

    @property
    def version(self) -> int:
        """Mutation counter, bumped by every insertion."""
        return self._version

    # History and Timeline

    def _utcnow_iso(self) -> str:
        return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")

    def _jsonify(self, x):
        # Make args/return JSON-safe & compact.
        import numpy as np

        if x is None or isinstance(x, (bool, int, float, str)):
            return x
        if isinstance(x, (set, frozenset)):
            return sorted((self._jsonify(v) for v in x), key=repr)
        if isinstance(x, (list, tuple)):
            return [self._jsonify(v) for v in x]
        if isinstance(x, dict):
            return {str(k): self._jsonify(v) for k, v in x.items()}
        # NumPy scalars
        if isinstance(x, (np.generic,)):
            return x.item()
        if isinstance(x, datetime):
            return x.isoformat()
        # anything else -> just a tag
        t = type(x).__name__
        return f"<<{t}>>"

    def _log_event(self, op: str, **fields):
        if not self._history_enabled:
            return
        evt = {
            "version": self._version,
            "ts_utc": self._utcnow_iso(),  # ISO-8601 with Z
            "mono_ns": time.perf_counter_ns() - self._history_clock0,
            "op": op,
        }
        # sanitize
        for k, v in fields.items():
            evt[k] = self._jsonify(v)
        self._history.append(evt)

    def _log_mutation(self, name=None):
        def deco(fn):
            op = name or fn.__name__
            sig = inspect.signature(fn)

            @wraps(fn)
            def wrapper(*args, **kwargs):
                if not self._history_enabled:
                    return fn(*args, **kwargs)
                bound = sig.bind(*args, **kwargs)
                bound.apply_defaults()
                result = fn(*args, **kwargs)
                payload = {}
                extra = {}
                for k, v in bound.arguments.items():
                    if sig.parameters[k].kind is inspect.Parameter.VAR_KEYWORD:
                        extra = v
                    else:
                        payload[k] = v
                # keyword attributes share one field so they never shadow event keys
                if extra:
                    payload["attributes"] = {**(payload.get("attributes") or {}), **extra}
                self._log_event(op, **payload)
                return result

            return wrapper

        return deco

    def _install_history_hooks(self):
        # Mutating methods to wrap. Add here if you add new mutators.
        to_wrap = ["add_edge"]
        for name in to_wrap:
            fn = getattr(self, name)
            # Avoid double-wrapping
            if getattr(fn, "__wrapped__", None) is None:
                setattr(self, name, self._log_mutation(name)(fn))

    def history(self, as_df: bool = False):
        """Return the append-only mutation history.

        Parameters
        ----------
        as_df : bool, default False
            If True, return a Polars DF [DataFrame]; otherwise return a list of dicts.

        Returns
        -------
        list[dict] or polars.DataFrame
            Each event includes: 'version', 'ts_utc' (UTC ISO-8601), 'mono_ns'
            (monotonic nanoseconds since the graph was created), 'op' and the
            call arguments.

        """
        return pl.DataFrame(self._history, strict=False) if as_df else list(self._history)

    def export_history(self, path: str):
        """Write the mutation history to disk.

        Parameters
        ----------
        path : str
            Output path. Supported extensions: '.parquet', '.ndjson' (a.k.a. '.jsonl'),
            '.json', '.csv'. Unknown extensions default to Parquet by appending '.parquet'.

        Returns
        -------
        int
            Number of events written. Returns 0 if the history is empty.

        Notes
        -----
        Nested call arguments (attribute maps) are stored as JSON strings for
        the flat '.csv' format.

        """
        if not self._history:
            return 0
        p = str(path)
        lower = p.lower()
        if lower.endswith(".ndjson") or lower.endswith(".jsonl"):
            pl.DataFrame(self._history, strict=False).write_ndjson(p)
            return len(self._history)
        if lower.endswith(".json"):
            pl.DataFrame(self._history, strict=False).write_json(p)
            return len(self._history)
        df = pl.DataFrame(self._flat_history(), strict=False)
        if lower.endswith(".csv"):
            df.write_csv(p)
            return len(df)
        if not lower.endswith(".parquet"):
            p += ".parquet"
        df.write_parquet(p)
        return len(df)

    def _flat_history(self):
        import json

        rows = []
        for evt in self._history:
            rows.append(
                {
                    k: json.dumps(v) if isinstance(v, (dict, list)) else v
                    for k, v in evt.items()
                }
            )
        return rows

    def enable_history(self, flag: bool = True):
        """Enable or disable in-memory mutation logging."""
        self._history_enabled = bool(flag)

    def clear_history(self):
        """Clear the in-memory mutation log (exported files are untouched)."""
        self._history.clear()

    def mark(self, label: str):
        """Insert a manual marker into the mutation history.

        The event is recorded with 'op'='mark'. Logging must be enabled for
        the marker to be recorded.
        """
        self._log_event("mark", label=label)


class AttributeEvolvingGraph(EvolvingGraph):
    """Evolving graph whose edges each carry a non-empty numeric attribute map.

    Same indices and storage as :class:`EvolvingGraph`; only the insertion
    contract differs.

    Examples
    --------
    >>> g = AttributeEvolvingGraph(directed=False)
    >>> g.add_edge("a", "b", "Jan", closeness=0.2)
    >>> g.edge_count()
    2

    """

    _KIND = "AttributeEvolvingGraph"

    def __init__(self, directed=True, *, history: bool = False):
        super().__init__(directed, history=history)
        self._attribute_names = set()

    def add_edge(self, source, target, t, attributes=None, **kwattrs):
        """Insert an edge carrying ``attributes`` (merged with keyword attributes).

        Raises
        ------
        ValueError
            If the merged attribute map is empty.

        """
        attrs = self._normalize_attributes(attributes, kwattrs)
        if not attrs:
            raise ValueError("AttributeEvolvingGraph edges need at least one attribute")
        super().add_edge(source, target, t, attrs)
        self._attribute_names.update(attrs)

    def edge_attributes(self):
        return sorted(self._attribute_names)

    def require_attribute(self, name):
        """Raise :class:`AttributeNotFoundError` unless some edge carries ``name``."""
        if name not in self._attribute_names:
            raise AttributeNotFoundError(name)

    def copy(self):
        out = super().copy()
        out._attribute_names = set(self._attribute_names)
        return out

    def slice_timestamps(self, start=None, stop=None):
        out = super().slice_timestamps(start, stop)
        out._attribute_names = {name for e in out.edge_store for name in e.attributes}
        return out


def new_graph(directed=True, **kwargs) -> EvolvingGraph:
    """Create an empty :class:`EvolvingGraph`."""
    return EvolvingGraph(directed, **kwargs)


def new_attribute_graph(directed=True, **kwargs) -> AttributeEvolvingGraph:
    """Create an empty :class:`AttributeEvolvingGraph`."""
    return AttributeEvolvingGraph(directed, **kwargs)


__all__ = [
    "Edge",
    "EvolvingGraph",
    "AttributeEvolvingGraph",
    "new_graph",
    "new_attribute_graph",
]
