# evolvinggraphs/__init__.py
"""evolvinggraphs: graphs whose edges live at discrete timestamps."""
from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

from .core.graph import (
    AttributeEvolvingGraph,
    Edge,
    EvolvingGraph,
    new_attribute_graph,
    new_graph,
)
from .errors import (
    AttributeNotFoundError,
    EvolvingGraphError,
    IndexOutOfRangeError,
    NodeNotFoundError,
    SearchTimeoutError,
    TimestampNotFoundError,
)

# Lazily exposed submodules (imported on first attribute access)
_lazy_submodules = {
    "adapters": "evolvinggraphs.adapters",
    "algorithms": "evolvinggraphs.algorithms",
    "core": "evolvinggraphs.core",
    "io": "evolvinggraphs.io",
    "generators": "evolvinggraphs.generators",
    "csvio": "evolvinggraphs.io.csv",
    "networkx": "evolvinggraphs.adapters.networkx",
    "dataframe": "evolvinggraphs.adapters.dataframe_adapter",
}

# Curated top-level symbols (lazy). name -> (module, attribute)
_lazy_symbols: dict[str, tuple[str, str]] = {
    # Matrix view
    "matrix": ("evolvinggraphs.algorithms.matrix", "matrix"),
    "sparse_matrix": ("evolvinggraphs.algorithms.matrix", "sparse_matrix"),
    "aggregate_matrix": ("evolvinggraphs.algorithms.matrix", "aggregate_matrix"),
    "katz_centrality": ("evolvinggraphs.algorithms.matrix", "katz_centrality"),

    # Temporal paths
    "UNREACHABLE": ("evolvinggraphs.algorithms.temporal_path", "UNREACHABLE"),
    "State": ("evolvinggraphs.algorithms.temporal_path", "State"),
    "shortest_temporal_path": ("evolvinggraphs.algorithms.temporal_path", "shortest_temporal_path"),
    "shortest_temporal_distance": ("evolvinggraphs.algorithms.temporal_path", "shortest_temporal_distance"),
    "is_reachable": ("evolvinggraphs.algorithms.temporal_path", "is_reachable"),
    "temporal_bfs": ("evolvinggraphs.algorithms.temporal_path", "temporal_bfs"),
    "forward_neighbors": ("evolvinggraphs.algorithms.temporal_path", "forward_neighbors"),
    "backward_neighbors": ("evolvinggraphs.algorithms.temporal_path", "backward_neighbors"),

    # CSV / DataFrame ingestion
    "read_csv": ("evolvinggraphs.io.csv", "read_csv"),
    "from_dataframe": ("evolvinggraphs.io.csv", "from_dataframe"),
    "to_dataframe": ("evolvinggraphs.adapters.dataframe_adapter", "to_dataframe"),

    # NetworkX adapter (optional dependency)
    "to_nx": ("evolvinggraphs.adapters.networkx", "to_nx"),
    "from_nx": ("evolvinggraphs.adapters.networkx", "from_nx"),

    # Generators
    "random_evolving_graph": ("evolvinggraphs.generators", "random_evolving_graph"),
}

_eager = [
    "AttributeEvolvingGraph",
    "Edge",
    "EvolvingGraph",
    "new_attribute_graph",
    "new_graph",
    "AttributeNotFoundError",
    "EvolvingGraphError",
    "IndexOutOfRangeError",
    "NodeNotFoundError",
    "SearchTimeoutError",
    "TimestampNotFoundError",
]

# kept out of __all__ so star-imports work without networkx installed
_optional = {"networkx", "to_nx", "from_nx"}

__all__ = sorted(set(_eager + list(_lazy_submodules) + list(_lazy_symbols)) - _optional)


def __getattr__(name: str) -> Any:  # PEP 562: lazy attribute resolution
    if name in _lazy_submodules:
        return import_module(_lazy_submodules[name])
    if name in _lazy_symbols:
        mod, attr = _lazy_symbols[name]
        return getattr(import_module(mod), attr)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))


try:
    __version__ = _pkg_version("evolvinggraphs")
except PackageNotFoundError:
    __version__ = "0.0.0"
