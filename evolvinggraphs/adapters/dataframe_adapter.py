from __future__ import annotations

from typing import Optional

import polars as pl

from ..core.graph import EvolvingGraph
from ..io.csv import from_dataframe


def to_dataframe(graph: EvolvingGraph, t=None, *, logical: bool = True) -> pl.DataFrame:
    """
    Export edges to a Polars DataFrame.

    Columns: ``source``, ``target``, ``time`` and one column per edge attribute.

    Args:
        graph: Graph to export
        t: Only export edges at this timestamp
        logical: If True, one row per insertion (undirected mirrors dropped),
            so that :func:`from_dataframe` rebuilds the same graph. If False,
            one row per stored edge.

    Returns:
        polars.DataFrame
    """
    return graph.edges_df(t, logical=logical)


def from_dataframes(
    edges: pl.DataFrame,
    *,
    directed: bool = True,
    attributes: Optional[list] = None,
    **kwargs,
) -> EvolvingGraph:
    """
    Rebuild a graph from the table produced by :func:`to_dataframe`.

    Every column besides source/target/time is treated as an attribute unless
    ``attributes`` names them explicitly.
    """
    if attributes is None:
        attributes = [c for c in edges.columns if c not in ("source", "target", "time")]
    return from_dataframe(
        edges,
        directed=directed,
        source="source",
        target="target",
        time="time",
        attributes=attributes or None,
        **kwargs,
    )


__all__ = ["to_dataframe", "from_dataframes"]
