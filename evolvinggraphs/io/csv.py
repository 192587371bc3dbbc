"""
Edge-list ingestion for evolving graphs. Uses Polars for IO (no stdlib `csv`).

Every row ``(source, target, time[, attribute columns...])`` becomes one call
to ``add_edge``. Rows are sorted by the time column first (stable) so that the graph never
has to re-rank timestamps during the load.

Column detection:
- source / target / time columns are picked from common names unless given
  explicitly (``source=...``, ``target=...``, ``time=...``).
- ``attributes=None`` ignores every other column and builds an
  ``EvolvingGraph``; ``attributes="auto"`` takes every remaining numeric
  column; a list names the columns. Any attribute column makes the result an
  ``AttributeEvolvingGraph``.

Public entry points:
- read_csv(path, *, directed=True, ...) -> EvolvingGraph
- from_dataframe(df, *, directed=True, ...) -> EvolvingGraph
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Union

import polars as pl

from ..core.graph import AttributeEvolvingGraph, EvolvingGraph

SRC_COLS = ["source", "src", "from", "u", "i"]
DST_COLS = ["target", "dst", "to", "v", "j"]
TIME_COLS = ["time", "timestamp", "t", "date", "ts"]


def _pick_first(df: pl.DataFrame, candidates: List[str]) -> Optional[str]:
    cols_lower = {c.lower(): c for c in df.columns}
    for k in candidates:
        if k in cols_lower:
            return cols_lower[k]
    return None


def _resolve_column(df: pl.DataFrame, given: Optional[str], candidates: List[str], role: str) -> str:
    if given is not None:
        if given not in df.columns:
            raise ValueError(f"{role} column {given!r} not in {df.columns}")
        return given
    col = _pick_first(df, candidates)
    if col is None:
        raise ValueError(
            f"Cannot infer the {role} column from {df.columns}; pass {role}=<name>"
        )
    return col


def _attribute_columns(
    df: pl.DataFrame, attributes: Union[None, str, Iterable[str]], exclude: Iterable[str]
) -> List[str]:
    if attributes is None:
        return []
    if isinstance(attributes, str):
        if attributes == "auto":
            excl = set(exclude)
            return [c for c in df.columns if c not in excl and df.schema[c].is_numeric()]
        attributes = [attributes]
    cols = list(attributes)
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"attribute columns {missing} not in {df.columns}")
    return cols


def _check_attribute_rows(df: pl.DataFrame, attr_cols: List[str]) -> None:
    if not attr_cols:
        raise ValueError("AttributeEvolvingGraph input needs at least one attribute column")
    empty = (
        df.with_row_index("_row")
        .filter(pl.all_horizontal([pl.col(c).is_null() for c in attr_cols]))
        .get_column("_row")
    )
    if len(empty):
        raise ValueError(
            f"{len(empty)} row(s) have no attribute value in {attr_cols} "
            f"(first at row {empty[0]})"
        )


def read_csv(
    path,
    *,
    directed: bool = True,
    graph: Optional[EvolvingGraph] = None,
    source: Optional[str] = None,
    target: Optional[str] = None,
    time: Optional[str] = None,
    attributes: Union[None, str, Iterable[str]] = None,
    separator: str = ",",
    has_header: bool = True,
    sort: bool = True,
    infer_schema_length: int = 10000,
    **kwargs: Any,
) -> EvolvingGraph:
    """
    Load an edge-list CSV into an evolving graph.

    Parameters
    ----------
    path : str or Path
        CSV file.
    directed : bool, default True
        Directedness of the new graph (ignored when ``graph`` is given).
    graph : EvolvingGraph, optional
        Mutate this graph instead of creating one.
    source, target, time : str, optional
        Column names; inferred from common names when omitted. Without a header
        the first three columns are used.
    attributes : None, 'auto' or list[str]
        Attribute columns (see module docstring).
    separator : str, default ','
    has_header : bool, default True
    sort : bool, default True
        Sort rows by time before insertion.
    infer_schema_length : int, default 10000
        Row count Polars uses to infer column types.
    **kwargs
        Passed to the graph constructor (e.g. ``history=True``).

    Returns
    -------
    EvolvingGraph or AttributeEvolvingGraph

    Raises
    ------
    ValueError
        If a required column cannot be found.

    """
    df = pl.read_csv(
        path,
        separator=separator,
        has_header=has_header,
        infer_schema_length=infer_schema_length,
    )
    if not has_header and source is None and target is None and time is None:
        if df.width < 3:
            raise ValueError(f"Need at least 3 columns, got {df.width}")
        source, target, time = df.columns[:3]
    return from_dataframe(
        df,
        directed=directed,
        graph=graph,
        source=source,
        target=target,
        time=time,
        attributes=attributes,
        sort=sort,
        **kwargs,
    )


def from_dataframe(
    df: pl.DataFrame,
    *,
    directed: bool = True,
    graph: Optional[EvolvingGraph] = None,
    source: Optional[str] = None,
    target: Optional[str] = None,
    time: Optional[str] = None,
    attributes: Union[None, str, Iterable[str]] = None,
    sort: bool = True,
    **kwargs: Any,
) -> EvolvingGraph:
    """
    Build or augment an evolving graph from a Polars DataFrame.

    Same parameters as :func:`read_csv`. Null attribute cells are skipped
    for that row.

    Raises
    ------
    ValueError
        If the target is an ``AttributeEvolvingGraph`` and some row has no
        non-null attribute cell. Checked before any edge is inserted.
    """
    src_col = _resolve_column(df, source, SRC_COLS, "source")
    dst_col = _resolve_column(df, target, DST_COLS, "target")
    time_col = _resolve_column(df, time, TIME_COLS, "time")
    attr_cols = _attribute_columns(df, attributes, (src_col, dst_col, time_col))

    G = graph
    if G is None:
        cls = AttributeEvolvingGraph if attr_cols else EvolvingGraph
        G = cls(directed, **kwargs)

    if isinstance(G, AttributeEvolvingGraph):
        _check_attribute_rows(df, attr_cols)

    if sort:
        df = df.sort(time_col, maintain_order=True)

    cols = [src_col, dst_col, time_col, *attr_cols]
    for row in df.select(cols).iter_rows():
        u, v, t = row[0], row[1], row[2]
        if attr_cols:
            attrs = {name: val for name, val in zip(attr_cols, row[3:]) if val is not None}
            G.add_edge(u, v, t, attrs)
        else:
            G.add_edge(u, v, t)
    return G


__all__ = ["read_csv", "from_dataframe"]
