"""Per-timestamp adjacency views of an evolving graph.

Rows and columns follow ``g.nodes()``. The dense view is an integer 0/1 (or
float attribute) ``numpy.ndarray`` so products compose: ``matrix(g, t1) @
matrix(g, t2)`` counts the walks that take one edge at ``t1`` and then one at
``t2``.

An attribute value of ``0`` is indistinguishable from a missing edge in the
weighted views.
"""

from __future__ import annotations

import math
import warnings

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla

from ..errors import AttributeNotFoundError

DEFAULT_DENSE_LIMIT = 20_000


def _check_attribute(g, attribute):
    if attribute is None:
        return
    require = getattr(g, "require_attribute", None)
    if require is not None:
        require(attribute)
    elif attribute not in g.edge_attributes():
        raise AttributeNotFoundError(attribute)


def _entries(g, t, attribute):
    """Yield ``(row, col, value)`` at ``t``; for weighted views the last edge wins."""
    tid = g.timestamp_index.id_of(t)
    edges = g.edge_store.at(tid)
    if attribute is None:
        for e in edges:
            yield e.source, e.target, 1
        return
    cells = {}
    for e in edges:
        value = (e.attributes or {}).get(attribute)
        if value is not None:
            cells[(e.source, e.target)] = value
    for (i, j), value in cells.items():
        yield i, j, value


def matrix(g, t, attribute=None, *, dtype=None, dense_limit: int = DEFAULT_DENSE_LIMIT):
    """Dense adjacency matrix of ``g`` at timestamp ``t``.

    Parameters
    ----------
    g : EvolvingGraph
    t : timestamp value
    attribute : str, optional
        If given, entries hold this attribute's value (float) where an edge
        exists and ``0`` elsewhere. Otherwise entries are ``1``/``0`` integers.
    dtype : numpy dtype, optional
        Override the element type (``int64`` or ``float64`` by default).
    dense_limit : int
        Warn when the node count exceeds this; use :func:`sparse_matrix`.

    Returns
    -------
    numpy.ndarray
        Shape ``(N, N)`` with ``N = g.node_count()``.

    Raises
    ------
    TimestampNotFoundError
        If ``t`` is unknown.
    AttributeNotFoundError
        If no edge carries ``attribute``.

    """
    _check_attribute(g, attribute)
    n = g.node_count()
    if n > dense_limit:
        warnings.warn(
            f"Building a dense {n}x{n} matrix; consider sparse_matrix()",
            ResourceWarning,
            stacklevel=2,
        )
    if dtype is None:
        dtype = np.int64 if attribute is None else np.float64
    A = np.zeros((n, n), dtype=dtype)
    for i, j, value in _entries(g, t, attribute):
        A[i, j] = value
    return A


def sparse_matrix(g, t, attribute=None, *, dtype=None):
    """CSR (Compressed Sparse Row) adjacency matrix of ``g`` at ``t``.

    Same entries as :func:`matrix`; only the edges at ``t`` are visited.

    Returns
    -------
    scipy.sparse.csr_matrix

    """
    _check_attribute(g, attribute)
    n = g.node_count()
    if dtype is None:
        dtype = np.int64 if attribute is None else np.float64
    rows, cols, vals = [], [], []
    for i, j, value in _entries(g, t, attribute):
        rows.append(i)
        cols.append(j)
        vals.append(value)
    M = sp.coo_matrix((np.asarray(vals, dtype=dtype), (rows, cols)), shape=(n, n)).tocsr()
    if attribute is None:
        # coo -> csr sums multiedges; collapse back to 0/1
        M.data[:] = 1
    return M


def sparse_matrices(g, attribute=None, *, dtype=None):
    """List of :func:`sparse_matrix` for every timestamp, in time order."""
    return [sparse_matrix(g, t, attribute, dtype=dtype) for t in g.timestamps()]


def aggregate_matrix(g, attribute=None, *, dtype=None):
    """Sum of the per-timestamp sparse adjacency matrices.

    Entry ``(i, j)`` counts the timestamps at which ``i -> j`` exists (or sums
    the attribute values over them).
    """
    _check_attribute(g, attribute)
    n = g.node_count()
    if dtype is None:
        dtype = np.int64 if attribute is None else np.float64
    total = sp.csr_matrix((n, n), dtype=dtype)
    for M in sparse_matrices(g, attribute, dtype=dtype):
        total = total + M
    return total


def _spectral_radius(A) -> float:
    n = A.shape[0]
    if A.nnz == 0:
        return 0.0
    if n <= 256:
        return float(np.max(np.abs(np.linalg.eigvals(A.toarray().astype(np.float64)))))
    A = A.astype(np.float64)
    try:
        vals = spla.eigs(A, k=1, which="LM", return_eigenvectors=False)
    except spla.ArpackNoConvergence:
        # nilpotent (acyclic) snapshots stall ARPACK; the max absolute row sum
        # is an upper bound on rho
        return float(abs(A).sum(axis=1).max())
    return float(np.abs(vals[0]))


def katz_centrality(g, alpha, mode="broadcast", *, normalized=True, check_alpha=True):
    """Dynamic communicability centrality (Grindrod et al.).

    Builds ``Q = (I - alpha A_1)^-1 (I - alpha A_2)^-1 ... (I - alpha A_K)^-1``
    over the timestamps in order and returns its row sums (``"broadcast"``:
    how well a node sends information forward in time) or column sums
    (``"receive"``). ``Q`` is never formed; only linear solves are used.

    Parameters
    ----------
    g : EvolvingGraph
    alpha : float
        Down-weighting of longer walks. Must satisfy
        ``0 < alpha < 1 / max_t rho(A_t)``.
    mode : {'broadcast', 'receive'}
    normalized : bool, default True
        Scale the result to unit Euclidean norm.
    check_alpha : bool, default True
        Verify the spectral-radius bound (an eigenvalue computation per
        timestamp).

    Returns
    -------
    dict
        Node label -> centrality.

    Raises
    ------
    ValueError
        If ``mode`` is unknown or ``alpha`` violates the bound.

    """
    if mode not in {"broadcast", "receive"}:
        raise ValueError(f"mode must be 'broadcast' or 'receive', got {mode!r}")
    alpha = float(alpha)
    if not alpha > 0:
        raise ValueError(f"alpha must be positive, got {alpha}")

    n = g.node_count()
    if n == 0:
        return {}
    mats = [M.astype(np.float64) for M in sparse_matrices(g)]
    if check_alpha and mats:
        rho = max(_spectral_radius(M) for M in mats)
        if rho > 0 and not alpha < 1.0 / rho:
            raise ValueError(
                f"alpha must be smaller than 1/rho = {1.0 / rho:.6g} (got {alpha})"
            )

    identity = sp.identity(n, dtype=np.float64, format="csc")
    x = np.ones(n, dtype=np.float64)
    if mode == "broadcast":
        # Q @ 1: apply the inverses right to left
        for M in reversed(mats):
            x = spla.spsolve((identity - alpha * M).tocsc(), x)
    else:
        # Q.T @ 1: transposed inverses left to right
        for M in mats:
            x = spla.spsolve((identity - alpha * M.T).tocsc(), x)
    x = np.atleast_1d(np.asarray(x, dtype=np.float64))

    if normalized:
        norm = math.sqrt(float(np.dot(x, x)))
        if norm > 0:
            x = x / norm
    return dict(zip(g.nodes(), x.tolist()))


__all__ = [
    "DEFAULT_DENSE_LIMIT",
    "matrix",
    "sparse_matrix",
    "sparse_matrices",
    "aggregate_matrix",
    "katz_centrality",
]
