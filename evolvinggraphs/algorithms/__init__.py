from .matrix import (
    aggregate_matrix,
    katz_centrality,
    matrix,
    sparse_matrices,
    sparse_matrix,
)
from .temporal_path import (
    UNREACHABLE,
    State,
    backward_neighbors,
    forward_neighbors,
    is_reachable,
    shortest_temporal_distance,
    shortest_temporal_path,
    temporal_bfs,
)

__all__ = [
    "UNREACHABLE",
    "State",
    "aggregate_matrix",
    "backward_neighbors",
    "forward_neighbors",
    "is_reachable",
    "katz_centrality",
    "matrix",
    "shortest_temporal_distance",
    "shortest_temporal_path",
    "sparse_matrices",
    "sparse_matrix",
    "temporal_bfs",
]
