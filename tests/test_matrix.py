import warnings

import numpy as np
import pytest
import scipy.sparse as sp

from evolvinggraphs import AttributeEvolvingGraph, EvolvingGraph
from evolvinggraphs.algorithms.matrix import (
    aggregate_matrix,
    katz_centrality,
    matrix,
    sparse_matrices,
    sparse_matrix,
)
from evolvinggraphs.errors import AttributeNotFoundError, TimestampNotFoundError
from evolvinggraphs.generators import random_evolving_graph


class TestDenseMatrix:
    def test_small_directed_snapshot(self, small_directed):
        A = matrix(small_directed, 1)
        assert A.shape == (4, 4)
        expected = np.zeros((4, 4), dtype=np.int64)
        expected[0, 1] = 1  # 1 -> 2
        expected[1, 2] = 1  # 2 -> 3
        assert np.array_equal(A, expected)
        assert A[0, 1] == True  # noqa: E712

    def test_rows_follow_node_order(self):
        g = EvolvingGraph()
        g.add_edge("z", "a", 1)
        A = matrix(g, 1)
        assert g.nodes() == ["z", "a"]
        assert A[0, 1] == 1 and A[1, 0] == 0

    def test_closeness_weighted_snapshot(self, closeness_graph):
        W = matrix(closeness_graph, "Jan", "closeness")
        expected = np.array(
            [
                [0.0, 0.2, 0.7],
                [0.2, 0.0, 0.5],
                [0.7, 0.5, 0.0],
            ]
        )
        assert W.dtype == np.float64
        assert np.allclose(W, expected)
        assert np.allclose(W, W.T)
        assert np.allclose(matrix(closeness_graph, "Feb", "closeness")[0, 1], 0.8)

    def test_matches_edge_listing(self):
        g = random_evolving_graph(7, 5, 0.25, seed=3)
        nodes = g.nodes()
        for t in g.timestamps():
            A = matrix(g, t)
            present = {(e.source, e.target) for e in g.edges(t)}
            for i, u in enumerate(nodes):
                for j, v in enumerate(nodes):
                    assert bool(A[i, j]) == ((u, v) in present)

    def test_undirected_snapshots_are_symmetric(self):
        g = random_evolving_graph(9, 4, 0.3, directed=False, seed=11)
        for t in g.timestamps():
            A = matrix(g, t)
            assert np.array_equal(A, A.T)

    def test_walk_counting_law(self):
        g = random_evolving_graph(8, 2, 0.4, seed=5)
        t1, t2 = g.timestamps()
        product = matrix(g, t1) @ matrix(g, t2)
        n = g.node_count()
        nodes = g.nodes()
        for i in range(n):
            for j in range(n):
                count = sum(
                    1
                    for k in range(n)
                    if g.has_edge(nodes[i], nodes[k], t1) and g.has_edge(nodes[k], nodes[j], t2)
                )
                assert product[i, j] == count

    def test_multiedges_collapse_to_one(self):
        g = EvolvingGraph()
        g.add_edge(1, 2, 1)
        g.add_edge(1, 2, 1)
        assert matrix(g, 1)[0, 1] == 1

    def test_last_attribute_value_wins(self):
        g = AttributeEvolvingGraph()
        g.add_edge(1, 2, 1, w=1.0)
        g.add_edge(1, 2, 1, w=3.0)
        assert matrix(g, 1, "w")[0, 1] == 3.0

    def test_errors(self, small_directed, closeness_graph):
        with pytest.raises(TimestampNotFoundError):
            matrix(small_directed, 3)
        with pytest.raises(AttributeNotFoundError):
            matrix(closeness_graph, "Jan", "weight")
        with pytest.raises(AttributeNotFoundError):
            matrix(small_directed, 1, "weight")

    def test_dense_limit_warns(self, small_directed):
        with pytest.warns(ResourceWarning):
            matrix(small_directed, 1, dense_limit=2)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            matrix(small_directed, 1)


class TestSparseMatrix:
    def test_matches_dense(self):
        g = random_evolving_graph(10, 3, 0.3, seed=1)
        for t in g.timestamps():
            S = sparse_matrix(g, t)
            assert sp.issparse(S)
            assert np.array_equal(S.toarray(), matrix(g, t))

    def test_weighted_matches_dense(self, closeness_graph):
        S = sparse_matrix(closeness_graph, "Feb", "closeness")
        assert np.allclose(S.toarray(), matrix(closeness_graph, "Feb", "closeness"))

    def test_multiedges_stay_binary(self):
        g = EvolvingGraph()
        g.add_edge(1, 2, 1)
        g.add_edge(1, 2, 1)
        assert sparse_matrix(g, 1)[0, 1] == 1

    def test_one_matrix_per_timestamp(self, small_directed):
        mats = sparse_matrices(small_directed)
        assert len(mats) == 2
        assert mats[1].nnz == 2

    def test_aggregate(self, small_directed):
        total = aggregate_matrix(small_directed).toarray()
        assert total[1, 2] == 2  # 2 -> 3 at both timestamps
        assert total[1, 3] == 1
        assert total.sum() == 4


class TestKatzCentrality:
    def test_long_acyclic_snapshot(self):
        # a nilpotent snapshot above the dense eigenvalue cutoff
        g = EvolvingGraph()
        for i in range(400):
            g.add_edge(i, i + 1, 1)
        g.add_edge(0, 1, 2)
        scores = katz_centrality(g, 0.1, normalized=False)
        assert len(scores) == 401
        assert scores[400] == pytest.approx(1.0)
        assert scores[399] == pytest.approx(1.1)
        assert scores[0] > scores[1] > 1.0

    def _reference(self, mats, alpha, mode):
        n = mats[0].shape[0]
        Q = np.eye(n)
        for A in mats:
            Q = Q @ np.linalg.inv(np.eye(n) - alpha * A)
        x = Q.sum(axis=1) if mode == "broadcast" else Q.sum(axis=0)
        return x / np.linalg.norm(x)

    def test_matches_dense_product(self, small_directed):
        mats = [matrix(small_directed, t).astype(float) for t in small_directed.timestamps()]
        for mode in ("broadcast", "receive"):
            scores = katz_centrality(small_directed, 0.3, mode)
            expected = self._reference(mats, 0.3, mode)
            assert np.allclose([scores[v] for v in small_directed.nodes()], expected)

    def test_broadcast_favours_early_senders(self, small_directed):
        scores = katz_centrality(small_directed, 0.5)
        # node 1 sends to 2, which sends on later; node 4 only receives
        assert scores[1] > scores[4]
        assert scores[2] > scores[3]

    def test_unnormalized_scores(self):
        g = EvolvingGraph()
        g.add_edge("a", "b", 1)
        scores = katz_centrality(g, 0.5, normalized=False)
        assert scores == pytest.approx({"a": 1.5, "b": 1.0})

    def test_alpha_is_checked(self, closeness_graph):
        with pytest.raises(ValueError):
            katz_centrality(closeness_graph, 0.0)
        # triangle: spectral radius 2
        with pytest.raises(ValueError):
            katz_centrality(closeness_graph, 0.6)
        katz_centrality(closeness_graph, 0.4)
        with pytest.raises(ValueError):
            katz_centrality(closeness_graph, 0.1, mode="sideways")

    def test_empty_graph(self):
        assert katz_centrality(EvolvingGraph(), 0.1) == {}
