from evolvinggraphs.core.edges import EdgeStore, TimeEdge


class TestEdgeStore:
    def _store(self):
        s = EdgeStore()
        s.append(0, 1, 0)
        s.append(1, 2, 0, {"w": 2.0})
        s.append(1, 2, 1)
        s.append(0, 1, 0)  # multiedge
        return s

    def test_insertion_order_and_multiedges(self):
        s = self._store()
        assert len(s) == 4
        assert s.all() == [
            TimeEdge(0, 1, 0),
            TimeEdge(1, 2, 0, {"w": 2.0}),
            TimeEdge(1, 2, 1),
            TimeEdge(0, 1, 0),
        ]

    def test_at_filters_by_timestamp(self):
        s = self._store()
        assert [e.target for e in s.at(0)] == [1, 2, 1]
        assert s.at(1) == [TimeEdge(1, 2, 1)]
        assert s.at(7) == []
        assert s.count_at(0) == 3

    def test_neighbor_lookups(self):
        s = self._store()
        assert s.neighbors(0, 0) == ((1, None), (1, None))
        assert s.neighbors(1, 0) == ((2, {"w": 2.0}),)
        assert s.neighbors(2, 0) == ()
        assert s.predecessors(2, 1) == ((1, None),)

    def test_iter_neighbors_follows_later_appends(self):
        s = self._store()
        it = s.iter_neighbors(1, 0)
        assert next(it) == (2, {"w": 2.0})
        assert list(s.iter_neighbors(2, 0)) == []
        # a lazy view over the adjacency list, not a snapshot
        s.append(1, 0, 0)
        assert list(it) == [(0, None)]

    def test_has_edge(self):
        s = self._store()
        assert s.has_edge(0, 1, 0)
        assert not s.has_edge(0, 1, 1)
        assert s.has_edge(1, 2)
        assert not s.has_edge(2, 1)

    def test_active_nodes(self):
        s = self._store()
        assert s.active_nodes(1) == {1, 2}

    def test_shift_timestamps(self):
        s = self._store()
        s.shift_timestamps(1)  # new timestamp slots in at rank 1
        assert [e.timestamp for e in s.all()] == [0, 0, 2, 0]
        assert s.at(1) == []
        assert s.at(2) == [TimeEdge(1, 2, 2)]
        assert s.neighbors(1, 2) == ((2, None),)
        assert s.neighbors(1, 1) == ()
        s.append(3, 0, 1)
        assert s.at(1) == [TimeEdge(3, 0, 1)]
