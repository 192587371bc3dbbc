"""Bidirectional label <-> dense id indices for nodes and timestamps."""

from __future__ import annotations

from bisect import bisect_left

from ..errors import IndexOutOfRangeError, NodeNotFoundError, TimestampNotFoundError


class NodeIndex:
    """Maps node labels to dense ids ``0..N-1`` in first-seen order.

    Labels may be any hashable value. Ids are never reused or renumbered.
    """

    def __init__(self):
        self.label_to_idx = {}  # label -> id
        self.idx_to_label = []  # id -> label

    def ensure(self, label) -> int:
        """Return the id of ``label``, allocating the next id if it is new."""
        idx = self.label_to_idx.get(label)
        if idx is None:
            idx = len(self.idx_to_label)
            self.label_to_idx[label] = idx
            self.idx_to_label.append(label)
        return idx

    def id_of(self, label) -> int:
        try:
            return self.label_to_idx[label]
        except KeyError:
            raise NodeNotFoundError(label) from None
        except TypeError:
            # unhashable labels can never have been inserted
            raise NodeNotFoundError(label) from None

    def label_of(self, idx: int):
        if not 0 <= idx < len(self.idx_to_label):
            raise IndexOutOfRangeError(
                f"Node id {idx} out of range (size {len(self.idx_to_label)})"
            )
        return self.idx_to_label[idx]

    def ids_of(self, labels) -> list[int]:
        """Batch convert labels to ids."""
        return [self.id_of(label) for label in labels]

    def labels_of(self, ids) -> list:
        """Batch convert ids to labels."""
        return [self.label_of(i) for i in ids]

    def __contains__(self, label) -> bool:
        try:
            return label in self.label_to_idx
        except TypeError:
            return False

    def size(self) -> int:
        return len(self.idx_to_label)

    def __len__(self) -> int:
        return len(self.idx_to_label)

    def ordered_labels(self) -> list:
        """Labels in id order (matrix row/column order)."""
        return list(self.idx_to_label)

    def copy(self) -> "NodeIndex":
        out = NodeIndex()
        out.label_to_idx = dict(self.label_to_idx)
        out.idx_to_label = list(self.idx_to_label)
        return out

    def __repr__(self):
        return f"NodeIndex({len(self)} nodes)"


class TimestampIndex:
    """Maps totally ordered timestamp values to dense ordinal ids.

    Ordinals agree with value order: ``id(t1) < id(t2)`` iff ``t1 < t2``.
    Appending a value larger than every known one is O(1). A new value that
    falls between known ones is re-ranked into place: every ordinal at or
    above its rank shifts up by one and ``on_rerank(rank)`` is called so the
    owner can remap stored ids. Ordinals handed out earlier are then stale;
    values stay the stable way to refer to a timestamp.
    """

    def __init__(self, on_rerank=None):
        self.value_to_idx = {}  # value -> ordinal
        self.idx_to_value = []  # ordinal -> value (ascending)
        self.on_rerank = on_rerank

    def ensure(self, value) -> int:
        """Return the ordinal of ``value``, inserting it at its rank if new."""
        idx = self.value_to_idx.get(value)
        if idx is not None:
            return idx
        values = self.idx_to_value
        try:
            in_order = not values or values[-1] < value
            pos = len(values) if in_order else bisect_left(values, value)
        except TypeError:
            raise TypeError(
                f"Timestamp {value!r} is not comparable with {values[-1]!r}"
            ) from None
        if pos == len(values):
            self.value_to_idx[value] = pos
            values.append(value)
            return pos

        values.insert(pos, value)
        for i in range(pos, len(values)):
            self.value_to_idx[values[i]] = i
        if self.on_rerank is not None:
            self.on_rerank(pos)
        return pos

    def id_of(self, value) -> int:
        try:
            return self.value_to_idx[value]
        except (KeyError, TypeError):
            raise TimestampNotFoundError(value) from None

    def label_of(self, idx: int):
        if not 0 <= idx < len(self.idx_to_value):
            raise IndexOutOfRangeError(
                f"Timestamp id {idx} out of range (size {len(self.idx_to_value)})"
            )
        return self.idx_to_value[idx]

    def next_id(self, idx: int):
        """Ordinal following ``idx``, or ``None`` at the end of time."""
        nxt = idx + 1
        return nxt if nxt < len(self.idx_to_value) else None

    def previous_id(self, idx: int):
        """Ordinal preceding ``idx``, or ``None`` at the start of time."""
        return idx - 1 if idx > 0 else None

    def __contains__(self, value) -> bool:
        try:
            return value in self.value_to_idx
        except TypeError:
            return False

    def size(self) -> int:
        return len(self.idx_to_value)

    def __len__(self) -> int:
        return len(self.idx_to_value)

    def ordered_labels(self) -> list:
        """Timestamp values in ascending order (the time axis)."""
        return list(self.idx_to_value)

    def copy(self, on_rerank=None) -> "TimestampIndex":
        out = TimestampIndex(on_rerank)
        out.value_to_idx = dict(self.value_to_idx)
        out.idx_to_value = list(self.idx_to_value)
        return out

    def __repr__(self):
        return f"TimestampIndex({len(self)} timestamps)"
