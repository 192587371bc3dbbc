"""Exception hierarchy for evolvinggraphs.

Every error derives from :class:`EvolvingGraphError` and from the builtin a
caller would naturally catch (``KeyError`` for unknown labels, ``IndexError``
for bad ids, ``ValueError`` for contract violations).

An unreachable target is *not* an error: path queries report it through
``math.inf`` / ``None`` (see :mod:`evolvinggraphs.algorithms.temporal_path`).
"""

from __future__ import annotations


class EvolvingGraphError(Exception):
    """Base exception for evolvinggraphs failures."""


class NodeNotFoundError(EvolvingGraphError, KeyError):
    """A node label is not present in the graph."""

    def __init__(self, label):
        super().__init__(f"Node {label!r} not found")
        self.label = label

    def __str__(self):
        return self.args[0]


class TimestampNotFoundError(EvolvingGraphError, KeyError):
    """A timestamp value is not present in the graph."""

    def __init__(self, value):
        super().__init__(f"Timestamp {value!r} not found")
        self.value = value

    def __str__(self):
        return self.args[0]


class AttributeNotFoundError(EvolvingGraphError, KeyError):
    """No edge of the graph carries the requested attribute."""

    def __init__(self, name):
        super().__init__(f"Edge attribute {name!r} not found")
        self.name = name

    def __str__(self):
        return self.args[0]


class IndexOutOfRangeError(EvolvingGraphError, IndexError):
    """An internal id lies outside the current index size."""


class SearchTimeoutError(EvolvingGraphError, TimeoutError):
    """A temporal search exceeded its deadline."""


__all__ = [
    "EvolvingGraphError",
    "NodeNotFoundError",
    "TimestampNotFoundError",
    "AttributeNotFoundError",
    "IndexOutOfRangeError",
    "SearchTimeoutError",
]
