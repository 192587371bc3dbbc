from .edges import EdgeStore, TimeEdge
from .graph import (
    AttributeEvolvingGraph,
    Edge,
    EvolvingGraph,
    new_attribute_graph,
    new_graph,
)
from .index import NodeIndex, TimestampIndex

__all__ = [
    "AttributeEvolvingGraph",
    "Edge",
    "EdgeStore",
    "EvolvingGraph",
    "NodeIndex",
    "TimeEdge",
    "TimestampIndex",
    "new_attribute_graph",
    "new_graph",
]
