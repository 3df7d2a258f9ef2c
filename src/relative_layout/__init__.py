"""Relative layout graph engine — incremental layering for diagram layout."""

from relative_layout.builder import PATH_SEPARATOR, LayoutGraphBuilder
from relative_layout.errors import (
    CycleDetected,
    DuplicateEdge,
    DuplicateVertex,
    LayoutGraphError,
    SelfLoop,
    UnknownEdge,
    UnknownVertex,
)
from relative_layout.graph import LayoutEdge, RelativeLayoutGraph
from relative_layout.proper import DummyChain, ProperGraph, insert_dummy_vertices
from relative_layout.vertex import (
    DEFAULT_PRIORITY,
    DUMMY_PREFIX,
    LayoutVertex,
    dummy_vertex,
    real_vertex,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_PRIORITY",
    "DUMMY_PREFIX",
    "PATH_SEPARATOR",
    "CycleDetected",
    "DummyChain",
    "DuplicateEdge",
    "DuplicateVertex",
    "LayoutEdge",
    "LayoutGraphBuilder",
    "LayoutGraphError",
    "LayoutVertex",
    "ProperGraph",
    "RelativeLayoutGraph",
    "SelfLoop",
    "UnknownEdge",
    "UnknownVertex",
    "dummy_vertex",
    "insert_dummy_vertices",
    "real_vertex",
]
