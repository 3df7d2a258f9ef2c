"""Exceptions raised by the relative layout graph.

All of them derive from ``LayoutGraphError``, which is itself a
``networkx.NetworkXException``. A mutation that raises leaves the graph
exactly as it was before the call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from relative_layout.vertex import LayoutVertex


class LayoutGraphError(nx.NetworkXException):
    """Base exception for layout graph operations."""


class UnknownVertex(LayoutGraphError):
    """Raised when a vertex is not in the graph."""

    def __init__(self, vertex: LayoutVertex) -> None:
        self.vertex = vertex
        super().__init__(f"Vertex not in graph: {vertex}")


class DuplicateVertex(LayoutGraphError):
    """Raised when adding a vertex whose id is already in the graph."""

    def __init__(self, vertex: LayoutVertex) -> None:
        self.vertex = vertex
        super().__init__(f"Vertex already in graph: {vertex}")


class UnknownEdge(LayoutGraphError):
    """Raised when removing an edge that is not in the graph."""

    def __init__(self, parent: LayoutVertex, child: LayoutVertex) -> None:
        self.parent = parent
        self.child = child
        super().__init__(f"Edge not in graph: {parent} -> {child}")


class DuplicateEdge(LayoutGraphError):
    """Raised when adding an edge that is already in the graph."""

    def __init__(self, parent: LayoutVertex, child: LayoutVertex) -> None:
        self.parent = parent
        self.child = child
        super().__init__(f"Edge already in graph: {parent} -> {child}")


class SelfLoop(LayoutGraphError):
    """Raised when adding an edge from a vertex to itself."""

    def __init__(self, vertex: LayoutVertex) -> None:
        self.vertex = vertex
        super().__init__(f"Self-loop not allowed: {vertex}")


class CycleDetected(LayoutGraphError):
    """Raised when an edge would close a cycle (child already reaches parent)."""

    def __init__(self, parent: LayoutVertex, child: LayoutVertex) -> None:
        self.parent = parent
        self.child = child
        super().__init__(f"Edge {parent} -> {child} would create a cycle")
