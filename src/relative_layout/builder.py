"""Build layout graphs from compact path notation.

A path such as ``"P1<-*1<-C"`` reads right to left as "C is a child of *1,
which is a child of P1", i.e. it adds the edges P1 → *1 and *1 → C.
Names starting with ``*`` create dummy vertices; all others are real.
"""

from __future__ import annotations

from relative_layout.graph import RelativeLayoutGraph
from relative_layout.vertex import DUMMY_PREFIX, LayoutVertex, dummy_vertex, real_vertex

PATH_SEPARATOR: str = "<-"


class LayoutGraphBuilder:
    """Creates vertices by name and wires them up from path strings."""

    def __init__(self, graph: RelativeLayoutGraph | None = None) -> None:
        self.graph = graph if graph is not None else RelativeLayoutGraph()
        self._by_name: dict[str, LayoutVertex] = {}

    def add_vertex(self, name: str, priority: int | None = None) -> LayoutVertex:
        """Return the vertex called ``name``, creating it on first use.

        If ``priority`` is given it is applied whether or not the vertex
        already existed. A name whose vertex was removed from the graph
        counts as unknown and gets a fresh vertex.
        """
        vertex = self._by_name.get(name)
        if vertex is not None and vertex not in self.graph:
            del self._by_name[name]
            vertex = None
        if vertex is None:
            vertex = dummy_vertex(name) if name.startswith(DUMMY_PREFIX) else real_vertex(name)
            self.graph.add_vertex(vertex)
            self._by_name[name] = vertex
        if priority is not None:
            self.graph.set_priority(vertex, priority)
        return vertex

    def get_vertex(self, name: str) -> LayoutVertex:
        """Raises KeyError for an unknown name or one whose vertex was removed."""
        vertex = self._by_name[name]
        if vertex not in self.graph:
            raise KeyError(name)
        return vertex

    def set_up(self, *paths: str) -> RelativeLayoutGraph:
        """Add every edge described by ``paths``; existing edges are skipped.

        Raises:
            ValueError: a path has an empty segment.
        """
        for path in paths:
            names = [segment.strip() for segment in path.split(PATH_SEPARATOR)]
            if not all(names):
                raise ValueError(f"Empty vertex name in path: {path!r}")
            vertices = [self.add_vertex(name) for name in names]
            for parent, child in zip(vertices, vertices[1:]):
                if not self.graph.has_edge(parent, child):
                    self.graph.add_edge(parent, child)
        return self.graph
