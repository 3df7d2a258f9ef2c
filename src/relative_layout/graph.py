"""Relative layout graph — incremental layering over a multi-parent DAG.

The graph keeps, for a DAG of layout vertices, the derived structure an
incremental diagram layout needs to place new shapes next to existing ones:

  1. Rank        longest-path layer of each vertex (roots are rank 0)
  2. Primary     one deterministically chosen parent per non-root vertex,
                 forming a spanning "backbone" tree over the DAG
  3. Properness  whether every edge spans exactly one rank

Rank is stored per vertex and maintained incrementally: a mutation only
re-derives the ranks of the touched vertex and its descendants, in
topological order. Primary relations are never stored; they are computed
from the local neighbourhood when queried, so they always match the
current edges and priorities.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import networkx as nx

from relative_layout.errors import (
    CycleDetected,
    DuplicateEdge,
    DuplicateVertex,
    SelfLoop,
    UnknownEdge,
    UnknownVertex,
)
from relative_layout.vertex import LayoutVertex, primary_parent_key, tie_break_key

logger = logging.getLogger(__name__)

# Node attribute keys on the underlying DiGraph (nodes are keyed by vertex id).
VERTEX_ATTR = "vertex"
RANK_ATTR = "rank"
PRIORITY_ATTR = "priority"


@dataclass(frozen=True)
class LayoutEdge:
    """A directed parent → child edge of the layout graph."""

    parent: LayoutVertex
    child: LayoutVertex


class RelativeLayoutGraph:
    """A DAG of layout vertices with rank and primary-parent derivations.

    The graph is passive and single-writer: callers mutate it with
    ``add_vertex``/``remove_vertex``/``add_edge``/``remove_edge`` and read
    the derived relations back. A mutation that raises leaves the graph
    unchanged.

    Example::

        graph = RelativeLayoutGraph()
        p, c = real_vertex("P"), real_vertex("C")
        graph.add_vertex(p)
        graph.add_vertex(c)
        graph.add_edge(p, c)
        graph.get_rank(c)            # 1
        graph.get_primary_parent(c)  # p
    """

    def __init__(self) -> None:
        self._graph: nx.DiGraph = nx.DiGraph()

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, vertex: object) -> bool:
        return isinstance(vertex, LayoutVertex) and vertex.id in self._graph

    def __repr__(self) -> str:
        return (
            f"RelativeLayoutGraph(vertices={self._graph.number_of_nodes()}, "
            f"edges={self._graph.number_of_edges()})"
        )

    # ─── Mutations ────────────────────────────────────────────────────────────

    def add_vertex(self, vertex: LayoutVertex) -> None:
        """Insert a vertex with no edges.

        Raises:
            DuplicateVertex: a vertex with the same id is already present.
        """
        if vertex.id in self._graph:
            raise DuplicateVertex(vertex)
        self._graph.add_node(vertex.id, **{VERTEX_ATTR: vertex, RANK_ATTR: 0, PRIORITY_ATTR: vertex.priority})
        logger.debug("Added vertex %r", vertex)

    def remove_vertex(self, vertex: LayoutVertex) -> None:
        """Remove a vertex together with all its incoming and outgoing edges.

        Former children and their descendants get their ranks re-derived from
        the parents that remain.

        Raises:
            UnknownVertex: the vertex is not in the graph.
        """
        vertex_id = self._require(vertex)
        orphaned = list(self._graph.successors(vertex_id))
        self._graph.remove_node(vertex_id)
        logger.debug("Removed vertex %r (%d children affected)", vertex, len(orphaned))
        self._update_ranks(orphaned)

    def add_edge(self, parent: LayoutVertex, child: LayoutVertex) -> None:
        """Insert the directed edge ``parent → child``.

        The reachability check runs before anything is inserted, so a
        rejected edge leaves the graph untouched.

        Raises:
            UnknownVertex: either endpoint is not in the graph.
            SelfLoop: parent and child are the same vertex.
            DuplicateEdge: the edge already exists.
            CycleDetected: child already reaches parent.
        """
        parent_id = self._require(parent)
        child_id = self._require(child)
        if parent_id == child_id:
            raise SelfLoop(parent)
        if self._graph.has_edge(parent_id, child_id):
            raise DuplicateEdge(parent, child)
        if nx.has_path(self._graph, child_id, parent_id):
            raise CycleDetected(parent, child)

        self._graph.add_edge(parent_id, child_id)
        logger.debug("Added edge %s -> %s", parent, child)

        # Ranks only ever grow on insertion; nothing to do if child is already deep enough.
        if self._rank(child_id) <= self._rank(parent_id):
            self._update_ranks([child_id])

    def remove_edge(self, parent: LayoutVertex, child: LayoutVertex) -> None:
        """Remove the directed edge ``parent → child``.

        Raises:
            UnknownVertex: either endpoint is not in the graph.
            UnknownEdge: the edge does not exist.
        """
        parent_id = self._require(parent)
        child_id = self._require(child)
        if not self._graph.has_edge(parent_id, child_id):
            raise UnknownEdge(parent, child)

        self._graph.remove_edge(parent_id, child_id)
        logger.debug("Removed edge %s -> %s", parent, child)
        self._update_ranks([child_id])

    def set_priority(self, vertex: LayoutVertex, priority: int) -> None:
        """Change a vertex's priority in this graph. Primary relations follow on next query.

        The priority is held per graph, seeded from ``vertex.priority`` when the
        vertex is added; the vertex record and any copies of the graph keep theirs.
        """
        vertex_id = self._require(vertex)
        self._graph.nodes[vertex_id][PRIORITY_ATTR] = priority
        logger.debug("Set priority of %s to %d", vertex, priority)

    def get_priority(self, vertex: LayoutVertex) -> int:
        """The priority this graph uses for the vertex."""
        return self._priority(self._require(vertex))

    def copy(self) -> RelativeLayoutGraph:
        """Return an independent graph sharing the same vertex records.

        Edges, ranks and priorities are per graph, so mutating either graph
        never affects the other.
        """
        clone = RelativeLayoutGraph()
        clone._graph = self._graph.copy()
        return clone

    # ─── Rank ─────────────────────────────────────────────────────────────────

    def get_rank(self, vertex: LayoutVertex) -> int:
        """Longest-path layer of the vertex; 0 for roots.

        Raises:
            UnknownVertex: the vertex is not in the graph.
        """
        return self._rank(self._require(vertex))

    def get_layers(self) -> list[list[LayoutVertex]]:
        """Vertices grouped by rank, each layer in name order."""
        layers: list[list[LayoutVertex]] = [[] for _ in range(self.layer_count)]
        for node_id, rank in self._graph.nodes(data=RANK_ATTR):
            layers[rank].append(self._vertex(node_id))
        for layer in layers:
            layer.sort(key=tie_break_key)
        return layers

    @property
    def layer_count(self) -> int:
        """Number of ranks in use (0 for an empty graph)."""
        return max((rank + 1 for _, rank in self._graph.nodes(data=RANK_ATTR)), default=0)

    # ─── Primary relations ────────────────────────────────────────────────────

    def get_primary_parent(self, vertex: LayoutVertex) -> LayoutVertex | None:
        """The chosen parent of the vertex, or None for a root.

        Among all parents the best one wins by highest priority, then real
        over dummy, then smallest name (then smallest id).

        Raises:
            UnknownVertex: the vertex is not in the graph.
        """
        parent_id = self._primary_parent_id(self._require(vertex))
        return None if parent_id is None else self._vertex(parent_id)

    def get_primary_children(self, vertex: LayoutVertex) -> list[LayoutVertex]:
        """Vertices whose primary parent is this vertex, in name order."""
        vertex_id = self._require(vertex)
        return self._sorted(
            child_id
            for child_id in self._graph.successors(vertex_id)
            if self._primary_parent_id(child_id) == vertex_id
        )

    def get_primary_siblings(self, vertex: LayoutVertex) -> list[LayoutVertex]:
        """Other primary children of this vertex's primary parent, in name order.

        Empty for a root.
        """
        vertex_id = self._require(vertex)
        parent_id = self._primary_parent_id(vertex_id)
        if parent_id is None:
            return []
        return self._sorted(
            child_id
            for child_id in self._graph.successors(parent_id)
            if child_id != vertex_id and self._primary_parent_id(child_id) == parent_id
        )

    # ─── Properness ───────────────────────────────────────────────────────────

    def is_proper(self) -> bool:
        """True iff every edge connects vertices on adjacent ranks."""
        return all(self._rank(child) == self._rank(parent) + 1 for parent, child in self._graph.edges())

    def get_improper_edges(self) -> list[LayoutEdge]:
        """Edges that skip at least one rank, in (parent, child) name order."""
        improper = [
            LayoutEdge(self._vertex(parent), self._vertex(child))
            for parent, child in self._graph.edges()
            if self._rank(child) - self._rank(parent) > 1
        ]
        improper.sort(key=_edge_key)
        return improper

    # ─── Structure queries ────────────────────────────────────────────────────

    @property
    def vertices(self) -> list[LayoutVertex]:
        """All vertices, in name order."""
        return self._sorted(self._graph.nodes)

    @property
    def edges(self) -> list[LayoutEdge]:
        """All edges, in (parent, child) name order."""
        edges = [LayoutEdge(self._vertex(parent), self._vertex(child)) for parent, child in self._graph.edges()]
        edges.sort(key=_edge_key)
        return edges

    def has_vertex(self, vertex: LayoutVertex) -> bool:
        return vertex.id in self._graph

    def has_edge(self, parent: LayoutVertex, child: LayoutVertex) -> bool:
        return self._graph.has_edge(parent.id, child.id)

    def get_vertex(self, vertex_id: int) -> LayoutVertex:
        """Look a vertex up by id. Raises KeyError if absent."""
        if vertex_id not in self._graph:
            raise KeyError(vertex_id)
        return self._vertex(vertex_id)

    def get_parents(self, vertex: LayoutVertex) -> list[LayoutVertex]:
        return self._sorted(self._graph.predecessors(self._require(vertex)))

    def get_children(self, vertex: LayoutVertex) -> list[LayoutVertex]:
        return self._sorted(self._graph.successors(self._require(vertex)))

    def is_root(self, vertex: LayoutVertex) -> bool:
        return self._graph.in_degree(self._require(vertex)) == 0

    def get_roots(self) -> list[LayoutVertex]:
        """Vertices without parents, in name order."""
        return self._sorted(node_id for node_id, degree in self._graph.in_degree() if degree == 0)

    # ─── Internals ────────────────────────────────────────────────────────────

    def _require(self, vertex: LayoutVertex) -> int:
        if vertex.id not in self._graph:
            raise UnknownVertex(vertex)
        return vertex.id

    def _vertex(self, vertex_id: int) -> LayoutVertex:
        return self._graph.nodes[vertex_id][VERTEX_ATTR]

    def _rank(self, vertex_id: int) -> int:
        return self._graph.nodes[vertex_id][RANK_ATTR]

    def _priority(self, vertex_id: int) -> int:
        return self._graph.nodes[vertex_id][PRIORITY_ATTR]

    def _sorted(self, vertex_ids: Iterable[int]) -> list[LayoutVertex]:
        return sorted((self._vertex(vertex_id) for vertex_id in vertex_ids), key=tie_break_key)

    def _primary_parent_id(self, vertex_id: int) -> int | None:
        parent_ids = list(self._graph.predecessors(vertex_id))
        if not parent_ids:
            return None
        return min(
            parent_ids,
            key=lambda parent_id: primary_parent_key(self._vertex(parent_id), self._priority(parent_id)),
        )

    def _update_ranks(self, start_ids: Iterable[int]) -> None:
        """Re-derive ranks of ``start_ids`` and everything below them.

        Vertices are visited parents-first, so each rank is computed from
        up-to-date parent ranks. Parents outside the affected set are
        untouched by the mutation and already correct.
        """
        affected: set[int] = set()
        for start_id in start_ids:
            if start_id not in affected:
                affected.add(start_id)
                affected |= nx.descendants(self._graph, start_id)
        if not affected:
            return

        nodes = self._graph.nodes
        changed = 0
        for vertex_id in nx.topological_sort(self._graph.subgraph(affected)):
            rank = max((nodes[parent_id][RANK_ATTR] + 1 for parent_id in self._graph.predecessors(vertex_id)), default=0)
            if nodes[vertex_id][RANK_ATTR] != rank:
                nodes[vertex_id][RANK_ATTR] = rank
                changed += 1
        logger.debug("Re-derived ranks of %d vertices, %d changed", len(affected), changed)


def _edge_key(edge: LayoutEdge) -> tuple[tuple[str, int], tuple[str, int]]:
    return (tie_break_key(edge.parent), tie_break_key(edge.child))
