"""Restoring properness by dummy vertex insertion.

A layered graph is *proper* when every edge connects adjacent ranks. After
incremental edits a relative layout graph may contain long edges; the layout
then needs a proper version of it, where each long edge (p → c) is replaced
by the chain

    p → d₁ → d₂ → … → dₖ → c

and each dummy dᵢ lives at rank ``rank(p) + i``. Original vertices keep
their ranks, since c still has a parent (dₖ) exactly one rank above it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from relative_layout.graph import RelativeLayoutGraph
from relative_layout.vertex import LayoutVertex, dummy_vertex

logger = logging.getLogger(__name__)


@dataclass
class DummyChain:
    """The dummy vertices that replaced a single long edge."""

    parent: LayoutVertex
    child: LayoutVertex
    dummies: list[LayoutVertex]


@dataclass
class ProperGraph:
    """A proper copy of a layout graph plus the chains inserted to make it so."""

    graph: RelativeLayoutGraph
    dummy_chains: list[DummyChain] = field(default_factory=list)

    def chain_for(self, parent: LayoutVertex, child: LayoutVertex) -> DummyChain | None:
        """The chain that replaced ``parent → child``, if that edge was long."""
        for chain in self.dummy_chains:
            if chain.parent is parent and chain.child is child:
                return chain
        return None


def insert_dummy_vertices(graph: RelativeLayoutGraph) -> ProperGraph:
    """Return a proper copy of ``graph``; the input is left untouched.

    Long edges are processed in (parent, child) name order, so dummy ids
    are assigned deterministically for a given graph.

    Args:
        graph: Any relative layout graph, proper or not.

    Returns:
        A ``ProperGraph`` whose graph satisfies ``is_proper()``.
    """
    proper = graph.copy()
    chains: list[DummyChain] = []

    # Snapshot up-front: the copy's edge set changes while chains are spliced in.
    for edge in graph.get_improper_edges():
        parent_rank = graph.get_rank(edge.parent)
        steps = graph.get_rank(edge.child) - parent_rank - 1

        # Build the chain top-down so every insertion extends a path from the parent.
        proper.remove_edge(edge.parent, edge.child)
        dummies: list[LayoutVertex] = []
        chain_prev = edge.parent
        for _ in range(steps):
            dummy = dummy_vertex()
            proper.add_vertex(dummy)
            proper.add_edge(chain_prev, dummy)
            dummies.append(dummy)
            chain_prev = dummy
        proper.add_edge(chain_prev, edge.child)

        chains.append(DummyChain(parent=edge.parent, child=edge.child, dummies=dummies))
        logger.debug("Replaced %s -> %s with %d dummy vertices", edge.parent, edge.child, steps)

    return ProperGraph(graph=proper, dummy_chains=chains)
