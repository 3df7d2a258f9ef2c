"""Layout vertices — the nodes of the relative layout graph.

A vertex is either *real* (stands for an actual diagram shape) or *dummy*
(a filler inserted so that a long edge can be split into one-rank segments).
Both kinds share one record type and differ only in the ``is_dummy`` flag,
which the graph uses as a tie-break when choosing primary parents.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PRIORITY: int = 1  # baseline priority of every vertex
DUMMY_PREFIX: str = "*"  # dummy vertex names are "*<id>" unless given

_last_id: int = 0


def next_vertex_id() -> int:
    """Return a fresh vertex id. Ids are never reused within a process."""
    global _last_id
    _last_id += 1
    return _last_id


def _reserve_vertex_id(vertex_id: int) -> None:
    """Keep ``next_vertex_id`` above any id handed in explicitly."""
    global _last_id
    if vertex_id > _last_id:
        _last_id = vertex_id


@dataclass(eq=False)
class LayoutVertex:
    """A vertex of the layout graph.

    Prefer ``real_vertex`` / ``dummy_vertex`` over constructing this directly.
    An explicit ``id`` is reserved, so later factory ids never collide with it.

    Equality and hashing are by identity; the graph itself indexes vertices
    by ``id``.

    Attributes:
        id: Unique, stable identifier.
        name: Deterministic tie-break key for ordering.
        priority: Initial priority a graph takes over in ``add_vertex``.
            Higher wins when choosing a primary parent. No effect on rank.
        is_dummy: True for rank-filler vertices.
    """

    id: int
    name: str
    priority: int = DEFAULT_PRIORITY
    is_dummy: bool = False

    def __post_init__(self) -> None:
        _reserve_vertex_id(self.id)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        kind = "dummy" if self.is_dummy else "real"
        return f"LayoutVertex({kind} id={self.id} name={self.name!r} priority={self.priority})"


def real_vertex(name: str, priority: int = DEFAULT_PRIORITY) -> LayoutVertex:
    """Create a vertex that corresponds to a diagram shape."""
    return LayoutVertex(id=next_vertex_id(), name=name, priority=priority)


def dummy_vertex(name: str | None = None) -> LayoutVertex:
    """Create a dummy vertex. Its name defaults to ``"*<id>"``."""
    vertex_id = next_vertex_id()
    return LayoutVertex(
        id=vertex_id,
        name=name if name is not None else f"{DUMMY_PREFIX}{vertex_id}",
        is_dummy=True,
    )


def tie_break_key(vertex: LayoutVertex) -> tuple[str, int]:
    """Sort key for deterministic name-ascending output."""
    return (vertex.name, vertex.id)


def primary_parent_key(vertex: LayoutVertex, priority: int | None = None) -> tuple[int, bool, str, int]:
    """Sort key ranking primary-parent candidates, best first.

    Order: highest priority, then real before dummy, then smallest name,
    then smallest id. ``priority`` overrides ``vertex.priority``; a graph
    passes the priority it holds for the vertex.
    """
    if priority is None:
        priority = vertex.priority
    return (-priority, vertex.is_dummy, vertex.name, vertex.id)
