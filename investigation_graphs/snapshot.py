"""
Immutable graph snapshot for one analysis pass.

A snapshot is the only graph input every analysis accepts. It holds nodes
unique by id and edges in a stable order (an edge's index is its identity
for the renderer during one render cycle). Edges may reference node ids
that are not in the snapshot; those dangling references are kept and every
analysis ignores the missing endpoint.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

Position = Tuple[float, float]

EDGE_TYPES = ("relation", "equivalence", "group")


@dataclass(frozen=True)
class Node:
    id: str
    label: str = ""
    context: str = ""
    position: Optional[Position] = None


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    type: str = "relation"
    label: str = ""
    context: str = ""

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass(frozen=True)
class DensitySample:
    """Intensity score in [0, 1] attached to one node by the scoring provider."""

    node_id: str
    intensity: float

    def __post_init__(self):
        value = float(self.intensity)
        if not math.isfinite(value) or value < 0.0 or value > 1.0:
            raise ValueError(
                f"intensity for node {self.node_id!r} must lie in [0, 1], got {self.intensity!r}"
            )
        object.__setattr__(self, "intensity", value)


@dataclass(frozen=True)
class GraphSnapshot:
    nodes: Tuple[Node, ...] = field(default_factory=tuple)
    edges: Tuple[Edge, ...] = field(default_factory=tuple)

    def __post_init__(self):
        nodes = tuple(self.nodes)
        seen = set()
        for node in nodes:
            if node.id in seen:
                raise ValueError(f"duplicate node id in snapshot: {node.id!r}")
            seen.add(node.id)
        object.__setattr__(self, "nodes", nodes)
        object.__setattr__(self, "edges", tuple(self.edges))

    # ------------------------------------------------------------------ #
    @classmethod
    def build(
        cls,
        nodes: Iterable[Node | str],
        edges: Iterable[Edge | Tuple[str, str]] = (),
    ) -> "GraphSnapshot":
        """Convenience constructor accepting bare ids and (source, target) pairs."""
        node_objs = [n if isinstance(n, Node) else Node(id=str(n), label=str(n)) for n in nodes]
        edge_objs = [e if isinstance(e, Edge) else Edge(source=str(e[0]), target=str(e[1])) for e in edges]
        return cls(nodes=tuple(node_objs), edges=tuple(edge_objs))

    @cached_property
    def node_ids(self) -> frozenset:
        return frozenset(n.id for n in self.nodes)

    @cached_property
    def _by_id(self) -> Dict[str, Node]:
        return {n.id: n for n in self.nodes}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.node_ids

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, node_id: str) -> Optional[Node]:
        return self._by_id.get(node_id)

    def iter_edges(self) -> Iterator[Tuple[int, Edge]]:
        """Yield (edge index, edge) in snapshot order."""
        return enumerate(self.edges)

    def internal_edges(self) -> List[Edge]:
        """Edges whose both endpoints exist in the snapshot."""
        ids = self.node_ids
        return [e for e in self.edges if e.source in ids and e.target in ids]

    def dangling_edges(self) -> List[int]:
        ids = self.node_ids
        return [i for i, e in self.iter_edges() if e.source not in ids or e.target not in ids]

    # ------------------------------------------------------------------ #
    def positions(self) -> Dict[str, Position]:
        """Known node positions, in node order. Non-finite coordinates count as unknown."""
        return {n.id: n.position for n in self.nodes if is_known_position(n.position)}

    def with_positions(self, positions: Mapping[str, Position]) -> "GraphSnapshot":
        """
        Return a new snapshot with positions taken from ``positions``.

        Ids in the mapping that are not snapshot nodes are ignored; nodes absent
        from the mapping keep their current position.
        """
        nodes = tuple(
            replace(n, position=_as_position(positions[n.id])) if n.id in positions else n
            for n in self.nodes
        )
        return GraphSnapshot(nodes=nodes, edges=self.edges)

    def filter_by_context(self, context: Optional[str]) -> "GraphSnapshot":
        """
        Subgraph of the nodes whose ``context`` equals ``context`` and the edges
        with both endpoints among them, in their original order.

        An empty context returns the snapshot unchanged.
        """
        if not context:
            return self
        nodes = tuple(n for n in self.nodes if n.context == context)
        kept = {n.id for n in nodes}
        edges = tuple(e for e in self.edges if e.source in kept and e.target in kept)
        return GraphSnapshot(nodes=nodes, edges=edges)


def _as_position(value) -> Optional[Position]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return float(value["x"]), float(value["y"])
    x, y = value
    return float(x), float(y)


def is_known_position(value) -> bool:
    """A position is known when it exists and both coordinates are finite."""
    if value is None:
        return False
    try:
        x, y = value
        return math.isfinite(float(x)) and math.isfinite(float(y))
    except (TypeError, ValueError):
        return False


def known_positions(positions: Mapping[str, Optional[Position]]) -> Dict[str, Position]:
    """Drop unknown entries; geometry builders only ever see finite points."""
    return {nid: p for nid, p in positions.items() if is_known_position(p)}
