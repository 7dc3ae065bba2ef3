"""
Hierarchical level assignment.

Levels come from a multi-root breadth-first walk: every root (a node with no
incoming edge) is seeded at level 0 and the first time a node is reached
fixes its level. A later, possibly shorter path through another root never
lowers it. Levels therefore reflect discovery order across the root
frontier, not the shortest distance from any single root.

``LevelPolicy.LONGEST_PATH`` is offered alongside for callers that want
"deepest chain" levels instead.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from .snapshot import GraphSnapshot

logger = logging.getLogger(__name__)


class LevelPolicy(str, Enum):
    FIRST_DISCOVERY = "first_discovery"
    LONGEST_PATH = "longest_path"


@dataclass(frozen=True)
class HierarchyResult:
    """
    ``has_hierarchy`` is False when the snapshot has nodes but no root
    (every node sits on or behind a cycle). Levels are then all 0 and must
    not be presented as a meaningful tree.
    """

    levels: Dict[str, int] = field(default_factory=dict)
    roots: Tuple[str, ...] = ()
    unreached: Tuple[str, ...] = ()
    policy: LevelPolicy = LevelPolicy.FIRST_DISCOVERY
    has_hierarchy: bool = True

    @property
    def max_level(self) -> int:
        return max(self.levels.values(), default=0)

    def nodes_at(self, level: int) -> List[str]:
        return [nid for nid, lvl in self.levels.items() if lvl == level]

    def to_dict(self) -> Dict[str, object]:
        return {
            "levels": dict(self.levels),
            "roots": list(self.roots),
            "unreached": list(self.unreached),
            "policy": self.policy.value,
            "has_hierarchy": self.has_hierarchy,
            "max_level": self.max_level,
        }


# =========================================================================== #
# Helpers
# =========================================================================== #

def _children(snapshot: GraphSnapshot) -> Dict[str, List[str]]:
    """Out-neighbours per node in edge order; dangling targets dropped."""
    ids = snapshot.node_ids
    children: Dict[str, List[str]] = {n.id: [] for n in snapshot.nodes}
    for _, edge in snapshot.iter_edges():
        if edge.source in ids and edge.target in ids:
            children[edge.source].append(edge.target)
    return children


def _roots(snapshot: GraphSnapshot) -> List[str]:
    has_incoming = {e.target for e in snapshot.edges}
    return [n.id for n in snapshot.nodes if n.id not in has_incoming]


def _first_discovery(roots: List[str], children: Dict[str, List[str]]) -> Dict[str, int]:
    levels: Dict[str, int] = {}
    visited = set()
    queue = deque((r, 0) for r in roots)

    while queue:
        nid, level = queue.popleft()
        if nid in visited:
            continue
        visited.add(nid)
        levels[nid] = level

        for child in children.get(nid, ()):
            if child not in visited:
                queue.append((child, level + 1))

    return levels


def _longest_path(
    roots: List[str],
    children: Dict[str, List[str]],
    discovered: Dict[str, int],
) -> Dict[str, int]:
    """
    Relax levels along a topological order of the reachable subgraph.
    Nodes Kahn's algorithm cannot release (cycles and everything behind
    them) keep their first-discovery level.
    """
    reachable = set(discovered)
    in_degree = {n: 0 for n in reachable}
    for src in reachable:
        for dst in children.get(src, ()):
            if dst in reachable:
                in_degree[dst] += 1

    levels = dict(discovered)
    depth = {n: 0 for n in reachable}
    queue = deque(r for r in roots if in_degree.get(r, 0) == 0)
    released = set()

    while queue:
        node = queue.popleft()
        released.add(node)
        for dst in children.get(node, ()):
            if dst not in reachable:
                continue
            depth[dst] = max(depth[dst], depth[node] + 1)
            in_degree[dst] -= 1
            if in_degree[dst] == 0:
                queue.append(dst)

    for node in released:
        levels[node] = depth[node]

    stuck = reachable - released
    if stuck:
        logger.debug("[hierarchy] %d node(s) behind cycles keep discovery levels", len(stuck))
    return levels


# =========================================================================== #
# Main entry point
# =========================================================================== #

def assign_levels(
    snapshot: GraphSnapshot,
    policy: LevelPolicy | str = LevelPolicy.FIRST_DISCOVERY,
) -> HierarchyResult:
    """Assign a non-negative level to every node of the snapshot."""
    try:
        policy = LevelPolicy(policy)
    except ValueError:
        raise ValueError(
            f"unknown level policy {policy!r}; expected one of "
            f"{[p.value for p in LevelPolicy]}"
        ) from None

    if not snapshot.nodes:
        return HierarchyResult(policy=policy, has_hierarchy=True)

    roots = _roots(snapshot)
    if not roots:
        logger.info("[hierarchy] No root nodes: graph is cycle-only, no hierarchy established")
        return HierarchyResult(
            levels={n.id: 0 for n in snapshot.nodes},
            roots=(),
            unreached=tuple(n.id for n in snapshot.nodes),
            policy=policy,
            has_hierarchy=False,
        )

    children = _children(snapshot)
    levels = _first_discovery(roots, children)
    if policy is LevelPolicy.LONGEST_PATH:
        levels = _longest_path(roots, children, levels)

    unreached = tuple(n.id for n in snapshot.nodes if n.id not in levels)
    full = {n.id: levels.get(n.id, 0) for n in snapshot.nodes}

    return HierarchyResult(
        levels=full,
        roots=tuple(roots),
        unreached=unreached,
        policy=policy,
        has_hierarchy=True,
    )
