"""
Structural classification: degrees, hubs, sources, sinks.

All functions are pure over a GraphSnapshot. Dangling edges (an endpoint id
absent from the snapshot) only count for the endpoint that exists.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Set

from .snapshot import GraphSnapshot

logger = logging.getLogger(__name__)


# =========================================================================== #
# Data classes
# =========================================================================== #

@dataclass(frozen=True)
class StructuralClassification:
    hubs: FrozenSet[str] = field(default_factory=frozenset)
    sources: FrozenSet[str] = field(default_factory=frozenset)
    sinks: FrozenSet[str] = field(default_factory=frozenset)
    degrees: Dict[str, int] = field(default_factory=dict)
    threshold: int = 2

    def to_dict(self) -> Dict[str, object]:
        return {
            "hubs": sorted(self.hubs),
            "sources": sorted(self.sources),
            "sinks": sorted(self.sinks),
            "degrees": dict(self.degrees),
            "threshold": self.threshold,
        }


# =========================================================================== #
# Degrees
# =========================================================================== #

def in_degrees(snapshot: GraphSnapshot) -> Dict[str, int]:
    ids = snapshot.node_ids
    counts = Counter(e.target for e in snapshot.edges if e.target in ids)
    return {n.id: counts.get(n.id, 0) for n in snapshot.nodes}


def out_degrees(snapshot: GraphSnapshot) -> Dict[str, int]:
    ids = snapshot.node_ids
    counts = Counter(e.source for e in snapshot.edges if e.source in ids)
    return {n.id: counts.get(n.id, 0) for n in snapshot.nodes}


def degrees(snapshot: GraphSnapshot) -> Dict[str, int]:
    """Undirected degree; a self-loop adds two."""
    ins = in_degrees(snapshot)
    outs = out_degrees(snapshot)
    return {nid: ins[nid] + outs[nid] for nid in ins}


# =========================================================================== #
# Classification
# =========================================================================== #

def hubs(snapshot: GraphSnapshot, threshold: int = 2) -> Set[str]:
    """Nodes whose degree is strictly greater than ``threshold``."""
    if not threshold >= 0:
        raise ValueError(f"hub threshold must be non-negative, got {threshold!r}")
    return {nid for nid, d in degrees(snapshot).items() if d > threshold}


def sources(snapshot: GraphSnapshot) -> Set[str]:
    """Nodes with no incoming edge, isolated nodes included."""
    return {nid for nid, d in in_degrees(snapshot).items() if d == 0}


def sinks(snapshot: GraphSnapshot) -> Set[str]:
    """Nodes with no outgoing edge."""
    return {nid for nid, d in out_degrees(snapshot).items() if d == 0}


def classify(snapshot: GraphSnapshot, threshold: int = 2) -> StructuralClassification:
    hub_set = hubs(snapshot, threshold)
    deg = degrees(snapshot)

    dangling = snapshot.dangling_edges()
    if dangling:
        logger.debug("[classification] %d dangling edge(s) ignored", len(dangling))

    return StructuralClassification(
        hubs=frozenset(hub_set),
        sources=frozenset(sources(snapshot)),
        sinks=frozenset(sinks(snapshot)),
        degrees=deg,
        threshold=threshold,
    )


# =========================================================================== #
# Search
# =========================================================================== #

def find_nodes(snapshot: GraphSnapshot, query: str) -> List[str]:
    """
    Ids of nodes whose label contains ``query`` (case-insensitive) or whose
    id equals it, in node order.
    """
    needle = query.lower()
    return [n.id for n in snapshot.nodes if n.id == query or needle in n.label.lower()]
