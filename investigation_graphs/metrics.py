"""
Global density metrics for the density panel.

These are the summary numbers shown next to the overlays: how saturated the
graph is, how degrees are spread, which nodes dominate or hang off the
edge, and how evenly the territories are sized.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

import networkx as nx
import numpy as np

from .classification import degrees, hubs
from .snapshot import GraphSnapshot
from .territories import Territory


# =========================================================================== #
# Data classes
# =========================================================================== #

@dataclass
class DensityMetrics:
    n_nodes: int
    n_edges: int
    global_density: float
    average_degree: float
    clustering_coefficient: float
    degree_distribution: Dict[int, int] = field(default_factory=dict)
    hubs: List[str] = field(default_factory=list)
    peripherals: List[str] = field(default_factory=list)
    balance_score: float = 0.8

    def to_dict(self) -> Dict[str, object]:
        return {
            "n_nodes": self.n_nodes,
            "n_edges": self.n_edges,
            "global_density": self.global_density,
            "global_density_text": format_percent(self.global_density),
            "average_degree": self.average_degree,
            "clustering_coefficient": self.clustering_coefficient,
            "degree_distribution": {str(k): v for k, v in sorted(self.degree_distribution.items())},
            "hubs": list(self.hubs),
            "peripherals": list(self.peripherals),
            "balance_score": self.balance_score,
            "balance_score_text": format_percent(self.balance_score),
        }


# =========================================================================== #
# Graph conversion
# =========================================================================== #

def to_undirected_graph(snapshot: GraphSnapshot) -> nx.Graph:
    """Simple undirected view: snapshot nodes, internal edges, no self-loops."""
    G = nx.Graph()
    G.add_nodes_from(n.id for n in snapshot.nodes)
    for e in snapshot.internal_edges():
        if not e.is_self_loop:
            G.add_edge(e.source, e.target)
    return G


# =========================================================================== #
# Individual metrics
# =========================================================================== #

def global_density(snapshot: GraphSnapshot) -> float:
    """Edge count over the n(n-1)/2 undirected maximum."""
    n = len(snapshot.nodes)
    if n <= 1:
        return 0.0
    return len(snapshot.internal_edges()) / (n * (n - 1) / 2)


def average_degree(snapshot: GraphSnapshot) -> float:
    n = len(snapshot.nodes)
    if n == 0:
        return 0.0
    return 2.0 * len(snapshot.internal_edges()) / n


def clustering_coefficient(snapshot: GraphSnapshot) -> float:
    """Mean local clustering over nodes with at least two distinct neighbours."""
    G = to_undirected_graph(snapshot)
    eligible = [n for n in G.nodes() if G.degree(n) >= 2]
    if not eligible:
        return 0.0
    local = nx.clustering(G, eligible)
    return float(np.mean([local[n] for n in eligible]))


def adaptive_hub_threshold(snapshot: GraphSnapshot) -> float:
    return average_degree(snapshot) * 1.5 + 1


def peripherals(snapshot: GraphSnapshot) -> List[str]:
    return [nid for nid, d in degrees(snapshot).items() if d <= 1]


def balance_score(territories: Iterable[Territory]) -> float:
    """
    1 / (1 + coefficient of variation) of territory sizes, counting only
    territories with more than one node. Fewer than two such territories
    gives 0.8.
    """
    sizes = np.array([t.node_count for t in territories if t.node_count > 1], float)
    if sizes.size < 2:
        return 0.8
    mean = float(sizes.mean())
    if mean == 0:
        return 0.0
    cv = float(sizes.std()) / mean
    return 1.0 / (1.0 + cv)


def format_percent(value: float) -> str:
    if 0 < value < 0.01:
        return "< 1%"
    return f"{int(math.floor(value * 100 + 0.5))}%"


# =========================================================================== #
# Aggregate
# =========================================================================== #

def compute_density_metrics(
    snapshot: GraphSnapshot,
    territories: Iterable[Territory] = (),
) -> DensityMetrics:
    deg = degrees(snapshot)
    threshold = adaptive_hub_threshold(snapshot)
    # hubs() takes an integer threshold; degree > t for real t equals degree > floor(t)
    hub_ids = hubs(snapshot, int(math.floor(threshold)))

    return DensityMetrics(
        n_nodes=len(snapshot.nodes),
        n_edges=len(snapshot.internal_edges()),
        global_density=global_density(snapshot),
        average_degree=average_degree(snapshot),
        clustering_coefficient=clustering_coefficient(snapshot),
        degree_distribution=dict(Counter(deg.values())),
        hubs=[n.id for n in snapshot.nodes if n.id in hub_ids],
        peripherals=peripherals(snapshot),
        balance_score=balance_score(territories),
    )
