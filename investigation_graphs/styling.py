"""
Overlay styling maps for the renderer.

The renderer owns drawing; this module only decides what each node and
edge should look like for a given analysis:

  - density colouring: colour pair, border width and shadow by band,
    with a neutral grey for unscored nodes
  - highlight colouring: analysis colour for matched nodes (hubs, sources,
    sinks, search hits), defaults for the rest
  - edge colouring by relation type, keyed by edge index, and the edges
    along a node path
  - level overlay for hierarchical layouts
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .density import DensityModel, Severity
from .hierarchy import HierarchyResult
from .presets import OverlayStyle
from .snapshot import GraphSnapshot


# =============================================================================
# Data classes
# =============================================================================

@dataclass(frozen=True)
class NodeOverlayStyle:
    background: str
    border: str
    border_width: int = 2
    shadow: bool = False
    shadow_color: Optional[str] = None
    shadow_size: int = 0


@dataclass(frozen=True)
class EdgeOverlayStyle:
    color: str
    highlight: str
    arrows: str = "to"
    width: int = 1


@dataclass
class OverlayStyleMaps:
    nodes: Dict[str, NodeOverlayStyle] = field(default_factory=dict)
    edges: Dict[int, EdgeOverlayStyle] = field(default_factory=dict)
    levels: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "nodes": {nid: vars(s) for nid, s in self.nodes.items()},
            "edges": {str(i): vars(s) for i, s in self.edges.items()},
            "levels": dict(self.levels),
        }


# =============================================================================
# Constants
# =============================================================================

DEFAULT_NODE = NodeOverlayStyle(background="white", border="#4f46e5")

# background, border, border width
_DENSITY_NODE: Dict[Severity, tuple] = {
    Severity.HIGH: ("#fecaca", "#ef4444", 5),
    Severity.MEDIUM: ("#fed7aa", "#f59e0b", 4),
    Severity.LOW: ("#dbeafe", "#3b82f6", 3),
    Severity.NO_DATA: ("#f3f4f6", "#6b7280", 2),
}

_EDGE_TYPE_COLORS = {
    "relation": ("#3b82f6", "#1d4ed8"),
    "equivalence": ("#22c55e", "#15803d"),
    "group": ("#a855f7", "#7e22ce"),
}
_EDGE_FALLBACK = ("#6b7280", "#374151")


# =============================================================================
# Node styling
# =============================================================================

def compute_density_node_styles(
    snapshot: GraphSnapshot,
    model: DensityModel,
) -> Dict[str, NodeOverlayStyle]:
    """Band colouring for every snapshot node; shadows only on scored nodes."""
    styles: Dict[str, NodeOverlayStyle] = {}
    for node in snapshot.nodes:
        band = model.band(node.id)
        background, border, width = _DENSITY_NODE[band]
        scored = band is not Severity.NO_DATA
        styles[node.id] = NodeOverlayStyle(
            background=background,
            border=border,
            border_width=width,
            shadow=scored,
            shadow_color=border if scored else None,
            shadow_size=20 if scored else 0,
        )
    return styles


def compute_highlight_styles(
    snapshot: GraphSnapshot,
    highlighted: Iterable[str],
    color: Optional[str] = None,
) -> Dict[str, NodeOverlayStyle]:
    """
    Highlight nodes whose id or label is in ``highlighted``.

    With ``color`` the highlight uses that colour and a translucent
    background (``#rrggbb33``); without it the generic red highlight applies.
    """
    keys = set(highlighted)
    styles: Dict[str, NodeOverlayStyle] = {}
    for node in snapshot.nodes:
        hit = node.id in keys or node.label in keys
        if not hit:
            styles[node.id] = DEFAULT_NODE
        elif color:
            styles[node.id] = NodeOverlayStyle(background=color + "33", border=color)
        else:
            styles[node.id] = NodeOverlayStyle(background="#fecaca", border="#dc2626")
    return styles


def analysis_color(analysis: str, style: Optional[OverlayStyle] = None) -> str:
    style = style or OverlayStyle()
    colors = {
        "hubs": style.hub_color,
        "sources": style.source_color,
        "sinks": style.sink_color,
    }
    if analysis not in colors:
        raise ValueError(f"unknown analysis {analysis!r}; expected one of {sorted(colors)}")
    return colors[analysis]


# =============================================================================
# Edge styling
# =============================================================================

def compute_edge_styles(
    snapshot: GraphSnapshot,
    highlighted_edges: Iterable[int] = (),
) -> Dict[int, EdgeOverlayStyle]:
    """Type colouring per edge index; highlighted edges drawn red and wider."""
    marked = set(highlighted_edges)
    styles: Dict[int, EdgeOverlayStyle] = {}
    for idx, edge in snapshot.iter_edges():
        color, highlight = _EDGE_TYPE_COLORS.get(edge.type, _EDGE_FALLBACK)
        arrows = "to, from" if edge.type == "equivalence" else "to"
        if idx in marked:
            styles[idx] = EdgeOverlayStyle(color="#dc2626", highlight=highlight, arrows=arrows, width=3)
        else:
            styles[idx] = EdgeOverlayStyle(color=color, highlight=highlight, arrows=arrows)
    return styles


def path_edge_indices(snapshot: GraphSnapshot, path: Sequence[str]) -> List[int]:
    """
    Indices of the edges joining consecutive nodes of ``path``, in either
    direction. Feed the result to ``compute_edge_styles(highlighted_edges=...)``.
    """
    steps = set()
    for a, b in zip(path, path[1:]):
        steps.add((a, b))
        steps.add((b, a))
    return [idx for idx, edge in snapshot.iter_edges() if (edge.source, edge.target) in steps]


# =============================================================================
# Hierarchical layout
# =============================================================================

def compute_level_overlay(hierarchy: HierarchyResult) -> Dict[str, int]:
    """
    Node -> level for a hierarchical layout.

    Empty when no hierarchy could be established, so a cycle-only graph is
    never laid out as a flat tree.
    """
    if not hierarchy.has_hierarchy:
        return {}
    return dict(hierarchy.levels)
