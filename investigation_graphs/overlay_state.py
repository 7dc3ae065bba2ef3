"""
Request / result value objects for one overlay pass.

An OverlayRequest bundles everything the providers hand over (snapshot,
positions, density samples, territories, projection, canvas size, which
overlays are wanted). An OverlayResult holds everything the renderer
needs back, keyed by node ids and territory ids rather than list
positions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .classification import StructuralClassification
from .grid import GridCell
from .heatmap import HeatmapRaster
from .hierarchy import HierarchyResult
from .metrics import DensityMetrics
from .presets import OverlayConfig
from .projection import ProjectionLike
from .snapshot import DensitySample, GraphSnapshot, Position, is_known_position
from .styling import OverlayStyleMaps
from .territories import (
    EmptyZone,
    EmptyZoneCircle,
    TerritoryBadge,
    TerritoryCircle,
    TerritoryCollection,
    TerritoryLabel,
)


@dataclass
class OverlayRequest:
    snapshot: GraphSnapshot
    samples: List[DensitySample] = field(default_factory=list)
    territories: TerritoryCollection = field(default_factory=TerritoryCollection)
    empty_zones: List[EmptyZone] = field(default_factory=list)

    # Layout provider: positions override node.position when given
    positions: Optional[Dict[str, Position]] = None
    projection: ProjectionLike = None
    canvas_size: Tuple[int, int] = (1200, 800)

    show_heatmap: bool = True
    show_territories: bool = True
    show_badges: bool = True
    show_empty_zones: bool = True
    show_grid: bool = True

    # One config instance per request
    config: OverlayConfig = field(default_factory=OverlayConfig)

    def resolved_positions(self) -> Dict[str, Position]:
        positions = self.snapshot.positions()
        if self.positions:
            for nid, pos in self.positions.items():
                if nid in self.snapshot and is_known_position(pos):
                    positions[nid] = (float(pos[0]), float(pos[1]))
        return positions


@dataclass
class OverlayResult:
    classification: StructuralClassification
    hierarchy: HierarchyResult
    metrics: DensityMetrics

    heatmap: Optional[HeatmapRaster] = None
    territory_circles: List[TerritoryCircle] = field(default_factory=list)
    territory_labels: List[TerritoryLabel] = field(default_factory=list)
    badges: List[TerritoryBadge] = field(default_factory=list)
    empty_zones: List[EmptyZoneCircle] = field(default_factory=list)
    grid: List[GridCell] = field(default_factory=list)
    styles: OverlayStyleMaps = field(default_factory=OverlayStyleMaps)

    canvas_size: Tuple[int, int] = (1200, 800)
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return (
            (self.heatmap is None or self.heatmap.is_empty)
            and not self.territory_circles
            and not self.badges
            and not self.empty_zones
            and not self.grid
        )

    def circle_for(self, territory_id: str) -> Optional[TerritoryCircle]:
        for c in self.territory_circles:
            if c.territory_id == territory_id:
                return c
        return None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe summary; the raster itself is reported by shape only."""
        return {
            "classification": self.classification.to_dict(),
            "hierarchy": self.hierarchy.to_dict(),
            "metrics": self.metrics.to_dict(),
            "heatmap": self.heatmap.to_dict() if self.heatmap is not None else None,
            "territories": [
                {
                    "territory_id": c.territory_id,
                    "classification": c.classification,
                    "center": list(c.center),
                    "radius": c.radius,
                    "color": c.color,
                    "label": lbl.text,
                }
                for c, lbl in zip(self.territory_circles, self.territory_labels)
            ],
            "badges": [
                {"territory_id": b.territory_id, "node_id": b.node_id, "anchor": list(b.anchor), "text": b.text}
                for b in self.badges
            ],
            "empty_zones": [
                {"index": z.index, "center": list(z.center), "radius": z.radius}
                for z in self.empty_zones
            ],
            "grid": [c.to_dict() for c in self.grid],
            "styles": self.styles.to_dict(),
            "canvas_size": list(self.canvas_size),
            "meta": dict(self.meta),
        }
