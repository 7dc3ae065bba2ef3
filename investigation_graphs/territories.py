"""
Territory geometry: circles, labels, badges and empty-zone markers.

Territories arrive from the scoring provider already grouped and classified
(explored / frontier / unexplored). This module only turns them into
pixel-space primitives:

  - circle: centroid of the projected member positions, radius = farthest
    member, floored at a minimum so single-node territories stay visible
  - label: "{classification}: {size} nodes" anchored at the centroid
  - badge: lightweight marker on the territory's central node

Members without a known position are skipped; a territory with no
positioned member produces nothing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .presets import OverlayStyle
from .projection import ProjectionLike, as_projection
from .snapshot import Position, is_known_position

logger = logging.getLogger(__name__)

CLASSIFICATIONS = ("explored", "frontier", "unexplored")

_BADGE_LETTERS = {"explored": "E", "frontier": "F", "unexplored": "U"}


# =========================================================================== #
# Data classes
# =========================================================================== #

@dataclass(frozen=True)
class Territory:
    territory_id: str
    nodes: Tuple[str, ...]
    classification: str
    central_node: Optional[str] = None
    size: Optional[int] = None
    density: float = 0.0
    description: str = ""

    def __post_init__(self):
        if self.classification not in CLASSIFICATIONS:
            raise ValueError(
                f"territory {self.territory_id!r}: classification must be one of "
                f"{CLASSIFICATIONS}, got {self.classification!r}"
            )
        object.__setattr__(self, "nodes", tuple(self.nodes))

    @property
    def node_count(self) -> int:
        return self.size if self.size is not None else len(self.nodes)

    @property
    def anchor_node(self) -> Optional[str]:
        if self.central_node:
            return self.central_node
        return self.nodes[0] if self.nodes else None


@dataclass(frozen=True)
class TerritoryCollection:
    explored: Tuple[Territory, ...] = ()
    frontier: Tuple[Territory, ...] = ()
    unexplored: Tuple[Territory, ...] = ()

    def __iter__(self) -> Iterator[Territory]:
        yield from self.explored
        yield from self.frontier
        yield from self.unexplored

    def __len__(self) -> int:
        return len(self.explored) + len(self.frontier) + len(self.unexplored)

    def by_id(self) -> Dict[str, Territory]:
        return {t.territory_id: t for t in self}

    def counts(self) -> Dict[str, int]:
        return {
            "explored": len(self.explored),
            "frontier": len(self.frontier),
            "unexplored": len(self.unexplored),
        }

    @classmethod
    def from_territories(cls, territories) -> "TerritoryCollection":
        groups: Dict[str, List[Territory]] = {c: [] for c in CLASSIFICATIONS}
        for t in territories:
            groups[t.classification].append(t)
        return cls(**{c: tuple(ts) for c, ts in groups.items()})


@dataclass(frozen=True)
class TerritoryCircle:
    territory_id: str
    classification: str
    center: Tuple[float, float]
    radius: float
    color: str


@dataclass(frozen=True)
class TerritoryLabel:
    territory_id: str
    anchor: Tuple[float, float]
    text: str
    color: str


@dataclass(frozen=True)
class TerritoryBadge:
    territory_id: str
    node_id: str
    anchor: Tuple[float, float]
    text: str
    color: str


@dataclass(frozen=True)
class EmptyZone:
    x: Optional[float]
    y: Optional[float]
    radius: Optional[float] = None
    suggested_concepts: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EmptyZoneCircle:
    index: int
    center: Tuple[float, float]
    radius: float


# =========================================================================== #
# Helpers
# =========================================================================== #

def classification_color(classification: str, style: Optional[OverlayStyle] = None) -> str:
    style = style or OverlayStyle()
    return {
        "explored": style.explored_color,
        "frontier": style.frontier_color,
        "unexplored": style.unexplored_color,
    }.get(classification, style.no_data_color)


def territory_label_text(territory: Territory) -> str:
    return f"{territory.classification}: {territory.node_count} nodes"


# =========================================================================== #
# Circles and labels
# =========================================================================== #

def compute_territory_geometry(
    territory: Territory,
    positions: Mapping[str, Position],
    projection: ProjectionLike = None,
    *,
    min_radius: float = 50.0,
    style: Optional[OverlayStyle] = None,
) -> Optional[Tuple[TerritoryCircle, TerritoryLabel]]:
    """Circle and label for one territory, or None if no member is positioned."""
    if not (min_radius >= 0 and math.isfinite(min_radius)):
        raise ValueError(f"minimum territory radius must be non-negative, got {min_radius!r}")

    proj = as_projection(projection)
    points = [proj.project(positions[n]) for n in territory.nodes if is_known_position(positions.get(n))]
    points = [p for p in points if is_known_position(p)]
    if not points:
        logger.debug("[territories] %s has no positioned member, skipped", territory.territory_id)
        return None

    cx = sum(p[0] for p in points) / len(points)
    cy = sum(p[1] for p in points) / len(points)
    radius = max(math.hypot(p[0] - cx, p[1] - cy) for p in points)
    radius = max(radius, float(min_radius))

    color = classification_color(territory.classification, style)
    circle = TerritoryCircle(
        territory_id=territory.territory_id,
        classification=territory.classification,
        center=(cx, cy),
        radius=radius,
        color=color,
    )
    label = TerritoryLabel(
        territory_id=territory.territory_id,
        anchor=(cx, cy),
        text=territory_label_text(territory),
        color=color,
    )
    return circle, label


def compute_territory_circles(
    territories: TerritoryCollection,
    positions: Mapping[str, Position],
    projection: ProjectionLike = None,
    *,
    min_radius: float = 50.0,
    style: Optional[OverlayStyle] = None,
) -> Tuple[List[TerritoryCircle], List[TerritoryLabel]]:
    circles: List[TerritoryCircle] = []
    labels: List[TerritoryLabel] = []
    for territory in territories:
        geom = compute_territory_geometry(
            territory, positions, projection, min_radius=min_radius, style=style
        )
        if geom is None:
            continue
        circles.append(geom[0])
        labels.append(geom[1])
    return circles, labels


# =========================================================================== #
# Badges
# =========================================================================== #

def compute_territory_badges(
    territories: TerritoryCollection,
    positions: Mapping[str, Position],
    projection: ProjectionLike = None,
    *,
    style: Optional[OverlayStyle] = None,
) -> List[TerritoryBadge]:
    proj = as_projection(projection)
    badges: List[TerritoryBadge] = []

    for territory in territories:
        node_id = territory.anchor_node
        if node_id is None or not is_known_position(positions.get(node_id)):
            continue
        anchor = proj.project(positions[node_id])
        if not is_known_position(anchor):
            continue
        badges.append(
            TerritoryBadge(
                territory_id=territory.territory_id,
                node_id=node_id,
                anchor=anchor,
                text=f"{_BADGE_LETTERS[territory.classification]}: {territory.node_count}",
                color=classification_color(territory.classification, style),
            )
        )
    return badges


# =========================================================================== #
# Empty zones
# =========================================================================== #

def compute_empty_zone_circles(
    zones: List[EmptyZone],
    projection: ProjectionLike = None,
    *,
    default_radius: float = 50.0,
) -> List[EmptyZoneCircle]:
    """Project backend-supplied empty zones; zones without coordinates are skipped."""
    if not (default_radius >= 0 and math.isfinite(default_radius)):
        raise ValueError(f"empty zone radius must be non-negative, got {default_radius!r}")

    proj = as_projection(projection)
    out: List[EmptyZoneCircle] = []
    for idx, zone in enumerate(zones):
        if not is_known_position((zone.x, zone.y)):
            logger.debug("[territories] empty zone %d has invalid coordinates", idx)
            continue
        radius = zone.radius if zone.radius and zone.radius > 0 and math.isfinite(zone.radius) else default_radius
        out.append(EmptyZoneCircle(index=idx, center=proj.project((zone.x, zone.y)), radius=float(radius)))
    return out


def territory_from_mapping(raw: Mapping[str, Any], classification: str, index: int) -> Territory:
    """Build a Territory from one backend payload entry."""
    tid = raw.get("id")
    territory_id = f"{classification}-{tid}" if tid is not None else f"{classification}-{index}"
    size = raw.get("size")
    return Territory(
        territory_id=territory_id,
        nodes=tuple(str(n) for n in (raw.get("nodes") or [])),
        classification=classification,
        central_node=raw.get("centralNode") or None,
        size=int(size) if size else None,
        density=float(raw.get("density") or 0.0),
        description=str(raw.get("description") or ""),
    )
