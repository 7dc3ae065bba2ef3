"""
Canvas -> pixel projection.

Layout engines keep node positions in their own canvas coordinates; the
overlays are drawn in pixels. Every geometry builder receives a projection
object instead of reaching for a live network or DOM handle, so the
analyses run headless.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Protocol, Tuple, Union, runtime_checkable

from .snapshot import Position


@runtime_checkable
class Projection(Protocol):
    def project(self, point: Position) -> Position:
        ...


@dataclass(frozen=True)
class IdentityProjection:
    """Canvas units are already pixels."""

    def project(self, point: Position) -> Position:
        return float(point[0]), float(point[1])


@dataclass(frozen=True)
class ViewportProjection:
    """
    Affine viewport transform, the same mapping a pan/zoom canvas applies:

        pixel = (canvas - view_center) * scale + viewport_center
    """

    scale: float = 1.0
    view_center: Position = (0.0, 0.0)
    viewport_size: Position = (0.0, 0.0)

    def __post_init__(self):
        if not (self.scale > 0 and math.isfinite(self.scale)):
            raise ValueError(f"projection scale must be positive, got {self.scale!r}")

    def project(self, point: Position) -> Position:
        cx = self.viewport_size[0] / 2.0
        cy = self.viewport_size[1] / 2.0
        return (
            float((point[0] - self.view_center[0]) * self.scale + cx),
            float((point[1] - self.view_center[1]) * self.scale + cy),
        )


@dataclass(frozen=True)
class CallableProjection:
    """Adapter for a bare ``project(point) -> pixel`` function."""

    fn: Callable[[Position], Position]

    def project(self, point: Position) -> Position:
        x, y = self.fn(point)
        return float(x), float(y)


ProjectionLike = Union[Projection, Callable[[Position], Position], None]


def as_projection(projection: ProjectionLike) -> Projection:
    if projection is None:
        return IdentityProjection()
    if isinstance(projection, Projection):
        return projection
    if callable(projection):
        return CallableProjection(projection)
    raise ValueError(f"unsupported projection: {projection!r}")


def project_positions(
    positions: Mapping[str, Position],
    projection: ProjectionLike,
) -> Dict[str, Tuple[float, float]]:
    proj = as_projection(projection)
    return {nid: proj.project(p) for nid, p in positions.items() if p is not None}
