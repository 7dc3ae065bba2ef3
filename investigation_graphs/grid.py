"""
Spatial grid sampling for empty / over-dense zone discovery.

The layout bounding box (all known positions, expanded by a margin) is
walked in fixed steps. For every candidate centre, the scored nodes within
``influence * cell_size`` are averaged with equal weights. Candidates with
no scored neighbour are dropped, so the result is a sparse list of cells.

The candidate count is capped: a huge bounding box enlarges the step
instead of producing an unbounded grid.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from .density import DensityModel, Severity
from .presets import OverlayStyle
from .projection import ProjectionLike, as_projection
from .snapshot import Position, is_known_position, known_positions

logger = logging.getLogger(__name__)


# =========================================================================== #
# Data classes
# =========================================================================== #

@dataclass(frozen=True)
class GridCell:
    x: float
    y: float
    size: float
    local_intensity: float
    band: Severity
    count: int = 1

    def fill(self, style: Optional[OverlayStyle] = None) -> Dict[str, Any]:
        """Radial gradient description: band colour, centre -> edge alpha."""
        style = style or OverlayStyle()
        color = {
            Severity.HIGH: style.high_color,
            Severity.MEDIUM: style.medium_color,
        }.get(self.band, style.low_color)
        return {
            "color": color,
            "center_alpha": 0.3 * self.local_intensity,
            "edge_alpha": 0.1,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "local_intensity": self.local_intensity,
            "band": self.band.value,
            "count": self.count,
        }


@dataclass(frozen=True)
class GridBounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def expanded(self, margin: float) -> "GridBounds":
        return GridBounds(
            self.min_x - margin,
            self.max_x + margin,
            self.min_y - margin,
            self.max_y + margin,
        )


# =========================================================================== #
# Helpers
# =========================================================================== #

def _bounds(positions: Mapping[str, Position]) -> Optional[GridBounds]:
    pts = [p for p in positions.values() if p is not None]
    if not pts:
        return None
    xs = np.array([p[0] for p in pts], float)
    ys = np.array([p[1] for p in pts], float)
    return GridBounds(float(xs.min()), float(xs.max()), float(ys.min()), float(ys.max()))


def _axis_steps(lo: float, hi: float, step: float) -> int:
    """Number of centres lo, lo+step, ... <= hi."""
    span = (hi - lo) / step
    if not math.isfinite(span):
        # hi - lo overflowed
        span = hi / step - lo / step
    if not math.isfinite(span):
        return sys.maxsize
    return int(math.floor(span + 1e-9)) + 1


def _fit_step(bounds: GridBounds, step: float, max_cells: int) -> float:
    """Smallest step >= ``step`` whose grid stays within ``max_cells``."""
    nx_ = _axis_steps(bounds.min_x, bounds.max_x, step)
    ny_ = _axis_steps(bounds.min_y, bounds.max_y, step)
    if nx_ * ny_ <= max_cells:
        return step

    fitted = step
    while _axis_steps(bounds.min_x, bounds.max_x, fitted) * _axis_steps(
        bounds.min_y, bounds.max_y, fitted
    ) > max_cells:
        fitted *= 1.25

    logger.warning(
        "[grid] %d candidate cells exceed the cap of %d; step enlarged from %.1f to %.1f",
        nx_ * ny_,
        max_cells,
        step,
        fitted,
    )
    return fitted


# =========================================================================== #
# Main entry point
# =========================================================================== #

def sample_density_grid(
    positions: Mapping[str, Position],
    model: DensityModel,
    projection: ProjectionLike = None,
    *,
    cell_size: float = 150.0,
    margin: float = 100.0,
    influence: float = 1.5,
    max_cells: int = 10000,
) -> List[GridCell]:
    """
    Sparse density grid over the layout.

    ``positions`` are canvas coordinates for every known node (scored or
    not); the bounding box uses all of them. Cell centres are returned in
    pixel space through ``projection``; ``size`` stays in canvas units.
    """
    if not (cell_size > 0 and math.isfinite(cell_size)):
        raise ValueError(f"grid cell size must be positive and finite, got {cell_size!r}")
    if not (margin >= 0 and math.isfinite(margin)):
        raise ValueError(f"grid margin must be non-negative and finite, got {margin!r}")
    if not influence > 0:
        raise ValueError(f"grid influence must be positive, got {influence!r}")
    if not max_cells >= 1:
        raise ValueError(f"grid max_cells must be at least 1, got {max_cells!r}")

    positions = known_positions(positions)
    bounds = _bounds(positions)
    if bounds is None:
        return []
    box = bounds.expanded(margin)
    step = _fit_step(box, float(cell_size), int(max_cells))

    # Scored nodes with a position, as arrays for vectorised distances
    scored = [(positions[nid], val) for nid, val in model.items() if positions.get(nid) is not None]
    if not scored:
        return []
    sx = np.array([p[0] for p, _ in scored], float)
    sy = np.array([p[1] for p, _ in scored], float)
    sv = np.array([v for _, v in scored], float)

    proj = as_projection(projection)
    reach = influence * step

    with np.errstate(over="ignore"):
        xs = box.min_x + step * np.arange(_axis_steps(box.min_x, box.max_x, step))
        ys = box.min_y + step * np.arange(_axis_steps(box.min_y, box.max_y, step))

    cells: List[GridCell] = []
    for x in xs:
        for y in ys:
            # Extreme layouts overflow to inf, which is simply out of reach
            with np.errstate(over="ignore", invalid="ignore"):
                dist = np.hypot(sx - x, sy - y)
            near = dist < reach
            count = int(near.sum())
            if count == 0:
                continue
            local = float(sv[near].mean())
            px, py = proj.project((float(x), float(y)))
            if not is_known_position((px, py)):
                continue
            cells.append(
                GridCell(
                    x=px,
                    y=py,
                    size=step,
                    local_intensity=local,
                    band=model.band_of(local),
                    count=count,
                )
            )

    logger.debug("[grid] %d cells (step %.1f)", len(cells), step)
    return cells
