"""
Heatmap rasterisation.

Every scored node with a known position becomes a radial splat centred on
its projected pixel. Colour and opacity stops depend on the node's severity
band; opacity reaches zero at the splat radius. Splats are composited
source-over in sample order, the same way a 2D canvas layers radial
gradients, into an RGBA float raster.

The raster is rebuilt in full on every call.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from .density import DensityModel, Severity
from .presets import OverlayStyle
from .projection import ProjectionLike, as_projection
from .snapshot import Position, is_known_position

logger = logging.getLogger(__name__)

# (offset along radius, opacity) per band
_STOPS: Dict[Severity, Tuple[Tuple[float, float], ...]] = {
    Severity.HIGH: ((0.0, 0.8), (0.5, 0.4), (1.0, 0.0)),
    Severity.MEDIUM: ((0.0, 0.8), (0.5, 0.4), (1.0, 0.0)),
    Severity.LOW: ((0.0, 0.1), (0.5, 0.2), (1.0, 0.0)),
}


# =============================================================================
# Data classes
# =============================================================================

@dataclass(frozen=True)
class HeatmapSplat:
    node_id: str
    center: Tuple[float, float]
    radius: float
    band: Severity
    rgb: Tuple[int, int, int]
    stops: Tuple[Tuple[float, float], ...]

    @property
    def peak_alpha(self) -> float:
        return max(a for _, a in self.stops)

    def alpha_at(self, distance: float) -> float:
        if distance >= self.radius:
            return 0.0
        offsets = [o for o, _ in self.stops]
        alphas = [a for _, a in self.stops]
        return float(np.interp(distance / self.radius, offsets, alphas))


@dataclass
class HeatmapRaster:
    width: int
    height: int
    radius: float
    pixels: np.ndarray  # (height, width, 4) straight RGBA in [0, 1]
    splats: List[HeatmapSplat] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.splats

    def alpha(self, x: int, y: int) -> float:
        return float(self.pixels[y, x, 3])

    def to_dict(self) -> Dict[str, object]:
        return {
            "width": self.width,
            "height": self.height,
            "radius": self.radius,
            "splats": [
                {
                    "node_id": s.node_id,
                    "center": list(s.center),
                    "band": s.band.value,
                }
                for s in self.splats
            ],
        }


# =============================================================================
# Helpers
# =============================================================================

def _rgb_for(band: Severity, style: OverlayStyle) -> Tuple[int, int, int]:
    if band is Severity.HIGH:
        return tuple(style.heat_high_rgb)
    if band is Severity.MEDIUM:
        return tuple(style.heat_medium_rgb)
    return tuple(style.heat_low_rgb)


def _composite_splat(premult: np.ndarray, splat: HeatmapSplat) -> None:
    """Source-over a single splat into a premultiplied RGBA buffer, in place."""
    height, width = premult.shape[:2]
    cx, cy = splat.center
    r = splat.radius

    x0 = max(0, int(np.floor(cx - r)))
    x1 = min(width, int(np.ceil(cx + r)) + 1)
    y0 = max(0, int(np.floor(cy - r)))
    y1 = min(height, int(np.ceil(cy + r)) + 1)
    if x0 >= x1 or y0 >= y1:
        return

    # Pixel centres
    xs = np.arange(x0, x1, dtype=float) + 0.5
    ys = np.arange(y0, y1, dtype=float) + 0.5
    gx, gy = np.meshgrid(xs, ys)
    dist = np.sqrt((gx - cx) ** 2 + (gy - cy) ** 2)

    offsets = np.array([o for o, _ in splat.stops], float)
    alphas = np.array([a for _, a in splat.stops], float)
    a_src = np.interp(dist / r, offsets, alphas)
    a_src[dist >= r] = 0.0

    rgb = np.array(splat.rgb, float) / 255.0
    window = premult[y0:y1, x0:x1]
    keep = (1.0 - a_src)[..., None]
    window[..., :3] = rgb[None, None, :] * a_src[..., None] + window[..., :3] * keep
    window[..., 3] = a_src + window[..., 3] * (1.0 - a_src)


def _unpremultiply(premult: np.ndarray) -> np.ndarray:
    out = np.zeros_like(premult)
    alpha = premult[..., 3]
    mask = alpha > 0
    out[..., 3] = alpha
    out[mask, :3] = premult[mask, :3] / alpha[mask][:, None]
    return np.clip(out, 0.0, 1.0)


# =============================================================================
# Main entry points
# =============================================================================

def build_splats(
    positions: Mapping[str, Position],
    model: DensityModel,
    projection: ProjectionLike = None,
    *,
    radius: float = 100.0,
    style: Optional[OverlayStyle] = None,
) -> List[HeatmapSplat]:
    """Vector description of the heatmap: one splat per drawable scored node."""
    if not (radius > 0 and math.isfinite(radius)):
        raise ValueError(f"heatmap radius must be positive and finite, got {radius!r}")

    proj = as_projection(projection)
    style = style or OverlayStyle()

    splats: List[HeatmapSplat] = []
    for node_id, intensity in model.items():
        pos = positions.get(node_id)
        if not is_known_position(pos):
            continue
        center = proj.project(pos)
        if not is_known_position(center):
            continue
        band = model.band_of(intensity)
        splats.append(
            HeatmapSplat(
                node_id=node_id,
                center=center,
                radius=float(radius),
                band=band,
                rgb=_rgb_for(band, style),
                stops=_STOPS[band],
            )
        )

    skipped = len(model) - len(splats)
    if skipped:
        logger.debug("[heatmap] %d scored node(s) without a drawable position skipped", skipped)
    return splats


def rasterize_heatmap(
    positions: Mapping[str, Position],
    model: DensityModel,
    projection: ProjectionLike = None,
    *,
    width: int,
    height: int,
    radius: float = 100.0,
    style: Optional[OverlayStyle] = None,
) -> HeatmapRaster:
    """Render the heatmap into a (height, width, 4) RGBA raster."""
    if not (width > 0 and height > 0):
        raise ValueError(f"raster size must be positive, got {width!r}x{height!r}")

    splats = build_splats(positions, model, projection, radius=radius, style=style)

    premult = np.zeros((int(height), int(width), 4), dtype=float)
    for splat in splats:
        _composite_splat(premult, splat)

    return HeatmapRaster(
        width=int(width),
        height=int(height),
        radius=float(radius),
        pixels=_unpremultiply(premult),
        splats=splats,
    )
