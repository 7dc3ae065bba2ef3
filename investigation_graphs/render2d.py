# render2d.py

"""
2D overlay renderer.

Paints an OverlayResult in pixel space (origin top-left, y down), back to
front:
    - heatmap raster
    - density grid cells
    - territory circles and labels
    - empty-zone markers
    - territory badges

This is a consumer of the overlay primitives; nothing here feeds back into
the analyses.
"""

from __future__ import annotations

import os
from typing import Optional

import matplotlib.pyplot as plt
import matplotlib.patheffects as patheffects
from matplotlib.patches import Circle, Rectangle

from .overlay_state import OverlayResult
from .presets import OverlayStyle


# =============================================================================
# Layers
# =============================================================================

def _draw_heatmap(ax, result: OverlayResult) -> None:
    raster = result.heatmap
    if raster is None or raster.is_empty:
        return
    ax.imshow(
        raster.pixels,
        extent=(0, raster.width, raster.height, 0),
        origin="upper",
        interpolation="bilinear",
        zorder=0,
    )


def _draw_grid(ax, result: OverlayResult, style: OverlayStyle) -> None:
    for cell in result.grid:
        fill = cell.fill(style)
        half = cell.size / 2.0
        # Two nested squares approximate the centre -> edge gradient
        ax.add_patch(
            Rectangle(
                (cell.x - half, cell.y - half),
                cell.size,
                cell.size,
                facecolor=fill["color"],
                alpha=fill["edge_alpha"],
                linewidth=0,
                zorder=1,
            )
        )
        ax.add_patch(
            Rectangle(
                (cell.x - half / 2.0, cell.y - half / 2.0),
                half,
                half,
                facecolor=fill["color"],
                alpha=max(fill["center_alpha"], fill["edge_alpha"]),
                linewidth=0,
                zorder=1,
            )
        )


def _draw_territories(ax, result: OverlayResult, style: OverlayStyle) -> None:
    for circle in result.territory_circles:
        ax.add_patch(
            Circle(
                circle.center,
                circle.radius,
                facecolor=circle.color,
                edgecolor="none",
                alpha=style.territory_alpha,
                zorder=2,
            )
        )

    for label in result.territory_labels:
        txt = ax.text(
            label.anchor[0],
            label.anchor[1],
            label.text,
            color=label.color,
            fontsize=style.label_size,
            fontweight="bold",
            ha="center",
            va="center",
            zorder=4,
        )
        txt.set_path_effects([patheffects.Stroke(linewidth=2.0, foreground="white"), patheffects.Normal()])


def _draw_empty_zones(ax, result: OverlayResult, style: OverlayStyle) -> None:
    for zone in result.empty_zones:
        ax.add_patch(
            Circle(
                zone.center,
                zone.radius,
                facecolor="none",
                edgecolor="#9ca3af",
                linestyle="--",
                linewidth=1.5,
                alpha=style.empty_zone_alpha,
                zorder=3,
            )
        )
        ax.text(
            zone.center[0],
            zone.center[1],
            "+",
            color="#9ca3af",
            fontsize=style.label_size * 2,
            fontweight="bold",
            ha="center",
            va="center",
            zorder=3,
        )


def _draw_badges(ax, result: OverlayResult, style: OverlayStyle) -> None:
    for badge in result.badges:
        ax.text(
            badge.anchor[0],
            badge.anchor[1] - 30,
            badge.text,
            color=badge.color,
            fontsize=style.label_size,
            fontweight="bold",
            ha="center",
            va="center",
            zorder=5,
            bbox={
                "boxstyle": "round,pad=0.3",
                "facecolor": "white",
                "edgecolor": badge.color,
                "linewidth": 2,
            },
        )


# =============================================================================
# Main renderer
# =============================================================================

def draw_overlay_snapshot(
    result: OverlayResult,
    *,
    outfile: str,
    style: Optional[OverlayStyle] = None,
    title: str = "",
) -> bool:
    """
    Render the overlay layers to ``outfile``.

    Returns False without writing anything when the result has nothing to
    draw.
    """
    if result.is_empty:
        return False

    style = style or OverlayStyle()
    width, height = result.canvas_size

    fig, ax = plt.subplots(
        figsize=(width / style.dpi, height / style.dpi),
        facecolor=style.background_color,
    )
    ax.set_facecolor(style.background_color)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_aspect("equal", "box")

    _draw_heatmap(ax, result)
    _draw_grid(ax, result, style)
    _draw_territories(ax, result, style)
    _draw_empty_zones(ax, result, style)
    _draw_badges(ax, result, style)

    if title:
        ax.set_title(title, fontsize=12, loc="left")

    out_dir = os.path.dirname(outfile)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    plt.tight_layout(pad=0.2)
    plt.savefig(outfile, dpi=style.dpi, facecolor=style.background_color)
    plt.close(fig)
    return True
