"""
Overlay builder: one entry point that runs every requested analysis over a
single OverlayRequest and returns an OverlayResult.

Each analysis stays a stateless transform; this module only wires them
together, applies the configured parameters and reports progress through
the optional ``emit(kind, payload)`` callback.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from .classification import classify
from .density import DensityModel
from .grid import sample_density_grid
from .heatmap import rasterize_heatmap
from .hierarchy import assign_levels
from .metrics import compute_density_metrics
from .overlay_state import OverlayRequest, OverlayResult
from .styling import (
    OverlayStyleMaps,
    compute_density_node_styles,
    compute_edge_styles,
    compute_level_overlay,
)
from .territories import (
    compute_empty_zone_circles,
    compute_territory_badges,
    compute_territory_circles,
)

logger = logging.getLogger(__name__)

DEFAULT_EMIT: Callable[[str, Dict[str, Any]], None] = lambda *_: None


# ====================================================================== #
# Logging helpers
# ====================================================================== #

def _log(msg: str, emit: Optional[Callable[[str, Dict[str, Any]], None]]) -> None:
    logger.info(msg)
    if emit:
        emit("log", {"message": msg})


# ====================================================================== #
# Main driver
# ====================================================================== #

def build_overlays(
    request: OverlayRequest,
    emit: Optional[Callable[[str, Dict[str, Any]], None]] = None,
) -> OverlayResult:
    """
    Run classification, hierarchy, metrics and the requested density
    overlays for one snapshot.
    """
    cfg = request.config
    dcfg = cfg.density
    if cfg.enable_logging:
        logging.basicConfig(level=logging.INFO)

    snapshot = request.snapshot
    positions = request.resolved_positions()
    model = DensityModel.from_samples(request.samples, high=dcfg.band_high, medium=dcfg.band_medium)
    width, height = request.canvas_size

    _log(
        f"[overlays] Snapshot: {len(snapshot.nodes)} nodes, {len(snapshot.edges)} edges, "
        f"{len(positions)} positioned, {len(model)} scored",
        emit,
    )

    # ------------------------------------------------------------------ #
    # Structure
    # ------------------------------------------------------------------ #
    classification = classify(snapshot, dcfg.hub_threshold)
    hierarchy = assign_levels(snapshot, cfg.level_policy)
    if not hierarchy.has_hierarchy:
        _log("[overlays] No root nodes: no hierarchy could be established", emit)

    metrics = compute_density_metrics(snapshot, request.territories)

    result = OverlayResult(
        classification=classification,
        hierarchy=hierarchy,
        metrics=metrics,
        canvas_size=(int(width), int(height)),
        meta={"config": cfg.to_dict()},
    )

    # ------------------------------------------------------------------ #
    # Density overlays
    # ------------------------------------------------------------------ #
    if request.show_heatmap:
        result.heatmap = rasterize_heatmap(
            positions,
            model,
            request.projection,
            width=width,
            height=height,
            radius=dcfg.heatmap_radius,
            style=cfg.style,
        )
        _log(f"[overlays] Heatmap: {len(result.heatmap.splats)} splats", emit)

    if request.show_territories:
        circles, labels = compute_territory_circles(
            request.territories,
            positions,
            request.projection,
            min_radius=dcfg.territory_min_radius,
            style=cfg.style,
        )
        result.territory_circles = circles
        result.territory_labels = labels

    if request.show_badges:
        result.badges = compute_territory_badges(
            request.territories, positions, request.projection, style=cfg.style
        )

    if request.show_empty_zones:
        result.empty_zones = compute_empty_zone_circles(
            request.empty_zones,
            request.projection,
            default_radius=dcfg.empty_zone_radius,
        )

    if request.show_grid:
        result.grid = sample_density_grid(
            positions,
            model,
            request.projection,
            cell_size=dcfg.grid_cell_size,
            margin=dcfg.grid_margin,
            influence=dcfg.grid_influence,
            max_cells=dcfg.grid_max_cells,
        )
        _log(f"[overlays] Density grid created with {len(result.grid)} cells", emit)

    result.styles = OverlayStyleMaps(
        nodes=compute_density_node_styles(snapshot, model),
        edges=compute_edge_styles(snapshot),
        levels=compute_level_overlay(hierarchy),
    )

    (emit or DEFAULT_EMIT)(
        "overlays",
        {
            "message": "[overlays] Overlay pass complete",
            "territories": len(result.territory_circles),
            "badges": len(result.badges),
            "grid_cells": len(result.grid),
            "has_hierarchy": hierarchy.has_hierarchy,
        },
    )
    return result
