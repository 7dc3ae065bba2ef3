"""
Investigation graph overlays.

Structural classification, hierarchy levels and spatial density overlays
(heatmap, territories, density grid) computed from a graph snapshot and the
positions / scores handed over by the layout and scoring providers.
"""

# ---------------------------------------------------------------------------
# Snapshot and projection
# ---------------------------------------------------------------------------
from .snapshot import (
    Node,
    Edge,
    DensitySample,
    GraphSnapshot,
    Position,
)
from .projection import (
    Projection,
    IdentityProjection,
    ViewportProjection,
    CallableProjection,
    as_projection,
)

# ---------------------------------------------------------------------------
# Configuration and presets
# ---------------------------------------------------------------------------
from .presets import (
    DensityConfig,
    OverlayStyle,
    OverlayConfig,
    DEFAULT_CONFIG,
    load_config,
)

# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------
from .classification import (
    degrees,
    hubs,
    sources,
    sinks,
    classify,
    find_nodes,
    StructuralClassification,
)
from .hierarchy import (
    assign_levels,
    HierarchyResult,
    LevelPolicy,
)

# ---------------------------------------------------------------------------
# Density
# ---------------------------------------------------------------------------
from .density import DensityModel, Severity, band_for
from .heatmap import build_splats, rasterize_heatmap, HeatmapRaster, HeatmapSplat
from .territories import (
    Territory,
    TerritoryCollection,
    EmptyZone,
    compute_territory_circles,
    compute_territory_badges,
    compute_empty_zone_circles,
)
from .grid import sample_density_grid, GridCell
from .metrics import compute_density_metrics, DensityMetrics

# ---------------------------------------------------------------------------
# Styling, loading, overlay driver
# ---------------------------------------------------------------------------
from .styling import (
    compute_density_node_styles,
    compute_highlight_styles,
    compute_edge_styles,
    compute_level_overlay,
    path_edge_indices,
    OverlayStyleMaps,
)
from .loader import (
    snapshot_from_payload,
    samples_from_payload,
    territories_from_payload,
    empty_zones_from_payload,
    load_snapshot_json,
    load_snapshot_tables,
)
from .overlay_state import OverlayRequest, OverlayResult
from .overlays import build_overlays

# ---------------------------------------------------------------------------
# Rendering and metadata
# ---------------------------------------------------------------------------
from .render2d import draw_overlay_snapshot
from .metadata import write_overlay_metadata

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
__all__ = [
    # Snapshot
    "Node",
    "Edge",
    "DensitySample",
    "GraphSnapshot",
    "Position",
    "Projection",
    "IdentityProjection",
    "ViewportProjection",
    "CallableProjection",
    "as_projection",

    # Config
    "DensityConfig",
    "OverlayStyle",
    "OverlayConfig",
    "DEFAULT_CONFIG",
    "load_config",

    # Structure
    "degrees",
    "hubs",
    "sources",
    "sinks",
    "classify",
    "find_nodes",
    "StructuralClassification",
    "assign_levels",
    "HierarchyResult",
    "LevelPolicy",

    # Density
    "DensityModel",
    "Severity",
    "band_for",
    "build_splats",
    "rasterize_heatmap",
    "HeatmapRaster",
    "HeatmapSplat",
    "Territory",
    "TerritoryCollection",
    "EmptyZone",
    "compute_territory_circles",
    "compute_territory_badges",
    "compute_empty_zone_circles",
    "sample_density_grid",
    "GridCell",
    "compute_density_metrics",
    "DensityMetrics",

    # Styling / loading / driver
    "compute_density_node_styles",
    "compute_highlight_styles",
    "compute_edge_styles",
    "compute_level_overlay",
    "path_edge_indices",
    "OverlayStyleMaps",
    "snapshot_from_payload",
    "samples_from_payload",
    "territories_from_payload",
    "empty_zones_from_payload",
    "load_snapshot_json",
    "load_snapshot_tables",
    "OverlayRequest",
    "OverlayResult",
    "build_overlays",

    # Rendering / metadata
    "draw_overlay_snapshot",
    "write_overlay_metadata",
]
