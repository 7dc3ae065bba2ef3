"""
Preset configuration for the investigation graph overlays.

The defaults reproduce the interactive client:
  - 100 px heatmap falloff radius
  - 50 px minimum territory radius
  - 150 px density grid cells over a 100 px margin
  - hub threshold of 2 (degree strictly greater is a hub)

``load_config()`` reads the same fields from environment variables so a
host process can retune overlays without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, asdict, field
from typing import Dict, Any, Optional


# --------------------------------------------------------------------------- #
# Density / geometry parameters
# --------------------------------------------------------------------------- #

@dataclass
class DensityConfig:
    hub_threshold: int = 2

    heatmap_radius: float = 100.0
    territory_min_radius: float = 50.0
    empty_zone_radius: float = 50.0

    grid_margin: float = 100.0
    grid_cell_size: float = 150.0
    grid_influence: float = 1.5   # neighbourhood = influence * cell size
    grid_max_cells: int = 10000

    # Severity band cut points (strictly greater than)
    band_high: float = 0.7
    band_medium: float = 0.3

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# --------------------------------------------------------------------------- #
# Overlay colours
# --------------------------------------------------------------------------- #

@dataclass
class OverlayStyle:
    background_color: str = "#ffffff"

    # Heatmap splat RGB per band (0-255)
    heat_high_rgb: tuple = (255, 0, 0)
    heat_medium_rgb: tuple = (255, 165, 0)
    heat_low_rgb: tuple = (0, 100, 255)

    # Band colours shared by territories, grid cells and node styles
    high_color: str = "#ef4444"
    medium_color: str = "#f59e0b"
    low_color: str = "#3b82f6"
    no_data_color: str = "#6b7280"

    explored_color: str = "#ef4444"
    frontier_color: str = "#f59e0b"
    unexplored_color: str = "#3b82f6"

    hub_color: str = "#f59e0b"
    source_color: str = "#22c55e"
    sink_color: str = "#ef4444"

    territory_alpha: float = 0.2
    empty_zone_alpha: float = 0.5

    label_size: int = 9
    dpi: int = 120

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# --------------------------------------------------------------------------- #
# Top-level configuration
# --------------------------------------------------------------------------- #

@dataclass
class OverlayConfig:
    """
    High-level configuration handed to ``build_overlays`` and written into
    overlay metadata for reproducibility.
    """

    density: DensityConfig = field(default_factory=DensityConfig)
    style: OverlayStyle = field(default_factory=OverlayStyle)

    level_policy: str = "first_discovery"
    enable_logging: bool = False

    version: str = "investigation.overlays.v1"

    def __post_init__(self):
        # Callers may pass None explicitly
        if self.density is None:
            self.density = DensityConfig()
        if self.style is None:
            self.style = OverlayStyle()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "density": self.density.to_dict(),
            "style": self.style.to_dict(),
            "level_policy": self.level_policy,
            "version": self.version,
        }


def load_config(environ: Optional[Dict[str, str]] = None) -> OverlayConfig:
    """
    Load OverlayConfig from environment variables, falling back to defaults.

    Recognized variables:
        INVESTIGATION_HUB_THRESHOLD        (int)
        INVESTIGATION_HEATMAP_RADIUS       (px)
        INVESTIGATION_TERRITORY_MIN_RADIUS (px)
        INVESTIGATION_GRID_MARGIN          (canvas units)
        INVESTIGATION_GRID_CELL_SIZE       (canvas units)
        INVESTIGATION_GRID_MAX_CELLS       (int)
        INVESTIGATION_LEVEL_POLICY         (first_discovery|longest_path)
        INVESTIGATION_ENABLE_LOGGING       ("true" / "false" / "1" / "0")
    """
    env = os.environ if environ is None else environ

    def _env_flag(name: str, default: bool) -> bool:
        val = env.get(name)
        if val is None:
            return default
        return val.strip().lower() in ("1", "true", "yes", "on")

    def _env_float(name: str, default: float) -> float:
        val = env.get(name)
        if val is None or not val.strip():
            return default
        try:
            return float(val)
        except ValueError:
            raise ValueError(f"{name} must be a number, got {val!r}")

    def _env_int(name: str, default: int) -> int:
        val = env.get(name)
        if val is None or not val.strip():
            return default
        try:
            return int(val)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {val!r}")

    defaults = DensityConfig()
    density = DensityConfig(
        hub_threshold=_env_int("INVESTIGATION_HUB_THRESHOLD", defaults.hub_threshold),
        heatmap_radius=_env_float("INVESTIGATION_HEATMAP_RADIUS", defaults.heatmap_radius),
        territory_min_radius=_env_float(
            "INVESTIGATION_TERRITORY_MIN_RADIUS",
            defaults.territory_min_radius,
        ),
        grid_margin=_env_float("INVESTIGATION_GRID_MARGIN", defaults.grid_margin),
        grid_cell_size=_env_float("INVESTIGATION_GRID_CELL_SIZE", defaults.grid_cell_size),
        grid_max_cells=_env_int("INVESTIGATION_GRID_MAX_CELLS", defaults.grid_max_cells),
    )

    return OverlayConfig(
        density=density,
        level_policy=env.get("INVESTIGATION_LEVEL_POLICY", "first_discovery"),
        enable_logging=_env_flag("INVESTIGATION_ENABLE_LOGGING", default=False),
    )


# Reference defaults; every OverlayRequest builds its own OverlayConfig
DEFAULT_CONFIG = OverlayConfig()
