"""
Metadata writer for overlay passes.

Writes ``<name>.overlay.json`` next to a rendered overlay so a run can be
inspected or diffed later without re-running the analyses. The heatmap
raster is summarised by its size and splats, not stored.
"""

from __future__ import annotations

import json
import os
import time
from typing import Any, Dict

from .overlay_state import OverlayResult

META_VERSION = "investigation.overlaymeta.v1"


def write_overlay_metadata(out_dir: str, result: OverlayResult, name: str = "overlay") -> Dict[str, Any]:
    """
    Write a single overlay metadata JSON file.

    Returned as a dict so callers can embed it into larger reports.
    """
    meta = {
        "version": META_VERSION,
        "timestamp": time.time(),
        "name": name,
        **result.to_dict(),
    }

    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, f"{name}.overlay.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)

    return meta
