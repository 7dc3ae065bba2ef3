"""
Loaders for graph snapshots, density samples and territories.

Responsibilities:
  - Turn the client/backend JSON payload shape into value objects
    (nodes, edges with ``from``/``to``, optional ``positions`` map)
  - Read ``heatmapData`` entries into DensitySample objects
  - Read explored / frontier / unexplored territory lists and empty zones
  - Read node and edge tables from CSV files (pandas)

Malformed entries are skipped with a log message; only a payload whose root
is not a mapping is rejected.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from .snapshot import DensitySample, Edge, GraphSnapshot, Node, Position
from .territories import (
    CLASSIFICATIONS,
    EmptyZone,
    TerritoryCollection,
    territory_from_mapping,
)

logger = logging.getLogger(__name__)


# ============================================================================ #
# Logging helpers
# ============================================================================ #

def _log(msg: str, emit: Callable[[str, Dict[str, Any]], None] | None) -> None:
    logger.info(msg)
    if emit is None:
        return
    emit("log", {"message": msg})


def _safe_float(x: Any, default: Optional[float] = None) -> Optional[float]:
    try:
        v = float(x)
        return v if np.isfinite(v) else default
    except (TypeError, ValueError):
        return default


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"{what} payload must be a JSON object, got {type(payload).__name__}")
    return payload


def _position(raw: Any) -> Optional[Position]:
    if isinstance(raw, Mapping):
        x, y = _safe_float(raw.get("x")), _safe_float(raw.get("y"))
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        x, y = _safe_float(raw[0]), _safe_float(raw[1])
    else:
        return None
    if x is None or y is None:
        return None
    return x, y


# ============================================================================ #
# 1. Graph snapshot
# ============================================================================ #

def snapshot_from_payload(payload: Mapping[str, Any], emit=None) -> GraphSnapshot:
    """
    Build a GraphSnapshot from ``{"nodes": [...], "edges": [...], "positions": {...}}``.

    Nodes without an id and repeated node ids are dropped. Edges keep their
    order; edges missing ``from`` or ``to`` are dropped.
    """
    payload = _require_mapping(payload, "graph")
    positions_raw = payload.get("positions") or {}

    nodes: List[Node] = []
    seen = set()
    for raw in payload.get("nodes") or []:
        if not isinstance(raw, Mapping) or raw.get("id") in (None, ""):
            _log("[loader] Skipping node without id", emit)
            continue
        nid = str(raw["id"])
        if nid in seen:
            _log(f"[loader] Skipping duplicate node {nid!r}", emit)
            continue
        seen.add(nid)
        pos = _position(positions_raw.get(nid)) if nid in positions_raw else None
        if pos is None and ("x" in raw and "y" in raw):
            pos = _position(raw)
        nodes.append(
            Node(
                id=nid,
                label=str(raw.get("label") or nid),
                context=str(raw.get("context") or ""),
                position=pos,
            )
        )

    edges: List[Edge] = []
    for raw in payload.get("edges") or []:
        if not isinstance(raw, Mapping) or raw.get("from") in (None, "") or raw.get("to") in (None, ""):
            _log("[loader] Skipping edge without from/to", emit)
            continue
        edges.append(
            Edge(
                source=str(raw["from"]),
                target=str(raw["to"]),
                type=str(raw.get("type") or "relation"),
                label=str(raw.get("label") or ""),
                context=str(raw.get("context") or ""),
            )
        )

    snapshot = GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges))
    _log(f"[loader] Built snapshot: {len(nodes)} nodes, {len(edges)} edges", emit)
    return snapshot


def load_snapshot_json(path: str, emit=None) -> GraphSnapshot:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return snapshot_from_payload(payload, emit)


def load_snapshot_tables(nodes_csv: str, edges_csv: str, emit=None) -> GraphSnapshot:
    """
    Load nodes.csv (id, label?, context?, x?, y?) and edges.csv
    (from|source, to|target, type?, label?, context?).
    """
    if not os.path.exists(nodes_csv):
        raise ValueError(f"nodes table not found: {nodes_csv}")

    nodes_df = pd.read_csv(nodes_csv, dtype={"id": str})
    if "id" not in nodes_df.columns:
        raise ValueError(f"{nodes_csv} must contain an 'id' column")

    edges_df = pd.read_csv(edges_csv, dtype=str) if os.path.exists(edges_csv) else pd.DataFrame()
    if not edges_df.empty:
        edges_df = edges_df.rename(columns={"source": "from", "target": "to"})
        if "from" not in edges_df.columns or "to" not in edges_df.columns:
            raise ValueError(f"{edges_csv} must contain from/to (or source/target) columns")
    else:
        _log("[loader] Edge table empty", emit)

    def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
        # NaN -> None so optional columns behave like missing JSON keys
        return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")

    payload = {
        "nodes": _records(nodes_df),
        "edges": _records(edges_df) if not edges_df.empty else [],
    }
    return snapshot_from_payload(payload, emit)


# ============================================================================ #
# 2. Density samples
# ============================================================================ #

def samples_from_payload(payload: Mapping[str, Any], emit=None) -> List[DensitySample]:
    """Read ``heatmapData`` (``nodeId`` or ``nodeID`` + ``intensity``)."""
    payload = _require_mapping(payload, "density")
    samples: List[DensitySample] = []
    for raw in payload.get("heatmapData") or []:
        if not isinstance(raw, Mapping):
            continue
        nid = raw.get("nodeId") or raw.get("nodeID")
        value = _safe_float(raw.get("intensity"))
        if not nid or value is None:
            _log("[loader] Skipping heatmap point without nodeId/intensity", emit)
            continue
        try:
            samples.append(DensitySample(node_id=str(nid), intensity=value))
        except ValueError as exc:
            _log(f"[loader] Skipping heatmap point: {exc}", emit)
    return samples


def positions_from_payload(payload: Mapping[str, Any]) -> Dict[str, Position]:
    payload = _require_mapping(payload, "positions")
    raw = payload.get("positions") or {}
    out: Dict[str, Position] = {}
    for nid, p in raw.items():
        pos = _position(p)
        if pos is not None:
            out[str(nid)] = pos
    return out


# ============================================================================ #
# 3. Territories and empty zones
# ============================================================================ #

def territories_from_payload(payload: Mapping[str, Any], emit=None) -> TerritoryCollection:
    payload = _require_mapping(payload, "territories")
    groups: Dict[str, Tuple] = {}
    for classification in CLASSIFICATIONS:
        items = []
        for idx, raw in enumerate(payload.get(classification) or []):
            if not isinstance(raw, Mapping):
                continue
            items.append(territory_from_mapping(raw, classification, idx))
        groups[classification] = tuple(items)

    collection = TerritoryCollection(**groups)
    _log(f"[loader] Loaded {len(collection)} territories", emit)
    return collection


def empty_zones_from_payload(payload: Mapping[str, Any]) -> List[EmptyZone]:
    payload = _require_mapping(payload, "density")
    zones: List[EmptyZone] = []
    for raw in payload.get("emptyZones") or []:
        if not isinstance(raw, Mapping):
            continue
        zones.append(
            EmptyZone(
                x=_safe_float(raw.get("x")),
                y=_safe_float(raw.get("y")),
                radius=_safe_float(raw.get("radius")),
                suggested_concepts=tuple(str(c) for c in (raw.get("suggestedConcepts") or [])),
            )
        )
    return zones
