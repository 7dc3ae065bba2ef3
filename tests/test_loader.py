from pathlib import Path

import pytest

from investigation_graphs.loader import (
    empty_zones_from_payload,
    load_snapshot_json,
    load_snapshot_tables,
    positions_from_payload,
    samples_from_payload,
    snapshot_from_payload,
    territories_from_payload,
)

PAYLOAD = {
    "nodes": [
        {"id": "a", "label": "Alpha"},
        {"id": "b", "label": "Beta", "x": 5, "y": 6},
        {"id": "a", "label": "Duplicate"},
        {"label": "no id"},
    ],
    "edges": [
        {"from": "a", "to": "b", "type": "equivalence"},
        {"from": "b", "to": "ghost"},
        {"from": "a"},
    ],
    "positions": {"a": {"x": 1, "y": 2}},
}


def test_snapshot_from_payload() -> None:
    snap = snapshot_from_payload(PAYLOAD)

    assert [n.id for n in snap.nodes] == ["a", "b"]
    assert snap.node("a").label == "Alpha"
    assert snap.node("a").position == (1.0, 2.0)
    assert snap.node("b").position == (5.0, 6.0)
    assert [(e.source, e.target, e.type) for e in snap.edges] == [
        ("a", "b", "equivalence"),
        ("b", "ghost", "relation"),
    ]
    assert snap.dangling_edges() == [1]


def test_loader_reports_skips_through_emit() -> None:
    events = []
    snapshot_from_payload(PAYLOAD, emit=lambda kind, payload: events.append((kind, payload["message"])))

    messages = [m for kind, m in events if kind == "log"]
    assert any("duplicate" in m for m in messages)
    assert any("without from/to" in m for m in messages)


def test_non_mapping_payload_rejected() -> None:
    with pytest.raises(ValueError):
        snapshot_from_payload([1, 2, 3])


def test_load_snapshot_json(tmp_path: Path) -> None:
    import json

    path = tmp_path / "graph.json"
    path.write_text(json.dumps(PAYLOAD), encoding="utf-8")
    assert len(load_snapshot_json(str(path))) == 2


def test_load_snapshot_tables(tmp_path: Path) -> None:
    nodes_csv = tmp_path / "nodes.csv"
    edges_csv = tmp_path / "edges.csv"
    nodes_csv.write_text("id,label,x,y\nn1,First,0,0\nn2,Second,,\n", encoding="utf-8")
    edges_csv.write_text("source,target,type\nn1,n2,group\n", encoding="utf-8")

    snap = load_snapshot_tables(str(nodes_csv), str(edges_csv))

    assert [n.id for n in snap.nodes] == ["n1", "n2"]
    assert snap.node("n1").position == (0.0, 0.0)
    assert snap.node("n2").position is None
    assert snap.edges[0].source == "n1"
    assert snap.edges[0].type == "group"


def test_load_snapshot_tables_requires_id(tmp_path: Path) -> None:
    nodes_csv = tmp_path / "nodes.csv"
    nodes_csv.write_text("name\nx\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_snapshot_tables(str(nodes_csv), str(tmp_path / "edges.csv"))


def test_samples_from_payload() -> None:
    payload = {
        "heatmapData": [
            {"nodeId": "a", "intensity": 0.8},
            {"nodeID": "b", "intensity": "0.25"},
            {"nodeId": "c", "intensity": 3.0},
            {"nodeId": "d"},
        ]
    }
    samples = samples_from_payload(payload)
    assert [(s.node_id, s.intensity) for s in samples] == [("a", 0.8), ("b", 0.25)]


def test_positions_from_payload() -> None:
    assert positions_from_payload({"positions": {"a": [1, 2], "b": {"x": "bad"}}}) == {"a": (1.0, 2.0)}


def test_territories_and_empty_zones() -> None:
    payload = {
        "explored": [{"id": 1, "nodes": ["a", "b"], "centralNode": "a", "size": 2}],
        "frontier": [{"nodes": ["c"]}],
        "emptyZones": [{"x": 10, "y": 20, "suggestedConcepts": ["gap"]}, {"y": 4}],
    }
    territories = territories_from_payload(payload)
    zones = empty_zones_from_payload(payload)

    assert [t.territory_id for t in territories] == ["explored-1", "frontier-0"]
    assert territories.unexplored == ()
    assert zones[0].suggested_concepts == ("gap",)
    assert zones[1].x is None
