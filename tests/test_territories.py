import pytest

from investigation_graphs.projection import ViewportProjection
from investigation_graphs.territories import (
    EmptyZone,
    Territory,
    TerritoryCollection,
    compute_empty_zone_circles,
    compute_territory_badges,
    compute_territory_circles,
    compute_territory_geometry,
    territory_from_mapping,
)


def test_single_member_gets_minimum_radius() -> None:
    territory = Territory("t", ("a",), "explored")
    circle, label = compute_territory_geometry(territory, {"a": (10.0, 10.0)})

    assert circle.center == (10.0, 10.0)
    assert circle.radius == 50.0
    assert label.text == "explored: 1 nodes"


def test_centroid_and_farthest_member() -> None:
    territory = Territory("t", ("a", "b"), "frontier")
    circle, _ = compute_territory_geometry(territory, {"a": (0.0, 0.0), "b": (200.0, 0.0)})

    assert circle.center == (100.0, 0.0)
    assert circle.radius == pytest.approx(100.0)
    assert circle.color == "#f59e0b"


def test_unpositioned_members_are_skipped() -> None:
    territory = Territory("t", ("a", "missing"), "unexplored")
    circle, _ = compute_territory_geometry(territory, {"a": (5.0, 5.0)})
    assert circle.center == (5.0, 5.0)

    nobody = Territory("empty", ("missing",), "unexplored")
    assert compute_territory_geometry(nobody, {"a": (5.0, 5.0)}) is None


def test_minimum_radius_applies_in_pixel_space() -> None:
    proj = ViewportProjection(scale=2.0, viewport_size=(100.0, 100.0))
    territory = Territory("t", ("a", "b"), "explored")
    circle, _ = compute_territory_geometry(territory, {"a": (0.0, 0.0), "b": (40.0, 0.0)}, proj)

    assert circle.center == (90.0, 50.0)
    assert circle.radius == pytest.approx(50.0)


def test_collection_circles_and_labels(positioned_snapshot, territories) -> None:
    circles, labels = compute_territory_circles(territories, positioned_snapshot.positions())

    assert [c.territory_id for c in circles] == ["explored-0", "frontier-0"]
    assert [lbl.text for lbl in labels] == ["explored: 2 nodes", "frontier: 1 nodes"]


def test_badges_anchor_on_central_node(positioned_snapshot, territories) -> None:
    badges = compute_territory_badges(territories, positioned_snapshot.positions())

    assert [(b.node_id, b.text) for b in badges] == [("hub", "E: 2"), ("b", "F: 1")]
    assert badges[0].anchor == (0.0, 0.0)
    assert badges[0].color == "#ef4444"


def test_empty_zone_circles() -> None:
    zones = [EmptyZone(10.0, 20.0), EmptyZone(None, 5.0), EmptyZone(0.0, 0.0, radius=80.0)]
    circles = compute_empty_zone_circles(zones)

    assert [(z.index, z.center, z.radius) for z in circles] == [
        (0, (10.0, 20.0), 50.0),
        (2, (0.0, 0.0), 80.0),
    ]


def test_collection_grouping_and_counts(territories) -> None:
    flat = list(territories)
    regrouped = TerritoryCollection.from_territories(flat)

    assert len(regrouped) == 3
    assert regrouped.counts() == {"explored": 1, "frontier": 1, "unexplored": 1}
    assert set(regrouped.by_id()) == {"explored-0", "frontier-0", "unexplored-0"}


def test_territory_from_mapping_uses_stable_id() -> None:
    t = territory_from_mapping({"id": 7, "nodes": ["a", "b"], "size": 4, "centralNode": "b"}, "frontier", 0)
    anon = territory_from_mapping({"nodes": ["c"]}, "explored", 3)

    assert t.territory_id == "frontier-7"
    assert t.node_count == 4
    assert t.anchor_node == "b"
    assert anon.territory_id == "explored-3"
    assert anon.anchor_node == "c"


def test_invalid_classification_rejected() -> None:
    with pytest.raises(ValueError):
        Territory("t", ("a",), "conquered")


def test_negative_radius_rejected() -> None:
    with pytest.raises(ValueError):
        compute_territory_geometry(Territory("t", ("a",), "explored"), {"a": (0.0, 0.0)}, min_radius=-1)
    with pytest.raises(ValueError):
        compute_empty_zone_circles([], default_radius=-5)


def test_non_finite_members_are_skipped() -> None:
    territory = Territory("t", ("a", "b"), "explored", central_node="b")
    positions = {"a": (10.0, 10.0), "b": (float("nan"), 0.0)}
    circle, _ = compute_territory_geometry(territory, positions)
    badges = compute_territory_badges(TerritoryCollection(explored=(territory,)), positions)

    assert circle.center == (10.0, 10.0)
    assert circle.radius == 50.0
    assert badges == []


def test_unusable_zone_radius_falls_back() -> None:
    zones = [EmptyZone(0.0, 0.0, radius=float("nan")), EmptyZone(float("inf"), 0.0)]
    circles = compute_empty_zone_circles(zones)

    assert [(z.index, z.radius) for z in circles] == [(0, 50.0)]


def test_nan_radius_rejected() -> None:
    with pytest.raises(ValueError):
        compute_territory_geometry(
            Territory("t", ("a",), "explored"), {"a": (0.0, 0.0)}, min_radius=float("nan")
        )
    with pytest.raises(ValueError):
        compute_empty_zone_circles([], default_radius=float("nan"))
