import pytest

from investigation_graphs.snapshot import Edge, GraphSnapshot, Node


def test_duplicate_ids_rejected() -> None:
    with pytest.raises(ValueError):
        GraphSnapshot(nodes=(Node("a"), Node("a")))


def test_edge_index_is_stable(positioned_snapshot: GraphSnapshot) -> None:
    indexed = list(positioned_snapshot.iter_edges())

    assert [i for i, _ in indexed] == [0, 1, 2, 3]
    assert indexed[3][1] == Edge(source="a", target="ghost")
    assert positioned_snapshot.dangling_edges() == [3]
    assert len(positioned_snapshot.internal_edges()) == 3


def test_lookup_and_positions(positioned_snapshot: GraphSnapshot) -> None:
    assert "hub" in positioned_snapshot
    assert "ghost" not in positioned_snapshot
    assert positioned_snapshot.node("missing") is None
    assert "floating" not in positioned_snapshot.positions()


def test_with_positions_returns_new_snapshot(positioned_snapshot: GraphSnapshot) -> None:
    moved = positioned_snapshot.with_positions({"floating": {"x": 7, "y": 8}, "ghost": (0, 0)})

    assert moved.node("floating").position == (7.0, 8.0)
    assert positioned_snapshot.node("floating").position is None
    assert moved.edges == positioned_snapshot.edges
    assert "ghost" not in moved


def test_self_loop_flag() -> None:
    assert Edge("a", "a").is_self_loop
    assert not Edge("a", "b").is_self_loop


def test_non_finite_positions_are_unknown() -> None:
    snap = GraphSnapshot(
        nodes=(
            Node("a", position=(1.0, 2.0)),
            Node("b", position=(float("nan"), 0.0)),
            Node("c", position=(0.0, float("inf"))),
        )
    )
    assert snap.positions() == {"a": (1.0, 2.0)}


def test_filter_by_context_keeps_internal_edges() -> None:
    snap = GraphSnapshot(
        nodes=(
            Node("a", context="case-1"),
            Node("b", context="case-1"),
            Node("c", context="case-2"),
        ),
        edges=(
            Edge("a", "c"),
            Edge("a", "b", type="equivalence"),
            Edge("b", "ghost"),
            Edge("b", "a"),
        ),
    )
    filtered = snap.filter_by_context("case-1")

    assert [n.id for n in filtered.nodes] == ["a", "b"]
    assert [(e.source, e.target) for e in filtered.edges] == [("a", "b"), ("b", "a")]
    assert filtered.edges[0].type == "equivalence"
    assert snap.filter_by_context("") is snap
    assert len(snap.filter_by_context("unknown")) == 0
