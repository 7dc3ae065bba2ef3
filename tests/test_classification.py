import pytest

from investigation_graphs.classification import (
    classify,
    degrees,
    find_nodes,
    hubs,
    in_degrees,
    sinks,
    sources,
)
from investigation_graphs.snapshot import Edge, GraphSnapshot, Node


def test_chain_degrees_sources_and_sinks(chain_snapshot: GraphSnapshot) -> None:
    assert degrees(chain_snapshot) == {"A": 1, "B": 2, "C": 2, "D": 1}
    assert sources(chain_snapshot) == {"A"}
    assert sinks(chain_snapshot) == {"D"}


def test_hub_threshold_is_strict() -> None:
    # centre has degree 2 in the first graph and 3 in the second
    two = GraphSnapshot.build(["c", "x", "y"], [("c", "x"), ("c", "y")])
    three = GraphSnapshot.build(["c", "x", "y", "z"], [("c", "x"), ("c", "y"), ("z", "c")])

    assert hubs(two, threshold=2) == set()
    assert hubs(three, threshold=2) == {"c"}


def test_hub_threshold_is_tunable() -> None:
    snap = GraphSnapshot.build(["c", "x"], [("c", "x")])
    assert hubs(snap, threshold=0) == {"c", "x"}
    assert hubs(snap, threshold=1) == set()


def test_negative_threshold_rejected(chain_snapshot: GraphSnapshot) -> None:
    with pytest.raises(ValueError):
        hubs(chain_snapshot, threshold=-1)


def test_self_loop_counts_twice() -> None:
    snap = GraphSnapshot.build(["loop"], [("loop", "loop")])
    assert degrees(snap) == {"loop": 2}
    assert sources(snap) == set()
    assert sinks(snap) == set()


def test_dangling_edges_only_count_for_existing_endpoint(positioned_snapshot: GraphSnapshot) -> None:
    deg = degrees(positioned_snapshot)

    assert "ghost" not in deg
    # hub -> a and a -> ghost
    assert deg["a"] == 2
    assert deg["floating"] == 0


def test_dangling_source_still_gives_incoming_edge() -> None:
    snap = GraphSnapshot(nodes=GraphSnapshot.build(["a"]).nodes, edges=(Edge("ghost", "a"),))
    assert degrees(snap) == {"a": 1}
    assert sources(snap) == set()


def test_sources_partition_nodes(positioned_snapshot: GraphSnapshot) -> None:
    src = sources(positioned_snapshot)
    ins = in_degrees(positioned_snapshot)

    for node_id, d in ins.items():
        assert (node_id in src) == (d == 0)
    assert src == {"c", "floating"}


def test_isolated_node_is_source_and_sink(positioned_snapshot: GraphSnapshot) -> None:
    assert "floating" in sources(positioned_snapshot)
    assert "floating" in sinks(positioned_snapshot)


def test_empty_snapshot_gives_empty_sets() -> None:
    snap = GraphSnapshot()
    result = classify(snap)
    assert result.hubs == frozenset()
    assert result.sources == frozenset()
    assert result.sinks == frozenset()
    assert result.degrees == {}


def test_classify_bundles_all_sets(positioned_snapshot: GraphSnapshot) -> None:
    result = classify(positioned_snapshot, threshold=2)

    assert result.hubs == {"hub"}
    assert result.sinks == {"b", "floating"}
    assert result.to_dict()["hubs"] == ["hub"]
    assert result.to_dict()["threshold"] == 2


def test_find_nodes_matches_id_or_label(positioned_snapshot: GraphSnapshot) -> None:
    assert find_nodes(positioned_snapshot, "Alpha") == ["a"]
    assert find_nodes(positioned_snapshot, "hub") == ["hub"]
    assert find_nodes(positioned_snapshot, "nothing") == []


def test_find_nodes_is_case_insensitive_substring() -> None:
    snap = GraphSnapshot(
        nodes=(
            Node("n1", label="Suspect Alpha"),
            Node("n2", label="ALPHANUMERIC code"),
            Node("n3", label="Witness"),
        )
    )

    assert find_nodes(snap, "alpha") == ["n1", "n2"]
    assert find_nodes(snap, "wit") == ["n3"]
    assert find_nodes(snap, "n3") == ["n3"]


def test_nan_threshold_rejected(chain_snapshot: GraphSnapshot) -> None:
    with pytest.raises(ValueError):
        hubs(chain_snapshot, threshold=float("nan"))
