"""Pytest configuration and fixtures."""

import matplotlib

matplotlib.use("Agg")

import pytest

from investigation_graphs.snapshot import DensitySample, Edge, GraphSnapshot, Node
from investigation_graphs.territories import Territory, TerritoryCollection


@pytest.fixture
def chain_snapshot() -> GraphSnapshot:
    """A -> B -> C -> D"""
    return GraphSnapshot.build("ABCD", [("A", "B"), ("B", "C"), ("C", "D")])


@pytest.fixture
def positioned_snapshot() -> GraphSnapshot:
    """Small layout with a hub, a dangling edge and one unpositioned node."""
    nodes = (
        Node(id="hub", label="Hub", position=(0.0, 0.0)),
        Node(id="a", label="Alpha", position=(100.0, 0.0)),
        Node(id="b", label="Beta", position=(0.0, 100.0)),
        Node(id="c", label="Gamma", position=(-100.0, 0.0)),
        Node(id="floating", label="Floating"),
    )
    edges = (
        Edge(source="hub", target="a"),
        Edge(source="hub", target="b", type="equivalence"),
        Edge(source="c", target="hub", type="group"),
        Edge(source="a", target="ghost"),
    )
    return GraphSnapshot(nodes=nodes, edges=edges)


@pytest.fixture
def samples() -> list:
    return [
        DensitySample("hub", 0.9),
        DensitySample("a", 0.5),
        DensitySample("b", 0.1),
    ]


@pytest.fixture
def territories() -> TerritoryCollection:
    return TerritoryCollection(
        explored=(Territory("explored-0", ("hub", "a"), "explored", central_node="hub", size=2),),
        frontier=(Territory("frontier-0", ("b",), "frontier"),),
        unexplored=(Territory("unexplored-0", ("floating",), "unexplored"),),
    )
