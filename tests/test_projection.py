import pytest

from investigation_graphs.projection import (
    CallableProjection,
    IdentityProjection,
    ViewportProjection,
    as_projection,
    project_positions,
)


def test_identity_by_default() -> None:
    proj = as_projection(None)
    assert isinstance(proj, IdentityProjection)
    assert proj.project((3, 4)) == (3.0, 4.0)


def test_viewport_projection() -> None:
    proj = ViewportProjection(scale=0.5, view_center=(100.0, 100.0), viewport_size=(800.0, 600.0))
    assert proj.project((100.0, 100.0)) == (400.0, 300.0)
    assert proj.project((300.0, 0.0)) == (500.0, 250.0)


def test_callable_is_wrapped() -> None:
    proj = as_projection(lambda p: (p[0] * 2, p[1] * 2))
    assert isinstance(proj, CallableProjection)
    assert proj.project((1.0, 2.0)) == (2.0, 4.0)


def test_projection_instance_passes_through() -> None:
    proj = ViewportProjection(scale=2.0)
    assert as_projection(proj) is proj


def test_project_positions_skips_missing() -> None:
    out = project_positions({"a": (1.0, 1.0), "b": None}, lambda p: (p[0] + 1, p[1] + 1))
    assert out == {"a": (2.0, 2.0)}


def test_invalid_projection_rejected() -> None:
    with pytest.raises(ValueError):
        as_projection(42)
    with pytest.raises(ValueError):
        ViewportProjection(scale=0)
    with pytest.raises(ValueError):
        ViewportProjection(scale=float("nan"))
