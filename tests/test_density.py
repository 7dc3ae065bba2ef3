import math

import pytest

from investigation_graphs.density import DensityModel, Severity, band_for
from investigation_graphs.snapshot import DensitySample


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.71, Severity.HIGH),
        (0.70, Severity.MEDIUM),
        (0.31, Severity.MEDIUM),
        (0.30, Severity.LOW),
        (0.0, Severity.LOW),
        (None, Severity.NO_DATA),
    ],
)
def test_band_boundaries(value, expected) -> None:
    assert band_for(value) is expected


def test_unscored_node_is_not_low(samples) -> None:
    model = DensityModel.from_samples(samples)

    assert model.intensity("floating") is None
    assert model.band("floating") is Severity.NO_DATA
    assert model.band("b") is Severity.LOW
    assert "floating" not in model


def test_lookup_and_bands(samples) -> None:
    model = DensityModel.from_samples(samples)

    assert len(model) == 3
    assert model.intensity("hub") == 0.9
    assert model.band("hub") is Severity.HIGH
    assert model.band("a") is Severity.MEDIUM
    assert model.scored_ids == ["hub", "a", "b"]


def test_later_sample_wins() -> None:
    model = DensityModel.from_samples([DensitySample("a", 0.2), DensitySample("a", 0.8)])
    assert model.intensity("a") == 0.8


def test_band_counts(samples) -> None:
    model = DensityModel.from_samples(samples)
    counts = model.band_counts(["hub", "a", "b", "floating"])

    assert counts == {"high": 1, "medium": 1, "low": 1, "no_data": 1}


def test_custom_cut_points() -> None:
    model = DensityModel({"a": 0.5}, high=0.4, medium=0.1)
    assert model.band("a") is Severity.HIGH


@pytest.mark.parametrize("bad", [-0.1, 1.5, math.nan, math.inf])
def test_sample_outside_unit_interval_rejected(bad) -> None:
    with pytest.raises(ValueError):
        DensitySample("a", bad)


def test_inverted_cut_points_rejected() -> None:
    with pytest.raises(ValueError):
        DensityModel({}, high=0.2, medium=0.5)


@pytest.mark.parametrize("bad", [5.0, -0.5, math.nan])
def test_model_rejects_out_of_range_intensity(bad) -> None:
    with pytest.raises(ValueError):
        DensityModel({"a": bad})
