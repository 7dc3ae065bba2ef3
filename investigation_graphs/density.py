"""
Density model: intensity lookup by node id and severity banding.

Bands are shared by the heatmap, the density grid, territory colouring and
node styling:

    high    intensity > 0.7
    medium  0.3 < intensity <= 0.7
    low     intensity <= 0.3
    no_data node was never scored

``no_data`` is a separate band; an unscored node is never treated as low.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .snapshot import DensitySample

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NO_DATA = "no_data"


def band_for(
    intensity: Optional[float],
    *,
    high: float = 0.7,
    medium: float = 0.3,
) -> Severity:
    if intensity is None:
        return Severity.NO_DATA
    if intensity > high:
        return Severity.HIGH
    if intensity > medium:
        return Severity.MEDIUM
    return Severity.LOW


@dataclass(frozen=True)
class DensityModel:
    intensities: Dict[str, float] = field(default_factory=dict)
    high: float = 0.7
    medium: float = 0.3

    def __post_init__(self):
        if not (0.0 <= self.medium <= self.high <= 1.0):
            raise ValueError(
                f"band cut points must satisfy 0 <= medium <= high <= 1, "
                f"got medium={self.medium!r} high={self.high!r}"
            )
        for node_id, value in self.intensities.items():
            if not (0.0 <= value <= 1.0):
                raise ValueError(
                    f"intensity for node {node_id!r} must lie in [0, 1], got {value!r}"
                )

    @classmethod
    def from_samples(
        cls,
        samples: Iterable[DensitySample],
        *,
        high: float = 0.7,
        medium: float = 0.3,
    ) -> "DensityModel":
        """Index samples by node id. A later sample for the same node wins."""
        intensities: Dict[str, float] = {}
        for s in samples:
            if s.node_id in intensities:
                logger.debug("[density] duplicate sample for %r, keeping the last", s.node_id)
            intensities[s.node_id] = s.intensity
        return cls(intensities=intensities, high=high, medium=medium)

    # ------------------------------------------------------------------ #
    def intensity(self, node_id: str) -> Optional[float]:
        return self.intensities.get(node_id)

    def band(self, node_id: str) -> Severity:
        return band_for(self.intensities.get(node_id), high=self.high, medium=self.medium)

    def band_of(self, intensity: Optional[float]) -> Severity:
        return band_for(intensity, high=self.high, medium=self.medium)

    @property
    def scored_ids(self) -> List[str]:
        return list(self.intensities)

    def items(self) -> Iterator[Tuple[str, float]]:
        return iter(self.intensities.items())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.intensities

    def __len__(self) -> int:
        return len(self.intensities)

    def band_counts(self, node_ids: Iterable[str]) -> Dict[str, int]:
        """Histogram of bands over ``node_ids`` (unscored ids count as no_data)."""
        counts = {s.value: 0 for s in Severity}
        for nid in node_ids:
            counts[self.band(nid).value] += 1
        return counts
