"""Distance matrices consumed by the optimizer.

Index 0 is always the start point; indices 1..N are the stops in the order
they were given to the optimizer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ...models.domain import GeoPoint
from ..geospatial import haversine_m, travel_minutes

# Unreachable cells in a routing table are priced out rather than read as zero.
UNREACHABLE_PENALTY = 999_999_999.0

Matrix = tuple[tuple[float, ...], ...]


def _freeze(rows: Sequence[Sequence[Optional[float]]], name: str) -> Matrix:
    size = len(rows)
    frozen = []
    for i, row in enumerate(rows):
        if len(row) != size:
            raise ValueError(f"{name} matrix must be square: row {i} has {len(row)} cells, expected {size}")
        frozen.append(tuple(UNREACHABLE_PENALTY if cell is None else float(cell) for cell in row))
    return tuple(frozen)


@dataclass(frozen=True, slots=True)
class DistanceMatrix:
    distances: Matrix
    durations: Optional[Matrix] = None

    @classmethod
    def from_rows(
        cls,
        distances: Sequence[Sequence[Optional[float]]],
        durations: Sequence[Sequence[Optional[float]]] | None = None,
    ) -> "DistanceMatrix":
        frozen_distances = _freeze(distances, "distance")
        frozen_durations = None
        if durations is not None:
            frozen_durations = _freeze(durations, "duration")
            if len(frozen_durations) != len(frozen_distances):
                raise ValueError(
                    f"Matrix size mismatch: distances={len(frozen_distances)}, durations={len(frozen_durations)}"
                )
        return cls(distances=frozen_distances, durations=frozen_durations)

    @classmethod
    def from_table(cls, table: dict) -> "DistanceMatrix":
        """Build a matrix from an OSRM ``table`` payload (metres and seconds)."""
        distances = table.get("distances")
        if distances is None:
            raise ValueError("Routing table response missing distances.")
        return cls.from_rows(distances, table.get("durations"))

    @property
    def size(self) -> int:
        return len(self.distances)

    def distance(self, i: int, j: int) -> float:
        return self.distances[i][j]

    def duration(self, i: int, j: int) -> Optional[float]:
        if self.durations is None:
            return None
        return self.durations[i][j]

    def require_size(self, size: int) -> None:
        if self.size != size:
            raise ValueError(
                f"Distance matrix covers {self.size} points but {size} were given (start point + stops)."
            )


def build_haversine_matrix(points: Sequence[GeoPoint], speed_kmh: float | None = None) -> DistanceMatrix:
    """Great-circle matrix for ``points``; durations are filled when a speed is given."""
    n = len(points)
    distances = [[0.0] * n for _ in range(n)]
    durations = [[0.0] * n for _ in range(n)] if speed_kmh else None

    for i in range(n):
        for j in range(i + 1, n):
            meters = haversine_m(points[i], points[j])
            distances[i][j] = distances[j][i] = meters
            if durations is not None:
                durations[i][j] = durations[j][i] = travel_minutes(meters, speed_kmh) * 60.0

    return DistanceMatrix.from_rows(distances, durations)
