"""Tour sequencing services."""

from .absence import reoptimize_after_absence, splice_absent_stop
from .distance import DistanceMatrix, build_haversine_matrix
from .optimizer import optimize_tour

__all__ = [
    "optimize_tour",
    "reoptimize_after_absence",
    "splice_absent_stop",
    "DistanceMatrix",
    "build_haversine_matrix",
]
