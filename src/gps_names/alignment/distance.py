from __future__ import annotations

import threading
from typing import Sequence

from .cost_matrix import CostMatrix
from .lattice import AlignmentLattice


class WeightedEditDistance:
    """Score phoneme sequences against a trained, read-only cost matrix.

    Each thread gets its own lattice; the cost matrix is shared.
    """

    def __init__(self, costs: CostMatrix, smooth: float = 1.0) -> None:
        if smooth <= 0:
            raise ValueError("smooth must be > 0")
        self.costs = costs.freeze()
        self.smooth = smooth
        self._local = threading.local()

    def lattice(self, source: Sequence[int], target: Sequence[int]) -> AlignmentLattice:
        lattice = getattr(self._local, "lattice", None)
        if lattice is None:
            lattice = AlignmentLattice()
            self._local.lattice = lattice
        lattice.reset(source, target)
        lattice.compute_best_path(self.costs)
        return lattice

    def score(self, source: Sequence[int], target: Sequence[int]) -> float:
        """One-directional score; not symmetric in general."""
        return self.lattice(source, target).best_path_score(self.costs, self.smooth)

    def min_score(self, a: Sequence[int], b: Sequence[int]) -> float:
        """Smaller of the two directional scores.

        Position weighting favours the early positions of whichever sequence
        is the source; taking the minimum removes that bias.
        """
        return min(self.score(a, b), self.score(b, a))
