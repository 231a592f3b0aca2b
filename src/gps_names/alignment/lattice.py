"""Minimum-cost alignment of two phoneme sequences.

The lattice is a (|source|+1) x (|target|+1) grid. From each cell there are
three forward arcs: insertion (y+1), deletion (x+1) and substitution or
match (x+1, y+1). All costs are non-negative, so a single row-major sweep
finds the best path. Buffers are kept between calls and only grow, so one
lattice per thread can be reused for every comparison.
"""
from __future__ import annotations

import math
import sys
from typing import Sequence

from gps_names.phonemes import EMPTY_ID, phoneme_symbol

from .cost_matrix import CostMatrix

_UNREACHED = sys.maxsize


class AlignmentLattice:
    def __init__(self, source: Sequence[int] = (), target: Sequence[int] = ()) -> None:
        self._capacity = 0
        self._score: list[int] = []
        self._prev_x: list[int] = []
        self._prev_y: list[int] = []
        self.reset(source, target)

    def reset(self, source: Sequence[int], target: Sequence[int]) -> None:
        """Point the lattice at a new pair, reusing the scratch buffers."""
        self.source = tuple(source)
        self.target = tuple(target)
        self._width = len(self.target) + 1
        size = (len(self.source) + 1) * self._width
        if size > self._capacity:
            grow = size - self._capacity
            self._score.extend([_UNREACHED] * grow)
            self._prev_x.extend([-1] * grow)
            self._prev_y.extend([-1] * grow)
            self._capacity = size
        self._score[:size] = [_UNREACHED] * size
        self._prev_x[:size] = [-1] * size
        self._prev_y[:size] = [-1] * size
        self._score[0] = 0
        self._computed = False

    def _relax(self, from_x: int, from_y: int, to_x: int, to_y: int, new_score: int) -> None:
        idx = to_x * self._width + to_y
        if new_score < self._score[idx]:
            self._score[idx] = new_score
            self._prev_x[idx] = from_x
            self._prev_y[idx] = from_y

    def compute_best_path(self, costs: CostMatrix) -> int:
        """Fill the lattice and return the best total (unweighted) cost."""
        source, target, width = self.source, self.target, self._width
        get_cost = costs.get_cost
        n_src, n_tgt = len(source), len(target)

        for x in range(n_src + 1):
            for y in range(n_tgt + 1):
                current = self._score[x * width + y]
                if y < n_tgt:
                    self._relax(x, y, x, y + 1, current + get_cost(EMPTY_ID, target[y]))
                if x < n_src:
                    self._relax(x, y, x + 1, y, current + get_cost(source[x], EMPTY_ID))
                if x < n_src and y < n_tgt:
                    self._relax(x, y, x + 1, y + 1, current + get_cost(source[x], target[y]))

        self._computed = True
        return self._score[n_src * width + n_tgt]

    def steps(self) -> list[tuple[int, int]]:
        """(source id, target id) for each step of the best path, start to end.

        EMPTY_ID stands in for the missing side of an insertion or deletion.
        """
        if not self._computed:
            raise RuntimeError("compute_best_path must be called first")
        result = []
        to_x, to_y = len(self.source), len(self.target)
        while to_x > 0 or to_y > 0:
            idx = to_x * self._width + to_y
            from_x, from_y = self._prev_x[idx], self._prev_y[idx]
            src = EMPTY_ID if from_x == to_x else self.source[from_x]
            tgt = EMPTY_ID if from_y == to_y else self.target[from_y]
            result.append((src, tgt))
            to_x, to_y = from_x, from_y
        result.reverse()
        return result

    def edit_script(self) -> list[tuple[str, str]]:
        return [(phoneme_symbol(a), phoneme_symbol(b)) for a, b in self.steps()]

    @staticmethod
    def self_cost(tokens: Sequence[int], costs: CostMatrix, smooth: float) -> float:
        return sum(costs.get_cost(t, t) / (i + smooth) for i, t in enumerate(tokens))

    def best_path_score(self, costs: CostMatrix, smooth: float) -> float:
        """Position-weighted, length-normalised cost of the best path.

        Step ``i`` is weighted ``1 / (i + smooth)`` so early divergences
        count more than late ones. The sum is divided by the larger of the
        two sequences' self-substitution costs. Higher means less alike.
        """
        total = sum(
            costs.get_cost(a, b) / (i + smooth)
            for i, (a, b) in enumerate(self.steps())
        )
        norm = max(self.self_cost(self.source, costs, smooth), self.self_cost(self.target, costs, smooth))
        if norm <= 0:
            return 0.0 if total == 0 else math.inf
        return total / norm

    def update_counts(self, counts: CostMatrix) -> None:
        """Add one observation per best-path step to a counts table."""
        for a, b in self.steps():
            counts.add_count(a, b, 1)
