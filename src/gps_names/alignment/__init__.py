"""Phoneme alignment engine: cost matrix, lattice, scoring and training."""
from __future__ import annotations

from .cost_matrix import COST_MULTIPLIER, MAX_EDIT_COST, CostMatrix
from .distance import WeightedEditDistance
from .lattice import AlignmentLattice
from .training import TrainingResult, read_training_pairs, train_cost_matrix

__all__ = [
    "COST_MULTIPLIER",
    "MAX_EDIT_COST",
    "AlignmentLattice",
    "CostMatrix",
    "TrainingResult",
    "WeightedEditDistance",
    "read_training_pairs",
    "train_cost_matrix",
]
