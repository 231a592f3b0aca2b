"""Viterbi-style re-estimation of phoneme edit costs.

Each iteration aligns every known-equivalent pair under the current costs,
counts the symbol pairs on the best paths, and turns the counts into new
costs. Training stops when the matrix stops changing or the iteration cap
is reached.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import structlog

from gps_names.exceptions import ResourceError
from gps_names.phonemes import PhonemeTokenizer

from .cost_matrix import CostMatrix
from .lattice import AlignmentLattice

logger = structlog.get_logger(__name__)

_FIELD_SPLIT_RE = re.compile(r"[:, ]+")


@dataclass
class TrainingResult:
    cost_matrix: CostMatrix
    iterations: int
    differences: list[int] = field(default_factory=list)
    converged: bool = False


def read_training_pairs(path: Path | str) -> list[tuple[str, str]]:
    """Read ``name[:, ]variant...`` lines into (name, variant) pairs."""
    path = Path(path)
    if not path.is_file():
        raise ResourceError("training corpus", str(path))
    pairs = []
    with path.open(encoding="utf-8") as f:
        for line_number, line in enumerate(f, 1):
            fields = [x for x in _FIELD_SPLIT_RE.split(line.strip()) if x]
            if len(fields) < 2:
                if fields:
                    logger.warning("training.malformed_line", line_number=line_number, line=line.rstrip())
                continue
            pairs.extend((fields[0], variant) for variant in fields[1:])
    return pairs


def train_cost_matrix(
    pairs: Iterable[tuple[str, str]],
    tokenizer: PhonemeTokenizer,
    *,
    max_iterations: int = 20,
    convergence_threshold: int = 1,
    smooth: bool = True,
    initial: CostMatrix | None = None,
) -> TrainingResult:
    """Learn a cost matrix from pairs of names known to be equivalent.

    Args:
        pairs: (name, variant) pairs
        tokenizer: Phoneme tokenizer used for both sides
        max_iterations: Iteration cap
        convergence_threshold: Stop once the total per-cell change is below this
        smooth: Add-one smoothing before taking logs
        initial: Starting costs; defaults to plain edit-distance costs

    Returns:
        TrainingResult with a read-only matrix
    """
    tokenized = [(tokenizer.tokenize(a), tokenizer.tokenize(b)) for a, b in pairs]
    current = initial.copy() if initial is not None else CostMatrix.seeded()
    lattice = AlignmentLattice()
    result = TrainingResult(cost_matrix=current, iterations=0)

    for iteration in range(1, max_iterations + 1):
        counts = CostMatrix()
        for source, target in tokenized:
            lattice.reset(source, target)
            lattice.compute_best_path(current)
            lattice.update_counts(counts)
        counts.calc_costs(smooth)

        diff = current.difference(counts)
        result.differences.append(diff)
        result.iterations = iteration
        current = counts
        logger.info("training.iteration", iteration=iteration, difference=diff, pairs=len(tokenized))

        if diff < convergence_threshold:
            result.converged = True
            break

    result.cost_matrix = current.freeze()
    return result
