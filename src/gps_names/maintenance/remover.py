"""Bound the out-degree of every node in a similar-name table.

Greedy: take the node with the most similar names, drop its lowest-scoring
excess edges along with their reverse edges, and repeat until no node has
more than ``max_names``. The max-degree node comes from a lazily re-keyed
heap: stale entries are skipped when popped and re-pushed with the current
degree.
"""
from __future__ import annotations

import heapq
from typing import Callable

import structlog

from gps_names.table import SimilarNameTable

logger = structlog.get_logger(__name__)

PairScorer = Callable[[str, str], float]


def least_similar_names(name: str, similar: set[str], count: int, score_pair: PairScorer) -> list[str]:
    """The ``count`` names in ``similar`` scoring lowest against ``name``."""
    scored = sorted(((score_pair(name, other), other) for other in similar))
    return [other for _, other in scored[:count]]


def prune_similar_names(table: SimilarNameTable, score_pair: PairScorer, max_names: int) -> int:
    """Remove edges until every node has at most ``max_names`` similar names.

    Returns:
        Number of edges removed from over-full nodes
    """
    if max_names < 0:
        raise ValueError("max_names must be >= 0")

    order = {name: i for i, name in enumerate(table)}
    heap = [(-table.degree(name), order[name], name) for name in table if table.degree(name) > max_names]
    heapq.heapify(heap)
    removed = 0

    while heap:
        neg_degree, _, name = heapq.heappop(heap)
        degree = table.degree(name)
        if degree != -neg_degree:
            if degree > max_names:
                heapq.heappush(heap, (-degree, order[name], name))
            continue
        if degree <= max_names:
            continue

        similar = table[name]
        for other in least_similar_names(name, similar, degree - max_names, score_pair):
            similar.discard(other)
            removed += 1
            if other not in table:
                logger.warning("remover.missing_node", name=other, referenced_by=name)
            elif not table.remove_edge(other, name):
                logger.warning("remover.missing_reverse_edge", name=name, similar=other)
        logger.debug("remover.pruned", name=name, degree=degree, kept=len(similar))

    logger.info("remover.done", edges_removed=removed, max_names=max_names)
    return removed


def symmetrize(table: SimilarNameTable) -> int:
    """Add every missing reverse edge; returns how many were added."""
    missing = table.asymmetric_edges()
    for name, other in missing:
        table.add_edge(other, name)
    if missing:
        logger.info("table.symmetrized", edges_added=len(missing))
    return len(missing)
