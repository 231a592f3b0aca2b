"""Build similar-name rows by scoring every pair of common names.

Exhaustive, so it is run in slices (``begin``/``count``) over a large
vocabulary. Each name is only compared with names that sort after it; the
reverse edges come from a later ``symmetrize`` pass.
"""
from __future__ import annotations

from typing import Iterator, Sequence

import structlog

from .remover import PairScorer

logger = structlog.get_logger(__name__)


def build_similar_names(
    common_names: Sequence[str],
    score_pair: PairScorer,
    threshold: float,
    *,
    begin: int = 0,
    count: int | None = None,
    progress_every: int = 1000,
) -> Iterator[tuple[str, set[str]]]:
    """Yield ``(name, similar names)`` for names ``begin`` .. ``begin+count``."""
    end = len(common_names) if count is None else min(len(common_names), begin + count)
    for i in range(begin, end):
        name = common_names[i]
        similar = {
            other for other in common_names
            if name < other and score_pair(name, other) >= threshold
        }
        yield name, similar
        if (i - begin + 1) % progress_every == 0:
            logger.info("builder.progress", done=i - begin + 1, total=end - begin)
