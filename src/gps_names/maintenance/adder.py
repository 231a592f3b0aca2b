"""Add new rows to a similar-name table.

Existing rows are never changed. Each new name gets its similar names from
the candidate generator; run ``symmetrize`` afterwards to add the reverse
edges to existing rows.
"""
from __future__ import annotations

import re
from typing import Iterable

import structlog

from gps_names.generator import SimilarNameGenerator
from gps_names.normalize import NameNormalizer
from gps_names.table import SimilarNameTable

logger = structlog.get_logger(__name__)

# Only the first field of a names-file line is a name
_FIRST_FIELD_RE = re.compile(r"[:,]+")


def add_similar_names(
    table: SimilarNameTable,
    names: Iterable[str],
    generator: SimilarNameGenerator,
    normalizer: NameNormalizer,
    *,
    is_surname: bool,
    limit: int | None = None,
    progress_every: int = 1000,
) -> list[str]:
    """Add a row for every new name piece found in ``names``.

    Args:
        table: Table to extend in place
        names: Raw lines; text after the first comma or colon is ignored
        generator: Candidate generator supplying each row's similar names
        normalizer: Splits each raw name into cleaned pieces
        is_surname: Passed to the normalizer
        limit: Stop after this many rows have been added

    Returns:
        The names that were added, in order
    """
    added: list[str] = []
    for line in names:
        if limit is not None and len(added) >= limit:
            break
        raw = _FIRST_FIELD_RE.split(line.strip(), maxsplit=1)[0]
        for piece in normalizer.normalize(raw, is_surname):
            # single letters carry no signal; existing rows stay untouched
            if len(piece) <= 1 or piece in table:
                continue
            table.add_node(piece, generator.generate(piece))
            added.append(piece)
            if len(added) % progress_every == 0:
                logger.info("adder.progress", added=len(added))
    logger.info("adder.done", added=len(added), names=len(table))
    return added
