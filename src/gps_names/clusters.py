"""Coarse index over the name vocabulary.

Cluster file lines are ``representative: member member ...``; members may be
separated by spaces or commas.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import structlog

from .exceptions import MalformedRecordError, ResourceError

logger = structlog.get_logger(__name__)

_HEAD_SPLIT_RE = re.compile(r"[: ]+")
_MEMBER_SPLIT_RE = re.compile(r"[, ]+")


@dataclass(frozen=True)
class Cluster:
    representative: str
    members: tuple[str, ...] = ()

    def names(self) -> Iterator[str]:
        yield self.representative
        yield from self.members


def parse_cluster_line(line: str, line_number: int | None = None) -> Cluster:
    text = line.strip()
    fields = _HEAD_SPLIT_RE.split(text, maxsplit=1)
    representative = fields[0]
    if not representative:
        raise MalformedRecordError("missing representative name", line, line_number)
    members: tuple[str, ...] = ()
    if len(fields) > 1:
        members = tuple(m for m in _MEMBER_SPLIT_RE.split(fields[1]) if m)
    return Cluster(representative, members)


def iter_clusters(lines: Iterable[str]) -> Iterator[Cluster]:
    """Parse cluster lines, skipping blank and malformed ones."""
    for line_number, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            yield parse_cluster_line(line, line_number)
        except MalformedRecordError as e:
            logger.warning("clusters.malformed_line", error=str(e))


def read_clusters(path: Path | str) -> list[Cluster]:
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            clusters = list(iter_clusters(f))
    except OSError as e:
        raise ResourceError("clusters", str(path), e.strerror or "unreadable") from e
    logger.info("clusters.loaded", path=str(path), clusters=len(clusters))
    return clusters
