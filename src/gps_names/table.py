"""Persisted similar-name table.

One line per node: ``"name","similar names sorted and space-separated"``.
In memory the table is an insertion-ordered mapping from name to a set of
similar names, i.e. a graph whose edges should be symmetric.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

import structlog

from .exceptions import MalformedRecordError, ResourceError
from .fs import atomic_write_text

logger = structlog.get_logger(__name__)


class SimilarNameTable:
    def __init__(self, rows: dict[str, set[str]] | None = None) -> None:
        self._rows: dict[str, set[str]] = {}
        for name, similar in (rows or {}).items():
            self._rows[name] = set(similar)

    def __contains__(self, name: object) -> bool:
        return name in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rows)

    def __getitem__(self, name: str) -> set[str]:
        return self._rows[name]

    def get(self, name: str) -> set[str] | None:
        return self._rows.get(name)

    def items(self):
        return self._rows.items()

    def add_node(self, name: str, similar: Iterable[str] = ()) -> bool:
        """Create a node; returns False (and leaves it untouched) if it exists."""
        if name in self._rows:
            return False
        self._rows[name] = set(similar)
        return True

    def add_edge(self, name: str, similar: str) -> None:
        self._rows.setdefault(name, set()).add(similar)

    def remove_edge(self, name: str, similar: str) -> bool:
        edges = self._rows.get(name)
        if edges is None or similar not in edges:
            return False
        edges.remove(similar)
        return True

    def degree(self, name: str) -> int:
        return len(self._rows.get(name, ()))

    def asymmetric_edges(self) -> list[tuple[str, str]]:
        """Edges (a, b) whose reverse (b, a) is missing."""
        return [
            (name, other)
            for name, similar in self._rows.items()
            for other in sorted(similar)
            if name not in self._rows.get(other, ())
        ]

    def is_symmetric(self) -> bool:
        return not self.asymmetric_edges()

    def to_dict(self) -> dict[str, list[str]]:
        return {name: sorted(similar) for name, similar in self._rows.items()}


def format_table_line(name: str, similar: Iterable[str]) -> str:
    return f'"{name}","{" ".join(sorted(similar))}"'


def parse_table_line(line: str, line_number: int | None = None) -> tuple[str, set[str]]:
    text = line.rstrip("\r\n")
    head, sep, tail = text.partition(",")
    if not sep:
        raise MalformedRecordError("expected two fields", line, line_number)
    if len(head) < 2 or not (head.startswith('"') and head.endswith('"')):
        raise MalformedRecordError("name field is not quoted", line, line_number)
    if len(tail) < 2 or not (tail.startswith('"') and tail.endswith('"')):
        raise MalformedRecordError("similar-names field is not quoted", line, line_number)
    name = head[1:-1]
    if not name:
        raise MalformedRecordError("empty name", line, line_number)
    similar = {s for s in tail[1:-1].split(" ") if s}
    return name, similar


def iter_table_lines(lines: Iterable[str]) -> Iterator[tuple[str, set[str]]]:
    for line_number, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            yield parse_table_line(line, line_number)
        except MalformedRecordError as e:
            logger.warning("table.malformed_line", error=str(e))


def read_table(path: Path | str) -> SimilarNameTable:
    path = Path(path)
    table = SimilarNameTable()
    try:
        with path.open(encoding="utf-8") as f:
            for name, similar in iter_table_lines(f):
                if not table.add_node(name, similar):
                    logger.warning("table.duplicate_name", name=name)
    except OSError as e:
        raise ResourceError("similar-name table", str(path), e.strerror or "unreadable") from e
    logger.info("table.loaded", path=str(path), names=len(table))
    return table


def dumps_table(table: SimilarNameTable) -> str:
    return "".join(format_table_line(name, similar) + "\n" for name, similar in table.items())


def write_table(path: Path | str, table: SimilarNameTable) -> Path:
    target = atomic_write_text(path, dumps_table(table))
    logger.info("table.written", path=str(target), names=len(table))
    return target
