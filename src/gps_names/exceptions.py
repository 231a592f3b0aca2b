from __future__ import annotations

from dataclasses import dataclass


class NameSimilarityError(Exception):
    """Base class for errors raised by the name similarity engine."""


@dataclass
class ResourceError(NameSimilarityError):
    """Raised when a required artifact is missing or unreadable.

    Scoring is meaningless without a cost matrix, a scorer model, or a
    cluster file, so these are raised at construction time.
    """

    resource: str
    path: str | None = None
    reason: str = "not found"

    def __str__(self) -> str:
        base = f"{self.resource}: {self.reason}"
        if self.path:
            base += f" ({self.path})"
        return base


class EncodingError(NameSimilarityError):
    """A phonetic encoder could not produce a code for its input."""


@dataclass
class MalformedRecordError(NameSimilarityError):
    """A persisted table, cluster, or corpus line could not be parsed."""

    reason: str
    line: str = ""
    line_number: int | None = None

    def __str__(self) -> str:
        where = f"line {self.line_number}: " if self.line_number is not None else ""
        return f"{where}{self.reason} ({self.line!r})"


class FrozenMatrixError(NameSimilarityError):
    """A mutation was attempted on a read-only cost matrix."""
