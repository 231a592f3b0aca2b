"""Precision/recall evaluation against labeled name pairs.

The labeled file has a header line and rows ``label,"name1","name2"``; when
the header's second column is ``"Nickname"`` the names are in columns 3-4.
An empty label marks a match, ``1`` a non-match; other labels are ignored.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

import structlog

from .exceptions import EncodingError, ResourceError
from .normalize import NameNormalizer
from .phonetic import CodeKind, encode
from .table import SimilarNameTable

logger = structlog.get_logger(__name__)

Matcher = Callable[[str, str], bool]


@dataclass
class EvaluationResult:
    true_pos: int = 0
    false_neg: int = 0
    false_pos: int = 0
    true_neg: int = 0
    skipped: int = 0

    @property
    def precision(self) -> float:
        denom = self.true_pos + self.false_pos
        return self.true_pos / denom if denom else 0.0

    @property
    def recall(self) -> float:
        denom = self.true_pos + self.false_neg
        return self.true_pos / denom if denom else 0.0

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if p + r else 0.0

    def record(self, labeled_match: bool, predicted_match: bool) -> None:
        if labeled_match:
            if predicted_match:
                self.true_pos += 1
            else:
                self.false_neg += 1
        elif predicted_match:
            self.false_pos += 1
        else:
            self.true_neg += 1


def iter_labeled_pairs(path: Path | str) -> Iterator[tuple[bool, str, str]]:
    """Yield ``(is_match, name1, name2)`` for every definitely-labeled row."""
    path = Path(path)
    if not path.is_file():
        raise ResourceError("labeled pairs", str(path))
    with path.open(encoding="utf-8") as f:
        header = f.readline().rstrip("\r\n").split(",")
        offset = 2 if len(header) > 1 and header[1] == '"Nickname"' else 1
        for line_number, line in enumerate(f, 2):
            fields = line.rstrip("\r\n").split(",")
            if len(fields) < offset + 2:
                logger.warning("evaluation.malformed_line", line_number=line_number, line=line.rstrip())
                continue
            label = fields[0]
            if label not in ("", "1"):
                continue
            yield label == "", fields[offset].replace('"', ""), fields[offset + 1].replace('"', "")


def evaluate(path: Path | str, matcher: Matcher, normalizer: NameNormalizer, *, is_surname: bool = False) -> EvaluationResult:
    result = EvaluationResult()
    for is_match, raw1, raw2 in iter_labeled_pairs(path):
        names1 = normalizer.normalize(raw1, is_surname)
        names2 = normalizer.normalize(raw2, is_surname)
        if len(names1) != 1 or len(names2) != 1:
            logger.warning("evaluation.invalid_pair", name1=raw1, name2=raw2)
            result.skipped += 1
            continue
        result.record(is_match, matcher(names1[0], names2[0]))
    logger.info(
        "evaluation.done",
        precision=round(result.precision, 4),
        recall=round(result.recall, 4),
        f1=round(result.f1, 4),
        skipped=result.skipped,
    )
    return result


def code_matcher(kind: CodeKind) -> Matcher:
    def match(name1: str, name2: str) -> bool:
        try:
            return encode(kind, name1) == encode(kind, name2)
        except EncodingError as e:
            logger.warning("evaluation.encoding_failed", name1=name1, name2=name2, error=str(e))
            return False
    return match


def score_matcher(score_pair: Callable[[str, str], float], threshold: float) -> Matcher:
    return lambda name1, name2: score_pair(name1, name2) >= threshold


def table_matcher(table: SimilarNameTable) -> Matcher:
    def match(name1: str, name2: str) -> bool:
        if name1 == name2:
            return True
        return name2 in (table.get(name1) or ()) or name1 in (table.get(name2) or ())
    return match
