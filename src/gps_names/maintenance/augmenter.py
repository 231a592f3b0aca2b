"""Expand existing rows of a similar-name table with explicit name pairs.

A source is only attached to a target that is already in the table (a
"common" name), and only when the source is itself common or its Soundex
code differs from the target's; a same-code uncommon name would already be
found by the phonetic filter at search time.
"""
from __future__ import annotations

import re
from typing import Iterable

import structlog

from gps_names.exceptions import EncodingError
from gps_names.normalize import NameNormalizer
from gps_names.phonetic import CodeKind, encode
from gps_names.table import SimilarNameTable

logger = structlog.get_logger(__name__)

_FIELD_SPLIT_RE = re.compile(r"[:, ]+")


class SimilarNameAugmenter:
    def __init__(
        self,
        common_names: Iterable[str],
        normalizer: NameNormalizer,
        *,
        is_surname: bool,
        code_kind: CodeKind = CodeKind.SOUNDEX,
    ) -> None:
        self.common_names = frozenset(common_names)
        self.normalizer = normalizer
        self.is_surname = is_surname
        self.code_kind = code_kind
        self.additions: dict[str, set[str]] = {}
        self.uncommon_targets = 0
        self.invalid_lines = 0

    def add(self, target: str, source: str) -> bool:
        """Record ``source`` as similar to ``target`` if the filters allow it.

        Returns False when either name does not normalize to exactly one piece.
        """
        targets = self.normalizer.normalize(target, self.is_surname)
        sources = self.normalizer.normalize(source, self.is_surname)
        if len(targets) != 1 or len(sources) != 1:
            return False
        target, source = targets[0], sources[0]
        if source == target:
            return True

        try:
            source_code = encode(self.code_kind, source)
            target_code = encode(self.code_kind, target)
        except EncodingError as e:
            logger.warning("augmenter.encoding_failed", target=target, source=source, error=str(e))
            return False

        if target in self.common_names:
            if source in self.common_names or source_code != target_code:
                self.additions.setdefault(target, set()).add(source)
        elif source_code != target_code:
            self.uncommon_targets += 1
            logger.info("augmenter.uncommon_target", target=target, source=source)
        return True

    def add_line(self, line: str, *, pairwise: bool = False, all_combos: bool = False) -> bool:
        """Handle one ``target[:, ]source...`` line."""
        fields = [f for f in _FIELD_SPLIT_RE.split(line.strip()) if f]
        ok = True
        for i in range(1, len(fields)):
            ok = self.add(fields[0], fields[i]) and ok
            if pairwise or all_combos:
                ok = self.add(fields[i], fields[0]) and ok
                if all_combos:
                    for j in range(1, len(fields)):
                        if i != j:
                            ok = self.add(fields[i], fields[j]) and ok
        if not ok:
            self.invalid_lines += 1
            logger.warning("augmenter.invalid_line", line=line.rstrip())
        return ok

    def add_lines(self, lines: Iterable[str], *, pairwise: bool = False, all_combos: bool = False) -> None:
        for line in lines:
            if line.strip():
                self.add_line(line, pairwise=pairwise, all_combos=all_combos)
        logger.info("augmenter.collected", targets=len(self.additions), uncommon_targets=self.uncommon_targets)

    def apply(self, table: SimilarNameTable) -> int:
        """Merge the collected additions into existing rows; returns edges added."""
        added = 0
        for target, sources in self.additions.items():
            existing = table.get(target)
            if existing is None:
                continue
            before = len(existing)
            existing.update(sources)
            added += len(existing) - before
        logger.info("augmenter.applied", edges_added=added)
        return added
