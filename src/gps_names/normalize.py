"""Name normalization in front of the engine.

The engine only ever sees cleaned single-piece strings. ``NameNormalizer``
is the contract; ``SimpleNameNormalizer`` is a small default that strips
diacritics, titles and generational suffixes and splits what is left into
lower-case pieces.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Protocol

# Common name prefixes to strip
NAME_PREFIXES = frozenset({
    "mr", "mrs", "ms", "miss", "dr", "prof", "rev", "hon",
    "sir", "lord", "lady", "capt", "captain", "col", "colonel",
    "gen", "general", "maj", "major", "lt", "lieutenant",
    "sgt", "sergeant", "pvt", "private", "cpl", "corporal",
})

# Common name suffixes to strip
NAME_SUFFIXES = frozenset({
    "jr", "sr", "i", "ii", "iii", "iv", "v",
    "esq", "phd", "md", "dds", "jd",
})

# Dropped from surnames only ("van der berg" -> "berg")
SURNAME_PARTICLES = frozenset({
    "van", "von", "der", "den", "de", "la", "le", "du", "da", "di", "del", "della",
})

_SEPARATOR_RE = re.compile(r"[\s\-/&,.]+")
_NON_LETTER_RE = re.compile(r"[^a-z]")


class NameNormalizer(Protocol):
    def normalize(self, raw_name: str, is_surname: bool) -> list[str]:
        """Cleaned name pieces, in original token order."""
        ...


def strip_diacritics(s: str) -> str:
    return unicodedata.normalize("NFKD", s).encode("ascii", "ignore").decode("ascii")


class SimpleNameNormalizer:
    def normalize(self, raw_name: str, is_surname: bool) -> list[str]:
        if not raw_name:
            return []

        tokens = [t for t in _SEPARATOR_RE.split(strip_diacritics(raw_name).casefold()) if t]

        while tokens and tokens[0] in NAME_PREFIXES:
            tokens.pop(0)
        while tokens and tokens[-1] in NAME_SUFFIXES:
            tokens.pop()

        pieces = []
        for token in tokens:
            # o'brien -> obrien
            piece = _NON_LETTER_RE.sub("", token)
            if not piece:
                continue
            if is_surname and piece in SURNAME_PARTICLES:
                continue
            pieces.append(piece)
        return pieces
