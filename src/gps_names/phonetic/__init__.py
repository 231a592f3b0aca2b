"""Deterministic phonetic encoders."""
from __future__ import annotations

from .codes import CodeKind, code_kinds, encode
from .dm_soundex import dm_soundex
from .nysiis import nysiis
from .soundex import refined_soundex, soundex

__all__ = [
    "CodeKind",
    "code_kinds",
    "dm_soundex",
    "encode",
    "nysiis",
    "refined_soundex",
    "soundex",
]
