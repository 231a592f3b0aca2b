"""Closed set of phonetic code kinds and their encoders."""
from __future__ import annotations

from enum import Enum
from typing import Callable

from gps_names.exceptions import EncodingError
from gps_names.types import NameType

from .dm_soundex import DEFAULT_MAX_CODE_LENGTH, dm_soundex
from .nysiis import nysiis
from .soundex import refined_soundex, soundex


class CodeKind(str, Enum):
    SOUNDEX = "soundex"
    REFINED_SOUNDEX = "refined_soundex"
    DM_SOUNDEX = "dm_soundex"
    NYSIIS = "nysiis"


_ENCODERS: dict[CodeKind, Callable[[str], str]] = {
    CodeKind.SOUNDEX: soundex,
    CodeKind.REFINED_SOUNDEX: refined_soundex,
    CodeKind.DM_SOUNDEX: dm_soundex,
    CodeKind.NYSIIS: nysiis,
}

_GIVEN_KINDS = (CodeKind.SOUNDEX, CodeKind.REFINED_SOUNDEX, CodeKind.DM_SOUNDEX)
_SURNAME_KINDS = (CodeKind.NYSIIS, CodeKind.SOUNDEX, CodeKind.REFINED_SOUNDEX, CodeKind.DM_SOUNDEX)


def code_kinds(name_type: NameType) -> tuple[CodeKind, ...]:
    """Code kinds that apply to a name type (NYSIIS is surname-only)."""
    return _SURNAME_KINDS if name_type is NameType.SURNAME else _GIVEN_KINDS


def encode(kind: CodeKind, name: str, dm_max_length: int = DEFAULT_MAX_CODE_LENGTH) -> str:
    """Encode a cleaned name piece with one encoder.

    Raises:
        EncodingError: if the encoder rejects its input
    """
    try:
        if kind is CodeKind.DM_SOUNDEX:
            return dm_soundex(name, dm_max_length)
        return _ENCODERS[kind](name)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise EncodingError(f"{kind.value} failed for {name!r}: {e}") from e
