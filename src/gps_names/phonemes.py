"""Phoneme alphabet and name tokenizer.

Names are turned into sequences of small-integer phoneme ids. The
grapheme-to-phoneme step itself is delegated to a pluggable converter;
this module only owns the alphabet and the correction rules around it.
"""
from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Protocol, Sequence

import structlog

from .exceptions import MalformedRecordError, ResourceError

logger = structlog.get_logger(__name__)


class Phoneme(str, Enum):
    """Closed phoneme alphabet; ``1`` marks a stressed vowel."""

    B = "b"
    V = "v"
    P = "p"
    F = "f"
    HH = "hh"
    JH = "jh"
    K = "k"
    CH = "ch"
    G = "g"
    L = "l"
    M = "m"
    N = "n"
    NG = "ng"
    R = "r"
    ER = "er"
    ER1 = "er1"
    S = "s"
    SH = "sh"
    Z = "z"
    ZH = "zh"
    T = "t"
    TH = "th"
    D = "d"
    DH = "dh"
    W = "w"
    Y = "y"
    AE = "ae"
    AE1 = "ae1"
    EY = "ey"
    EY1 = "ey1"
    EH = "eh"
    EH1 = "eh1"
    IY = "iy"
    IY1 = "iy1"
    IH = "ih"
    IH1 = "ih1"
    AY = "ay"
    AY1 = "ay1"
    AA = "aa"
    AA1 = "aa1"
    OW = "ow"
    OW1 = "ow1"
    AO = "ao"
    AO1 = "ao1"
    AX = "ax"
    OY = "oy"
    OY1 = "oy1"
    AW = "aw"
    AW1 = "aw1"
    AH = "ah"
    AH1 = "ah1"
    UW = "uw"
    UW1 = "uw1"
    UH = "uh"
    UH1 = "uh1"


PHONEMES: tuple[str, ...] = tuple(p.value for p in Phoneme)
PHONEME_IDS: dict[str, int] = {symbol: i for i, symbol in enumerate(PHONEMES)}

# Reserved id for insertions and deletions
EMPTY_ID = len(PHONEMES)
NUM_SYMBOLS = EMPTY_ID + 1

PhonemeSequence = tuple[int, ...]

# Short strings the converter returns nothing for
SHORT_EXCEPTIONS: dict[str, tuple[str, ...]] = {
    "e": ("iy1",),
    "ae": ("ey1",),
    "h": ("hh",),
    "hh": ("hh",),
}

_VOWEL_LETTERS = frozenset("aeiou")
_ARPABET_RE = re.compile(r"^([A-Za-z]+)([012]?)$")


def phoneme_id(symbol: str) -> int:
    """Id for a phoneme symbol; the empty string is the EMPTY id."""
    if not symbol:
        return EMPTY_ID
    try:
        return PHONEME_IDS[symbol]
    except KeyError:
        raise ValueError(f"unknown phoneme symbol: {symbol!r}") from None


def phoneme_symbol(symbol_id: int) -> str:
    if symbol_id == EMPTY_ID:
        return ""
    return PHONEMES[symbol_id]


def arpabet_to_symbol(arpabet: str) -> str | None:
    """Map one ARPAbet phone (with optional stress digit) onto the alphabet.

    Primary stress keeps a ``1`` suffix where the alphabet has a stressed
    form; unstressed AH is the schwa ``ax``; everything else drops stress.
    Returns None for anything outside the alphabet.
    """
    m = _ARPABET_RE.match(arpabet.strip())
    if not m:
        return None
    base, stress = m.group(1).lower(), m.group(2)
    if base == "ah" and stress == "0":
        return "ax"
    if stress == "1" and base + "1" in PHONEME_IDS:
        return base + "1"
    if base in PHONEME_IDS:
        return base
    return None


class GraphemeToPhoneme(Protocol):
    """External grapheme-to-phoneme model."""

    def convert(self, spelling: str) -> list[str]:
        """Return alphabet symbols for a spelling, or an empty list."""
        ...


class G2pEnConverter:
    """Grapheme-to-phoneme conversion backed by ``g2p_en``.

    The model (CMUdict lookup with a neural fallback) is loaded on first use.
    """

    def __init__(self) -> None:
        self._g2p = None

    def _model(self):
        if self._g2p is None:
            try:
                from g2p_en import G2p
                self._g2p = G2p()
            except (ImportError, LookupError, OSError) as e:
                raise ResourceError("g2p_en model", reason=str(e)) from e
        return self._g2p

    def convert(self, spelling: str) -> list[str]:
        symbols = []
        for phone in self._model()(spelling):
            if not phone.strip():
                continue
            symbol = arpabet_to_symbol(phone)
            if symbol is None:
                logger.debug("phonemes.unmapped", spelling=spelling, phone=phone)
                continue
            symbols.append(symbol)
        return symbols


class LexiconConverter:
    """Pronunciations from a lexicon, with an optional fallback converter.

    Lexicon lines are ``spelling symbol symbol ...`` using alphabet symbols;
    blank lines and ``#`` comments are ignored.
    """

    def __init__(self, entries: dict[str, Sequence[str]] | None = None,
                 fallback: GraphemeToPhoneme | None = None) -> None:
        self.entries: dict[str, tuple[str, ...]] = {}
        self.fallback = fallback
        for spelling, symbols in (entries or {}).items():
            self.add(spelling, symbols)

    def add(self, spelling: str, symbols: Sequence[str]) -> None:
        for symbol in symbols:
            if symbol not in PHONEME_IDS:
                raise ValueError(f"unknown phoneme symbol {symbol!r} for {spelling!r}")
        self.entries[spelling] = tuple(symbols)

    @classmethod
    def load(cls, path: Path | str, fallback: GraphemeToPhoneme | None = None) -> "LexiconConverter":
        path = Path(path)
        if not path.is_file():
            raise ResourceError("lexicon", str(path))
        lexicon = cls(fallback=fallback)
        with path.open(encoding="utf-8") as f:
            for line_number, line in enumerate(f, 1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                fields = line.split()
                try:
                    lexicon.add(fields[0], fields[1:])
                except ValueError as e:
                    raise ResourceError("lexicon", str(path),
                                        str(MalformedRecordError(str(e), line, line_number))) from e
        return lexicon

    def convert(self, spelling: str) -> list[str]:
        symbols = self.entries.get(spelling)
        if symbols is not None:
            return list(symbols)
        if self.fallback is not None:
            return self.fallback.convert(spelling)
        return []


class PhonemeTokenizer:
    """Turn a cleaned name piece into a phoneme id sequence."""

    def __init__(self, converter: GraphemeToPhoneme) -> None:
        self.converter = converter

    def get_phonemes(self, word: str) -> list[str]:
        spelling = word
        # Spanish-style leading y before a consonant reads as i
        if len(spelling) > 2 and spelling[0] == "y" and spelling[1] not in _VOWEL_LETTERS:
            spelling = "i" + spelling[1:]

        phonemes = self.converter.convert(spelling)
        if not phonemes:
            phonemes = list(SHORT_EXCEPTIONS.get(spelling, ()))
            if not phonemes:
                logger.warning("phonemes.empty", word=word)

        # Vowel onset the converter drops, as in "aragon"
        if spelling and spelling[0] in ("a", "o") and phonemes and phonemes[0] == "r":
            phonemes = ["ax", *phonemes]

        return phonemes

    def tokenize(self, word: str) -> PhonemeSequence:
        return tuple(PHONEME_IDS[p] for p in self.get_phonemes(word))


def build_converter(kind: str, lexicon_path: Path | None = None) -> GraphemeToPhoneme:
    """Converter for a configured kind, layering a lexicon when one is given."""
    if kind == "lexicon":
        if lexicon_path is None:
            raise ResourceError("lexicon", reason="NAMES_LEXICON is not set")
        return LexiconConverter.load(lexicon_path)
    g2p = G2pEnConverter()
    if lexicon_path is not None:
        return LexiconConverter.load(lexicon_path, fallback=g2p)
    return g2p
