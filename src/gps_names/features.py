"""Per-pair feature vectors combining independent similarity signals."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from functools import lru_cache

import structlog
from rapidfuzz.distance import Levenshtein

from .alignment import WeightedEditDistance
from .exceptions import EncodingError
from .phonemes import PhonemeSequence, PhonemeTokenizer
from .phonetic import CodeKind, code_kinds, encode
from .phonetic.dm_soundex import DEFAULT_MAX_CODE_LENGTH
from .types import NameType

logger = structlog.get_logger(__name__)

FEATURE_NAMES = (
    "edit_cost",
    "nysiis_match",
    "soundex_match",
    "refined_soundex_match",
    "dm_soundex_match",
    "levenshtein",
)

_MATCH_FEATURE = {
    CodeKind.NYSIIS: "nysiis_match",
    CodeKind.SOUNDEX: "soundex_match",
    CodeKind.REFINED_SOUNDEX: "refined_soundex_match",
    CodeKind.DM_SOUNDEX: "dm_soundex_match",
}


@dataclass(frozen=True)
class Codes:
    """Everything computed once per name: phonemes and phonetic codes.

    A code is None when its encoder does not apply to the name type or
    failed on this input.
    """

    phonemes: PhonemeSequence
    soundex: str | None = None
    refined_soundex: str | None = None
    dm_soundex: str | None = None
    nysiis: str | None = None

    def code(self, kind: CodeKind) -> str | None:
        return getattr(self, kind.value)


@dataclass
class FeatureVector:
    edit_cost: float = 0.0
    nysiis_match: float = 0.0
    soundex_match: float = 0.0
    refined_soundex_match: float = 0.0
    dm_soundex_match: float = 0.0
    levenshtein: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


class FeaturesGenerator:
    """Compute codes for names and feature vectors for name pairs."""

    def __init__(
        self,
        name_type: NameType,
        tokenizer: PhonemeTokenizer,
        distance: WeightedEditDistance,
        *,
        dm_max_length: int = DEFAULT_MAX_CODE_LENGTH,
        cache_size: int = 65536,
    ) -> None:
        self.name_type = name_type
        self.tokenizer = tokenizer
        self.distance = distance
        self.dm_max_length = dm_max_length
        self.kinds = code_kinds(name_type)
        self._cached_codes = lru_cache(maxsize=cache_size)(self._compute_codes)

    def _compute_codes(self, name: str) -> Codes:
        values: dict[str, str | None] = {}
        for kind in self.kinds:
            try:
                values[kind.value] = encode(kind, name, self.dm_max_length)
            except EncodingError as e:
                logger.warning("features.encoding_failed", name=name, kind=kind.value, error=str(e))
                values[kind.value] = None
        return Codes(phonemes=self.tokenizer.tokenize(name), **values)

    def get_codes(self, name: str) -> Codes:
        return self._cached_codes(name)

    def set_features(self, name1: str, codes1: Codes, name2: str, codes2: Codes) -> FeatureVector:
        features = FeatureVector()
        features.edit_cost = self.distance.min_score(codes1.phonemes, codes2.phonemes)
        for kind in self.kinds:
            code1, code2 = codes1.code(kind), codes2.code(kind)
            if code1 is None or code2 is None:
                continue
            setattr(features, _MATCH_FEATURE[kind], 1.0 if code1 == code2 else 0.0)
        features.levenshtein = float(Levenshtein.distance(name1, name2))
        return features

    def features(self, name1: str, name2: str) -> FeatureVector:
        """Convenience form that computes (or fetches) both names' codes."""
        return self.set_features(name1, self.get_codes(name1), name2, self.get_codes(name2))
