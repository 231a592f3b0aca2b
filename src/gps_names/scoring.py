"""Combine a feature vector into one similarity score.

The combination function is a separately trained, versioned artifact.
Anything with a ``score(FeatureVector) -> float`` method can be plugged in;
``LinearFeatureScorer`` reads the JSON model format below.
"""
from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ResourceError
from .features import FeaturesGenerator, FeatureVector
from .types import NameType


class FeatureScorer(Protocol):
    def score(self, features: FeatureVector) -> float:
        """Higher means more similar."""
        ...


class FeatureWeights(BaseModel):
    """Per-feature weights.

    Signs are constrained so the score responds to every feature in its
    intuitive direction: costs and distances lower it, code matches raise it.
    """

    edit_cost: float = Field(le=0.0)
    nysiis_match: float = Field(default=0.0, ge=0.0)
    soundex_match: float = Field(ge=0.0)
    refined_soundex_match: float = Field(ge=0.0)
    dm_soundex_match: float = Field(ge=0.0)
    levenshtein: float = Field(le=0.0)


class ScorerModel(BaseModel):
    name_type: NameType
    version: str = "1"
    intercept: float = 0.0
    weights: FeatureWeights

    @field_validator("version")
    @classmethod
    def _non_empty_version(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("version must not be empty")
        return v


def load_scorer_model(path: Path | str) -> ScorerModel:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ResourceError("scorer model", str(path), e.strerror or "unreadable") from e
    try:
        return ScorerModel.model_validate_json(text)
    except ValidationError as e:
        raise ResourceError("scorer model", str(path), f"invalid model: {e.error_count()} errors") from e


class LinearFeatureScorer:
    def __init__(self, model: ScorerModel) -> None:
        self.model = model
        self._weights = model.weights.model_dump()

    def score(self, features: FeatureVector) -> float:
        total = self.model.intercept
        for name, value in features.as_dict().items():
            total += self._weights[name] * value
        return total


class NameScorer:
    """Score two normalized name pieces."""

    def __init__(self, features: FeaturesGenerator, scorer: FeatureScorer) -> None:
        self.features = features
        self.scorer = scorer

    def score_pair(self, name1: str, name2: str) -> float:
        return self.scorer.score(self.features.features(name1, name2))
