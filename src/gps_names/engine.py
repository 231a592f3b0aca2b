"""Assemble a scoring engine for one name type from explicit settings."""
from __future__ import annotations

from dataclasses import dataclass

import structlog

from .alignment import CostMatrix, WeightedEditDistance
from .config import Settings
from .exceptions import ResourceError
from .features import FeaturesGenerator
from .phonemes import GraphemeToPhoneme, PhonemeTokenizer, build_converter
from .scoring import FeatureScorer, LinearFeatureScorer, NameScorer, load_scorer_model
from .types import NameType

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NameEngine:
    """Everything needed to compare names of one type.

    Built once at startup and shared; nothing in it mutates during scoring.
    """

    name_type: NameType
    settings: Settings
    tokenizer: PhonemeTokenizer
    distance: WeightedEditDistance
    features: FeaturesGenerator
    scorer: FeatureScorer
    name_scorer: NameScorer

    def score_pair(self, name1: str, name2: str) -> float:
        return self.name_scorer.score_pair(name1, name2)


def assemble_engine(
    name_type: NameType,
    settings: Settings,
    cost_matrix: CostMatrix,
    scorer: FeatureScorer,
    converter: GraphemeToPhoneme,
) -> NameEngine:
    tokenizer = PhonemeTokenizer(converter)
    distance = WeightedEditDistance(cost_matrix, settings.alignment_smooth)
    features = FeaturesGenerator(
        name_type,
        tokenizer,
        distance,
        dm_max_length=settings.dm_max_length,
        cache_size=settings.code_cache_size,
    )
    return NameEngine(
        name_type=name_type,
        settings=settings,
        tokenizer=tokenizer,
        distance=distance,
        features=features,
        scorer=scorer,
        name_scorer=NameScorer(features, scorer),
    )


def build_engine(settings: Settings, name_type: NameType, converter: GraphemeToPhoneme | None = None) -> NameEngine:
    """Load the configured artifacts for ``name_type``.

    Raises:
        ResourceError: if the cost matrix or scorer model is missing or invalid
    """
    type_settings = settings.for_type(name_type)
    if type_settings.cost_matrix_path is None:
        raise ResourceError("cost matrix", reason=f"no path configured for {name_type.value} names")
    if type_settings.scorer_model_path is None:
        raise ResourceError("scorer model", reason=f"no path configured for {name_type.value} names")

    cost_matrix = CostMatrix.load(type_settings.cost_matrix_path)
    model = load_scorer_model(type_settings.scorer_model_path)
    if model.name_type is not name_type:
        raise ResourceError(
            "scorer model",
            str(type_settings.scorer_model_path),
            f"model is for {model.name_type.value} names, not {name_type.value}",
        )
    if converter is None:
        converter = build_converter(settings.converter, settings.lexicon_path)

    logger.info(
        "engine.loaded",
        name_type=name_type.value,
        cost_matrix=str(type_settings.cost_matrix_path),
        scorer_version=model.version,
    )
    return assemble_engine(name_type, settings, cost_matrix, LinearFeatureScorer(model), converter)
