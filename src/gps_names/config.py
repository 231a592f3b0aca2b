"""Engine configuration.

Settings are plain frozen dataclasses. Every field can be overridden from
the environment; ``Settings.from_env()`` reads the environment at call time
so callers (and tests) control when configuration is captured.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .types import NameType

GIVENNAME_DEFAULT_CLASSIFIER_THRESHOLD = 2.3
GIVENNAME_DEFAULT_CLUSTER_THRESHOLD = -0.75
SURNAME_DEFAULT_CLASSIFIER_THRESHOLD = 0.7
SURNAME_DEFAULT_CLUSTER_THRESHOLD = -2.0

DEFAULT_MAX_SIMILAR_NAMES = 50


def _f(env: Mapping[str, str], name: str, default: float) -> float:
    try:
        return float(env.get(name, default))
    except (TypeError, ValueError):
        return default


def _i(env: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(env.get(name, default))
    except (TypeError, ValueError):
        return default


def _p(env: Mapping[str, str], name: str, default: Path | None) -> Path | None:
    value = env.get(name)
    if value:
        return Path(value)
    return default


@dataclass(frozen=True)
class NameTypeSettings:
    """Artifacts and thresholds for one name type."""

    name_type: NameType
    cost_matrix_path: Path | None = None
    scorer_model_path: Path | None = None
    clusters_path: Path | None = None
    classifier_threshold: float = GIVENNAME_DEFAULT_CLASSIFIER_THRESHOLD
    cluster_threshold: float = GIVENNAME_DEFAULT_CLUSTER_THRESHOLD

    @classmethod
    def defaults(cls, name_type: NameType, model_dir: Path | None = None) -> "NameTypeSettings":
        prefix = name_type.resource_prefix
        if name_type is NameType.SURNAME:
            classifier, cluster = SURNAME_DEFAULT_CLASSIFIER_THRESHOLD, SURNAME_DEFAULT_CLUSTER_THRESHOLD
        else:
            classifier, cluster = GIVENNAME_DEFAULT_CLASSIFIER_THRESHOLD, GIVENNAME_DEFAULT_CLUSTER_THRESHOLD
        return cls(
            name_type=name_type,
            cost_matrix_path=model_dir / f"{prefix}_cost_matrix.txt" if model_dir else None,
            scorer_model_path=model_dir / f"{prefix}_scorer.json" if model_dir else None,
            clusters_path=model_dir / f"{prefix}_clusters.txt" if model_dir else None,
            classifier_threshold=classifier,
            cluster_threshold=cluster,
        )

    @classmethod
    def from_env(cls, name_type: NameType, env: Mapping[str, str], model_dir: Path | None) -> "NameTypeSettings":
        base = cls.defaults(name_type, model_dir)
        key = "SURNAME" if name_type is NameType.SURNAME else "GIVEN"
        return cls(
            name_type=name_type,
            cost_matrix_path=_p(env, f"NAMES_{key}_COST_MATRIX", base.cost_matrix_path),
            scorer_model_path=_p(env, f"NAMES_{key}_SCORER_MODEL", base.scorer_model_path),
            clusters_path=_p(env, f"NAMES_{key}_CLUSTERS", base.clusters_path),
            classifier_threshold=_f(env, f"NAMES_{key}_CLASSIFIER_THRESHOLD", base.classifier_threshold),
            cluster_threshold=_f(env, f"NAMES_{key}_CLUSTER_THRESHOLD", base.cluster_threshold),
        )


@dataclass(frozen=True)
class Settings:
    given: NameTypeSettings = field(default_factory=lambda: NameTypeSettings.defaults(NameType.GIVEN))
    surname: NameTypeSettings = field(default_factory=lambda: NameTypeSettings.defaults(NameType.SURNAME))

    # Position-weighting smoothing for alignment scores; must be > 0
    alignment_smooth: float = 1.0
    dm_max_length: int = 6
    code_cache_size: int = 65536
    max_similar_names: int = DEFAULT_MAX_SIMILAR_NAMES

    # "g2p_en" or "lexicon"
    converter: str = "g2p_en"
    lexicon_path: Path | None = None

    def __post_init__(self) -> None:
        if self.alignment_smooth <= 0:
            raise ValueError("alignment_smooth must be > 0")
        if self.converter not in ("g2p_en", "lexicon"):
            raise ValueError(f"unknown converter: {self.converter}")

    def for_type(self, name_type: NameType) -> NameTypeSettings:
        return self.surname if name_type is NameType.SURNAME else self.given

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        model_dir = _p(env, "NAMES_MODEL_DIR", None)
        return cls(
            given=NameTypeSettings.from_env(NameType.GIVEN, env, model_dir),
            surname=NameTypeSettings.from_env(NameType.SURNAME, env, model_dir),
            alignment_smooth=_f(env, "NAMES_ALIGNMENT_SMOOTH", 1.0),
            dm_max_length=_i(env, "NAMES_DM_MAX_LENGTH", 6),
            code_cache_size=_i(env, "NAMES_CODE_CACHE_SIZE", 65536),
            max_similar_names=_i(env, "NAMES_MAX_SIMILAR_NAMES", DEFAULT_MAX_SIMILAR_NAMES),
            converter=env.get("NAMES_CONVERTER", "g2p_en"),
            lexicon_path=_p(env, "NAMES_LEXICON", None),
        )
