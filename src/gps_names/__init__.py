"""Name similarity engine for genealogical search.

Phonetic codes, phoneme alignment, feature scoring, and the batch tools that
build and maintain similar-name tables.
"""
from __future__ import annotations

from .clusters import Cluster, read_clusters
from .config import NameTypeSettings, Settings
from .engine import NameEngine, build_engine
from .features import Codes, FeaturesGenerator, FeatureVector
from .generator import NameScore, SimilarNameGenerator
from .scoring import LinearFeatureScorer, NameScorer, ScorerModel
from .table import SimilarNameTable, read_table, write_table
from .types import NameType

__version__ = "0.1.0"

__all__ = [
    "Cluster",
    "Codes",
    "FeatureVector",
    "FeaturesGenerator",
    "LinearFeatureScorer",
    "NameEngine",
    "NameScore",
    "NameScorer",
    "NameType",
    "NameTypeSettings",
    "ScorerModel",
    "Settings",
    "SimilarNameGenerator",
    "SimilarNameTable",
    "build_engine",
    "read_clusters",
    "read_table",
    "write_table",
]
