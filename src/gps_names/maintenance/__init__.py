"""Batch maintenance of similar-name tables."""
from __future__ import annotations

from .adder import add_similar_names
from .augmenter import SimilarNameAugmenter
from .builder import build_similar_names
from .remover import least_similar_names, prune_similar_names, symmetrize

__all__ = [
    "SimilarNameAugmenter",
    "add_similar_names",
    "build_similar_names",
    "least_similar_names",
    "prune_similar_names",
    "symmetrize",
]
