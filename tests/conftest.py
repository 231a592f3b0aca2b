"""Shared fixtures: a deterministic letter-to-phoneme converter and a small engine."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from gps_names.alignment import CostMatrix
from gps_names.config import Settings
from gps_names.engine import NameEngine, assemble_engine
from gps_names.phonemes import PhonemeTokenizer
from gps_names.scoring import FeatureWeights, LinearFeatureScorer, ScorerModel
from gps_names.types import NameType

LETTER_PHONEMES = {
    "a": "aa", "b": "b", "c": "k", "d": "d", "e": "eh", "f": "f", "g": "g",
    "h": "hh", "i": "ih", "j": "jh", "k": "k", "l": "l", "m": "m", "n": "n",
    "o": "ow", "p": "p", "q": "k", "r": "r", "s": "s", "t": "t", "u": "uw",
    "v": "v", "w": "w", "x": "k", "y": "y", "z": "z",
}


class LetterConverter:
    """One phoneme per letter, repeated phonemes collapsed."""

    def convert(self, spelling: str) -> list[str]:
        symbols: list[str] = []
        for ch in spelling:
            symbol = LETTER_PHONEMES.get(ch)
            if symbol and (not symbols or symbols[-1] != symbol):
                symbols.append(symbol)
        return symbols


def make_cost_matrix() -> CostMatrix:
    # non-zero match cost so self-costs (the normaliser) are never zero
    return CostMatrix.seeded(match_cost=1, edit_cost=10)


def make_scorer_model(name_type: NameType = NameType.GIVEN) -> ScorerModel:
    return ScorerModel(
        name_type=name_type,
        version="test-1",
        intercept=2.0,
        weights=FeatureWeights(
            edit_cost=-1.0,
            nysiis_match=0.5 if name_type is NameType.SURNAME else 0.0,
            soundex_match=0.5,
            refined_soundex_match=0.5,
            dm_soundex_match=0.5,
            levenshtein=-0.25,
        ),
    )


@pytest.fixture()
def converter() -> LetterConverter:
    return LetterConverter()


@pytest.fixture()
def tokenizer(converter) -> PhonemeTokenizer:
    return PhonemeTokenizer(converter)


@pytest.fixture()
def engine(converter) -> NameEngine:
    return assemble_engine(
        NameType.GIVEN,
        Settings(),
        make_cost_matrix(),
        LinearFeatureScorer(make_scorer_model()),
        converter,
    )


@pytest.fixture()
def surname_engine(converter) -> NameEngine:
    return assemble_engine(
        NameType.SURNAME,
        Settings(),
        make_cost_matrix(),
        LinearFeatureScorer(make_scorer_model(NameType.SURNAME)),
        converter,
    )


@pytest.fixture()
def artifacts(tmp_path: Path) -> dict[str, Path]:
    """Cost matrix, scorer model and lexicon files for the given-name engine."""
    matrix_path = tmp_path / "givenname_cost_matrix.txt"
    make_cost_matrix().save(matrix_path)

    scorer_path = tmp_path / "givenname_scorer.json"
    scorer_path.write_text(make_scorer_model().model_dump_json(), encoding="utf-8")

    lexicon_path = tmp_path / "lexicon.txt"
    lines = ["# spelling phonemes"]
    for name in ("ann", "anne", "anna", "jon", "john", "dan", "tan", "ben", "ban", "tom"):
        lines.append(" ".join([name, *LetterConverter().convert(name)]))
    lexicon_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    clusters_path = tmp_path / "givenname_clusters.txt"
    clusters_path.write_text("ann: anne, anna\njohn: jon\n", encoding="utf-8")

    return {
        "cost_matrix": matrix_path,
        "scorer": scorer_path,
        "lexicon": lexicon_path,
        "clusters": clusters_path,
        "dir": tmp_path,
    }


@pytest.fixture()
def artifacts_env(artifacts) -> dict[str, str]:
    return {
        "NAMES_MODEL_DIR": "",
        "NAMES_GIVEN_COST_MATRIX": str(artifacts["cost_matrix"]),
        "NAMES_GIVEN_SCORER_MODEL": str(artifacts["scorer"]),
        "NAMES_GIVEN_CLUSTERS": str(artifacts["clusters"]),
        "NAMES_CONVERTER": "lexicon",
        "NAMES_LEXICON": str(artifacts["lexicon"]),
    }
