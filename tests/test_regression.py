"""Pinned outputs of the trained production artifacts.

These need the real cost matrices, scorer models and cluster files, so they
only run when NAMES_MODEL_DIR points at a directory holding them.
"""
from __future__ import annotations

import math
import os
from pathlib import Path

import pytest

from gps_names.clusters import read_clusters
from gps_names.config import Settings
from gps_names.engine import build_engine
from gps_names.generator import SimilarNameGenerator
from gps_names.types import NameType

MODEL_DIR = os.environ.get("NAMES_MODEL_DIR", "")

REQUIRED = [
    "givenname_cost_matrix.txt",
    "givenname_scorer.json",
    "surname_cost_matrix.txt",
    "surname_scorer.json",
    "surname_clusters.txt",
]

pytestmark = pytest.mark.skipif(
    not MODEL_DIR or not all((Path(MODEL_DIR) / f).is_file() for f in REQUIRED),
    reason="trained artifacts not available (set NAMES_MODEL_DIR)",
)


@pytest.fixture(scope="module")
def settings() -> Settings:
    return Settings.from_env()


@pytest.fixture(scope="module")
def given_engine(settings):
    return build_engine(settings, NameType.GIVEN)


@pytest.fixture(scope="module")
def surname_engine(settings):
    return build_engine(settings, NameType.SURNAME)


@pytest.mark.parametrize(
    "name1,name2,expected",
    [
        ("dallan", "allan", 1527),
        ("ann", "roseanne", -1010),
    ],
)
def test_given_name_scores(given_engine, name1, name2, expected) -> None:
    assert math.floor(given_engine.score_pair(name1, name2) * 1000) == expected


def test_surname_score(surname_engine) -> None:
    assert math.floor(surname_engine.score_pair("quass", "quast") * 1000) == 937


def test_quass_similar_surnames(settings, surname_engine) -> None:
    clusters = read_clusters(settings.surname.clusters_path)
    generator = SimilarNameGenerator.from_engine(surname_engine, clusters)
    expected = (
        "quaas quash quasie quessy quatsy cass kass quatsie quijas casse kasse quish quack catts quates"
    ).split()
    assert generator.generate("quass") == expected
