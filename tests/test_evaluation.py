"""Tests for name normalization and labeled-pair evaluation."""
from __future__ import annotations

from pathlib import Path

import pytest

from gps_names.evaluation import (
    EvaluationResult,
    code_matcher,
    evaluate,
    iter_labeled_pairs,
    score_matcher,
    table_matcher,
)
from gps_names.exceptions import ResourceError
from gps_names.normalize import SimpleNameNormalizer, strip_diacritics
from gps_names.phonetic import CodeKind
from gps_names.table import SimilarNameTable

LABELED = """Label,"Name1","Name2"
,"ann","anne"
1,"ann","bob"
,"jon","john"
?,"x","y"
1,"Mary Smith","ann"
"""


@pytest.fixture()
def labeled_file(tmp_path: Path) -> Path:
    path = tmp_path / "labeled.csv"
    path.write_text(LABELED, encoding="utf-8")
    return path


class TestSimpleNameNormalizer:
    """Tests for SimpleNameNormalizer."""

    def test_titles_suffixes_and_particles(self):
        normalizer = SimpleNameNormalizer()
        assert normalizer.normalize("Dr. José Van der Berg Jr.", True) == ["jose", "berg"]
        assert normalizer.normalize("Dr. José Van der Berg Jr.", False) == ["jose", "van", "der", "berg"]

    def test_punctuation_removed(self):
        assert SimpleNameNormalizer().normalize("O'Brien", True) == ["obrien"]

    def test_empty(self):
        assert SimpleNameNormalizer().normalize("", False) == []
        assert SimpleNameNormalizer().normalize("  ", False) == []

    def test_strip_diacritics(self):
        assert strip_diacritics("Müller") == "Muller"


class TestEvaluate:
    """Tests for precision/recall evaluation."""

    def test_labeled_pairs(self, labeled_file):
        assert list(iter_labeled_pairs(labeled_file)) == [
            (True, "ann", "anne"),
            (False, "ann", "bob"),
            (True, "jon", "john"),
            (False, "Mary Smith", "ann"),
        ]

    def test_nickname_layout(self, tmp_path: Path):
        path = tmp_path / "nicknames.csv"
        path.write_text('Label,"Nickname","Name1","Name2"\n,"y","bill","william"\n', encoding="utf-8")
        assert list(iter_labeled_pairs(path)) == [(True, "bill", "william")]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ResourceError):
            list(iter_labeled_pairs(tmp_path / "missing.csv"))

    def test_code_matcher(self, labeled_file):
        result = evaluate(labeled_file, code_matcher(CodeKind.SOUNDEX), SimpleNameNormalizer())
        assert (result.true_pos, result.false_neg, result.false_pos, result.true_neg) == (2, 0, 0, 1)
        assert result.skipped == 1
        assert result.precision == 1.0
        assert result.recall == 1.0
        assert result.f1 == 1.0

    def test_table_matcher(self, labeled_file):
        table = SimilarNameTable({"ann": {"anne"}})
        result = evaluate(labeled_file, table_matcher(table), SimpleNameNormalizer())
        assert (result.true_pos, result.false_neg) == (1, 1)
        assert result.recall == 0.5

    def test_score_matcher(self, labeled_file, engine):
        result = evaluate(labeled_file, score_matcher(engine.score_pair, 100.0), SimpleNameNormalizer())
        assert result.true_pos == 0
        assert result.precision == 0.0
        assert result.f1 == 0.0

    def test_record(self):
        result = EvaluationResult()
        result.record(True, True)
        result.record(True, False)
        result.record(False, True)
        result.record(False, False)
        assert (result.true_pos, result.false_neg, result.false_pos, result.true_neg) == (1, 1, 1, 1)
        assert result.precision == 0.5
        assert result.recall == 0.5
        assert result.f1 == pytest.approx(0.5)
