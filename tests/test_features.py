"""Tests for per-pair feature vectors."""
from __future__ import annotations

import pytest

from gps_names.features import FEATURE_NAMES, Codes, FeatureVector
from gps_names.phonetic import CodeKind
from gps_names.phonetic import codes as codes_module


class TestCodes:
    def test_code_lookup(self):
        codes = Codes(phonemes=(1, 2), soundex="A500", dm_soundex="06")
        assert codes.code(CodeKind.SOUNDEX) == "A500"
        assert codes.code(CodeKind.DM_SOUNDEX) == "06"
        assert codes.code(CodeKind.NYSIIS) is None


class TestFeaturesGenerator:
    """Tests for FeaturesGenerator."""

    def test_feature_names_match_vector(self):
        assert tuple(FeatureVector().as_dict()) == FEATURE_NAMES

    def test_codes_cached(self, engine):
        assert engine.features.get_codes("ann") is engine.features.get_codes("ann")

    def test_given_name_codes(self, engine):
        codes = engine.features.get_codes("ann")
        assert codes.soundex == "A500"
        assert codes.nysiis is None
        assert codes.phonemes == engine.tokenizer.tokenize("ann")

    def test_surname_codes_include_nysiis(self, surname_engine):
        assert surname_engine.features.get_codes("knight").nysiis == "NNAGT"

    def test_identical_names(self, engine):
        features = engine.features.features("ann", "ann")
        assert features.edit_cost == pytest.approx(1.0)
        assert features.soundex_match == 1.0
        assert features.refined_soundex_match == 1.0
        assert features.dm_soundex_match == 1.0
        assert features.levenshtein == 0.0
        # NYSIIS does not apply to given names
        assert features.nysiis_match == 0.0

    def test_similar_names(self, engine):
        features = engine.features.features("john", "jon")
        assert features.soundex_match == 1.0
        assert features.levenshtein == 1.0
        assert features.edit_cost > 1.0

    def test_dissimilar_names(self, engine):
        features = engine.features.features("ann", "bob")
        assert features.soundex_match == 0.0
        assert features.levenshtein == 3.0

    def test_edit_cost_symmetric(self, engine):
        forward = engine.features.features("dallan", "allan")
        reverse = engine.features.features("allan", "dallan")
        assert forward.edit_cost == pytest.approx(reverse.edit_cost)

    def test_surname_nysiis_match(self, surname_engine):
        features = surname_engine.features.features("kass", "cass")
        assert features.nysiis_match == 1.0
        assert features.soundex_match == 0.0

    def test_encoder_failure_leaves_feature_zero(self, engine, monkeypatch):
        def failing(name):
            raise ValueError(name)

        monkeypatch.setitem(codes_module._ENCODERS, CodeKind.SOUNDEX, failing)
        assert engine.features.get_codes("ann").soundex is None
        features = engine.features.features("ann", "ann")
        assert features.soundex_match == 0.0
        assert features.refined_soundex_match == 1.0
        assert features.dm_soundex_match == 1.0
        assert features.edit_cost == pytest.approx(1.0)
        assert features.levenshtein == 0.0
