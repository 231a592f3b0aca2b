from __future__ import annotations

from pathlib import Path

import pytest

from gps_names.exceptions import ResourceError
from gps_names.phonemes import (
    EMPTY_ID,
    NUM_SYMBOLS,
    PHONEMES,
    G2pEnConverter,
    LexiconConverter,
    PhonemeTokenizer,
    arpabet_to_symbol,
    build_converter,
    phoneme_id,
    phoneme_symbol,
)


# ---------------------- Alphabet ----------------------

def test_alphabet_size() -> None:
    assert len(PHONEMES) == 55
    assert EMPTY_ID == 55
    assert NUM_SYMBOLS == 56


def test_phoneme_ids_round_trip() -> None:
    for symbol in PHONEMES:
        assert phoneme_symbol(phoneme_id(symbol)) == symbol
    assert phoneme_id("") == EMPTY_ID
    assert phoneme_symbol(EMPTY_ID) == ""


def test_unknown_symbol() -> None:
    with pytest.raises(ValueError):
        phoneme_id("qx")


@pytest.mark.parametrize(
    "arpabet,expected",
    [
        ("AH0", "ax"),
        ("AH1", "ah1"),
        ("AH2", "ah"),
        ("AE1", "ae1"),
        ("ER0", "er"),
        ("K", "k"),
        ("ZZ", None),
        ("", None),
    ],
)
def test_arpabet_mapping(arpabet, expected) -> None:
    assert arpabet_to_symbol(arpabet) == expected


def test_g2p_en_output_mapped() -> None:
    conv = G2pEnConverter()
    # stand in for the loaded model; g2p_en returns ARPAbet with spaces between words
    conv._g2p = lambda spelling: ["K", "W", "AA1", "S", " "]
    assert conv.convert("quass") == ["k", "w", "aa1", "s"]


# ---------------------- Lexicon ----------------------

class TestLexiconConverter:
    def test_lookup_and_fallback(self, converter):
        lexicon = LexiconConverter({"quass": ["k", "w", "aa1", "s"]}, fallback=converter)
        assert lexicon.convert("quass") == ["k", "w", "aa1", "s"]
        assert lexicon.convert("tom") == ["t", "ow", "m"]

    def test_unknown_without_fallback(self):
        assert LexiconConverter().convert("tom") == []

    def test_bad_symbol(self):
        with pytest.raises(ValueError):
            LexiconConverter({"tom": ["t", "oo", "m"]})

    def test_load(self, tmp_path: Path):
        path = tmp_path / "lexicon.txt"
        path.write_text("# comment\n\ntom t aa1 m\n", encoding="utf-8")
        lexicon = LexiconConverter.load(path)
        assert lexicon.convert("tom") == ["t", "aa1", "m"]

    def test_load_errors(self, tmp_path: Path):
        with pytest.raises(ResourceError):
            LexiconConverter.load(tmp_path / "missing.txt")
        path = tmp_path / "bad.txt"
        path.write_text("tom t oo m\n", encoding="utf-8")
        with pytest.raises(ResourceError):
            LexiconConverter.load(path)

    def test_build_converter(self, tmp_path: Path):
        with pytest.raises(ResourceError):
            build_converter("lexicon", None)
        path = tmp_path / "lexicon.txt"
        path.write_text("tom t aa1 m\n", encoding="utf-8")
        assert isinstance(build_converter("lexicon", path), LexiconConverter)
        layered = build_converter("g2p_en", path)
        assert isinstance(layered.fallback, G2pEnConverter)


# ---------------------- Tokenizer ----------------------

class TestPhonemeTokenizer:
    """Tests for the corrections applied around the converter."""

    def test_tokenize_ids(self, tokenizer):
        assert tokenizer.tokenize("tom") == (phoneme_id("t"), phoneme_id("ow"), phoneme_id("m"))

    def test_leading_y_before_consonant(self):
        lexicon = LexiconConverter({"ivan": ["ay1", "v", "ax", "n"], "yan": ["y", "aa1", "n"]})
        tokenizer = PhonemeTokenizer(lexicon)
        assert tokenizer.get_phonemes("yvan") == ["ay1", "v", "ax", "n"]
        # followed by a vowel the y stays
        assert tokenizer.get_phonemes("yan") == ["y", "aa1", "n"]

    def test_short_exceptions(self):
        tokenizer = PhonemeTokenizer(LexiconConverter())
        assert tokenizer.get_phonemes("e") == ["iy1"]
        assert tokenizer.get_phonemes("ae") == ["ey1"]
        assert tokenizer.get_phonemes("h") == ["hh"]

    def test_unknown_word_is_empty(self):
        tokenizer = PhonemeTokenizer(LexiconConverter())
        assert tokenizer.get_phonemes("zzz") == []
        assert tokenizer.tokenize("zzz") == ()

    def test_initial_vowel_restored_before_r(self):
        lexicon = LexiconConverter({
            "aragon": ["r", "aa1", "g", "ax", "n"],
            "oren": ["r", "eh1", "n"],
            "bragg": ["b", "r", "ae1", "g"],
            "rose": ["r", "ow1", "z"],
        })
        tokenizer = PhonemeTokenizer(lexicon)
        assert tokenizer.get_phonemes("aragon")[:2] == ["ax", "r"]
        assert tokenizer.get_phonemes("oren") == ["ax", "r", "eh1", "n"]
        assert tokenizer.get_phonemes("rose") == ["r", "ow1", "z"]
        assert tokenizer.get_phonemes("bragg")[0] == "b"
