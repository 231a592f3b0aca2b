"""Soundex family encoders.

American Soundex comes from jellyfish; Refined Soundex is the Apache
commons-codec variant, which keeps vowels as a 0 class and has no length
limit.
"""
from __future__ import annotations

import re

import jellyfish

_NON_ALPHA_RE = re.compile(r"[^A-Za-z]")

REFINED_SOUNDEX_MAP = {
    "A": "0", "E": "0", "H": "0", "I": "0", "O": "0", "U": "0", "W": "0", "Y": "0",
    "B": "1", "P": "1",
    "F": "2", "V": "2",
    "C": "3", "K": "3", "S": "3",
    "G": "4", "J": "4",
    "Q": "5", "X": "5", "Z": "5",
    "D": "6", "T": "6",
    "L": "7",
    "M": "8", "N": "8",
    "R": "9",
}


def _letters(name: str) -> str:
    return _NON_ALPHA_RE.sub("", name).upper()


def soundex(name: str) -> str:
    """Generate the American Soundex code for a name.

    Examples:
        soundex("Robert") -> "R163"
        soundex("Rupert") -> "R163"
        soundex("Quass") -> "Q200"

    Returns:
        4-character code (letter + 3 digits), or "" when the name has no letters
    """
    letters = _letters(name)
    if not letters:
        return ""
    return jellyfish.soundex(letters)


def refined_soundex(name: str) -> str:
    """Generate the Refined Soundex code for a name.

    The first letter is kept, then every letter (the first included) is
    mapped to its digit class; runs of the same class collapse.

    Examples:
        refined_soundex("quass") -> "Q503"
        refined_soundex("quast") -> "Q5036"
    """
    letters = _letters(name)
    if not letters:
        return ""

    code = letters[0]
    last = None
    for char in letters:
        digit = REFINED_SOUNDEX_MAP[char]
        if digit != last:
            code += digit
        last = digit
    return code
