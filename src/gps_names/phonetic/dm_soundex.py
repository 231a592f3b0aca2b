"""Daitch-Mokotoff style soundex.

Follows the table at jewishgen.org/infofiles/soundex.html. That table lists
alternate codes for ch, ck, c, j, rs and rz; only the first code is
produced so every name gets exactly one code.
"""
from __future__ import annotations

MAX_TOKEN_LEN = 7
DEFAULT_MAX_CODE_LENGTH = 6

VOWELS = frozenset("aeiou")

# code -> substrings that produce it, per position context
START_CODES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("0", ("ai", "aj", "ay", "au", "a", "ei", "ej", "ey", "e", "i", "oi", "oj", "oy", "o",
           "ui", "uj", "uy", "u", "ue")),
    ("1", ("eu", "ia", "ie", "io", "iu", "j", "y")),
    ("2", ("schtsch", "schtsh", "schtch", "shtch", "shch", "shtsh", "sht", "scht", "schd", "stch",
           "stsch", "sc", "strz", "strs", "stsh", "st", "szcz", "szcs", "szt", "shd", "szd", "sd",
           "zdz", "zdzh", "zhdzh", "zd", "zhd")),
    ("3", ("d", "dt", "th", "t")),
    ("4", ("cz", "czs", "csz", "drz", "drs", "ds", "dsh", "dsz", "dz", "dzh", "dzs", "sch", "sh", "sz",
           "s", "tch", "ttch", "ttsch", "trz", "trs", "tsch", "tsh", "ts", "tts", "ttsz", "tc", "tz",
           "ttz", "tzs", "tsz", "zh", "zs", "zsch", "zsh", "z")),
    ("5", ("chs", "ch", "ck", "c", "g", "h", "ks", "kh", "k", "q", "x")),
    ("6", ("m", "n")),
    ("7", ("b", "fb", "f", "p", "pf", "ph", "v", "w")),
    ("8", ("l",)),
    ("9", ("r",)),
    ("94", ("rz", "rs")),
)

_SIBILANTS = (
    "cz", "czs", "csz", "drz", "drs", "ds", "dsh", "dsz", "dz", "dzh", "dzs", "sch", "sh", "sz", "s",
    "schtsch", "schtsh", "schtch", "shtch", "shch", "shtsh", "stch", "stsch", "sc", "strz", "strs",
    "stsh", "szcz", "szcs", "zdz", "zdzh", "zhdzh",
    "tch", "ttch", "ttsch", "trz", "trs", "tsch", "tsh", "ts", "tts", "ttsz", "tc", "tz", "ttz",
    "tzs", "tsz", "zh", "zs", "zsch", "zsh", "z",
)

BEFORE_VOWEL_CODES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("1", ("ai", "aj", "ay", "ei", "ej", "ey", "eu", "oi", "oj", "oy", "ui", "uj", "uy")),
    ("3", ("d", "dt", "th", "t")),
    ("4", _SIBILANTS),
    ("5", ("ch", "ck", "c", "g", "h", "kh", "k", "q")),
    ("6", ("m", "n")),
    ("7", ("au", "b", "fb", "f", "p", "pf", "ph", "v", "w")),
    ("8", ("l",)),
    ("9", ("r",)),
    ("43", ("sht", "scht", "schd", "st", "szt", "shd", "szd", "sd", "zd", "zhd")),
    ("54", ("chs", "ks", "x")),
    ("66", ("mn", "nm")),
    ("94", ("rz", "rs")),
)

OTHER_CODES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("3", ("d", "dt", "th", "t")),
    ("4", _SIBILANTS),
    ("5", ("ch", "ck", "c", "g", "kh", "k", "q")),
    ("6", ("m", "n")),
    ("7", ("b", "fb", "f", "p", "pf", "ph", "v", "w")),
    ("8", ("l",)),
    ("9", ("r",)),
    ("43", ("sht", "scht", "schd", "st", "szt", "shd", "szd", "sd", "zd", "zhd")),
    ("54", ("chs", "ks", "x")),
    ("66", ("mn", "nm")),
    ("94", ("rz", "rs")),
)


def _build_table(codes: tuple[tuple[str, tuple[str, ...]], ...]) -> dict[str, str]:
    table: dict[str, str] = {}
    for code, tokens in codes:
        for token in tokens:
            table[token] = code
    return table


START_TABLE = _build_table(START_CODES)
BEFORE_VOWEL_TABLE = _build_table(BEFORE_VOWEL_CODES)
OTHER_TABLE = _build_table(OTHER_CODES)


def dm_soundex(name: str, max_length: int = DEFAULT_MAX_CODE_LENGTH) -> str:
    """Generate a Daitch-Mokotoff style code for a name.

    Scans left to right taking the longest substring found in the table for
    the current context: name start, before a vowel, or elsewhere.
    Consecutive identical single-digit codes collapse, except after a
    character that matched nothing.

    Examples:
        dm_soundex("quass") -> "54"
        dm_soundex("quast") -> "543"
        dm_soundex("schwartz") -> "4794"

    Args:
        name: Romanized, lower-case name
        max_length: Maximum number of digits to emit

    Returns:
        Digit string of at most ``max_length`` characters
    """
    s = name.lower()
    code = ""
    pos = 0
    at_begin = True
    prev_skipped = False

    while pos < len(s) and len(code) < max_length:
        found = False
        for length in range(min(len(s) - pos, MAX_TOKEN_LEN), 0, -1):
            next_pos = pos + length
            token = s[pos:next_pos]
            if at_begin:
                digits = START_TABLE.get(token)
            elif next_pos < len(s) and s[next_pos] in VOWELS:
                digits = BEFORE_VOWEL_TABLE.get(token)
            else:
                digits = OTHER_TABLE.get(token)
            if digits is not None:
                if prev_skipped or len(digits) != 1 or not code or code[-1] != digits:
                    code += digits
                pos = next_pos
                found = True
                break
        at_begin = False
        if found:
            prev_skipped = False
        else:
            prev_skipped = True
            pos += 1

    return code[:max_length]
