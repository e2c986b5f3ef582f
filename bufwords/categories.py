"""Character categories — script-aware classification used for token boundaries."""
import unicodedata
from enum import Enum

import regex


class Category(Enum):
    WHITESPACE = "whitespace"
    LINE_BREAK = "line_break"
    WORD = "word"
    PUNCTUATION = "punctuation"
    HIRAGANA = "hiragana"
    KATAKANA = "katakana"
    KANJI = "kanji"
    UNKNOWN = "unknown"


# Inclusive code point ranges, https://www.unicode.org/charts/
HIRAGANA_RANGES = (
    (0x3041, 0x3096),    # Hiragana
    (0x3099, 0x309F),    # Hiragana (voicing marks, iteration marks, digraph)
    (0x1B100, 0x1B12F),  # Kana Extended-A
    (0x1AFF0, 0x1AFFF),  # Kana Extended-B
    (0x1B000, 0x1B0FF),  # Kana Supplement
    (0x1B130, 0x1B16F),  # Small Kana Extension
)

KATAKANA_RANGES = (
    (0x30A0, 0x30FF),    # Katakana
)

KANJI_RANGES = (
    (0x4E00, 0x9FFF),    # CJK Unified Ideographs
    (0x3400, 0x4DBF),    # Extension A
    (0x20000, 0x2A6DF),  # Extension B
    (0x2A700, 0x2B739),  # Extension C
    (0x2B740, 0x2B81D),  # Extension D
    (0x2B820, 0x2CEA1),  # Extension E
    (0x2CEB0, 0x2EBE0),  # Extension F
    (0x2EBF0, 0x2EE5D),  # Extension I
    (0x30000, 0x3134A),  # Extension G
    (0x31350, 0x323AF),  # Extension H
    (0xF900, 0xFAFF),    # CJK Compatibility Ideographs
    (0x2F800, 0x2FA1F),  # CJK Compatibility Ideographs Supplement
)

LINE_BREAKS = frozenset((
    '\n', '\x0b', '\x0c', '\r',
    '\x85',  # next line
    '\N{LINE SEPARATOR}',
    '\N{PARAGRAPH SEPARATOR}',
))

# U+1680 OGHAM SPACE MARK is left out: it renders as a dash, not as blank space.
WHITESPACE = frozenset((
    '\t',
    ' ',
    '\N{NO-BREAK SPACE}',
    '\N{MONGOLIAN VOWEL SEPARATOR}',
    '\N{NARROW NO-BREAK SPACE}',
    '\N{MEDIUM MATHEMATICAL SPACE}',
    '\N{IDEOGRAPHIC SPACE}',
    '\N{ZERO WIDTH NO-BREAK SPACE}',
)) | frozenset(chr(cp) for cp in range(0x2000, 0x200C))  # en quad .. zero width space

# Alphabetic includes the combining vowel signs (Mc/Mn) of Indic scripts
WORD_PATTERN = regex.compile(r'[\p{Alphabetic}\p{N}_]')

PUNCTUATION_CATEGORIES = frozenset({
    'Po', 'Ps', 'Pe', 'Pi', 'Pf', 'Pc', 'Pd',
    'Sm', 'Sc', 'Sk',
})


def _in_ranges(cp: int, ranges) -> bool:
    return any(lo <= cp <= hi for lo, hi in ranges)


def is_hiragana(ch: str) -> bool:
    return _in_ranges(ord(ch), HIRAGANA_RANGES)


def is_katakana(ch: str) -> bool:
    return _in_ranges(ord(ch), KATAKANA_RANGES)


def is_kanji(ch: str) -> bool:
    return _in_ranges(ord(ch), KANJI_RANGES)


def is_line_break(ch: str) -> bool:
    return ch in LINE_BREAKS


def is_whitespace(ch: str) -> bool:
    """Non-line-break whitespace.

    This is a plain yes/no split; it does not tell breaking from
    non-breaking or zero-width from visible spaces.
    """
    return ch in WHITESPACE


def is_word(ch: str) -> bool:
    return WORD_PATTERN.match(ch) is not None


def is_punctuation(ch: str) -> bool:
    return unicodedata.category(ch) in PUNCTUATION_CATEGORIES


# First match wins. Script checks come first so that e.g. the kana
# voicing marks (general category Sk) stay inside hiragana runs.
PRECEDENCE = (
    (Category.HIRAGANA, is_hiragana),
    (Category.KATAKANA, is_katakana),
    (Category.KANJI, is_kanji),
    (Category.LINE_BREAK, is_line_break),
    (Category.WHITESPACE, is_whitespace),
    (Category.WORD, is_word),
    (Category.PUNCTUATION, is_punctuation),
)


def classify(ch: str) -> Category:
    """Return the category of a single character.

    Total over all code points; anything not matched falls into UNKNOWN.
    """
    if len(ch) != 1:
        raise ValueError(f"classify() expects a single character, got {ch!r}")
    for category, predicate in PRECEDENCE:
        if predicate(ch):
            return category
    return Category.UNKNOWN


def is_boundary(a: str, b: str) -> bool:
    """True if a token boundary falls between characters a and b."""
    return classify(a) != classify(b)
