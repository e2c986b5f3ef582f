"""Completion engine — buffer vocabulary minus the word being typed."""
from bufwords.categories import Category, classify, is_boundary
from bufwords.position import column_to_index, split_lines
from bufwords.tokenizer import tokenize

BLANK_CATEGORIES = frozenset({Category.WHITESPACE, Category.LINE_BREAK})


def find_word_before_cursor(text: str, line: int, character: int,
                            encoding: str = "utf-32") -> str:
    """Return the token that ends at the cursor, searching the cursor's line only.

    Scans left from the cursor until the category changes. A cursor past
    the end of its line is treated as sitting at the line's end; a line
    index past the last line yields ''.
    """
    lines = split_lines(text)
    if line < 0 or line >= len(lines):
        return ''

    current_line = lines[line]
    before = current_line[:column_to_index(current_line, character, encoding)]
    if not before:
        return ''

    start = len(before) - 1
    while start > 0 and not is_boundary(before[start - 1], before[start]):
        start -= 1
    return before[start:]


def complete(text: str, line: int, character: int, encoding: str = "utf-32") -> set[str]:
    """Distinct tokens of text, excluding the word immediately left of the cursor."""
    vocabulary = set(tokenize(text))
    vocabulary.discard(find_word_before_cursor(text, line, character, encoding))
    return vocabulary


def is_blank(word: str) -> bool:
    """True for tokens made only of whitespace or line breaks."""
    return bool(word) and all(classify(ch) in BLANK_CATEGORIES for ch in word)
