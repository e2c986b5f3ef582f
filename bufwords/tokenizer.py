"""Tokenizer — splits text into maximal runs of one character category."""
from dataclasses import dataclass
from typing import Iterator

from bufwords.categories import Category, classify


@dataclass(frozen=True)
class Token:
    text: str
    start: int          # code point offset, inclusive
    end: int            # code point offset, exclusive
    category: Category


def iter_tokens(text: str) -> Iterator[Token]:
    """Yield tokens in order, with offsets into text.

    One pass, no backtracking: a run is closed whenever the category
    of the next character differs from the current run's.
    """
    if not text:
        return

    start = 0
    last_category = classify(text[0])
    for i, ch in enumerate(text):
        category = classify(ch)
        if category != last_category:
            yield Token(text[start:i], start, i, last_category)
            start = i
            last_category = category

    if start < len(text):
        yield Token(text[start:], start, len(text), last_category)


def tokenize(text: str) -> list[str]:
    """Split text into its token strings. ''.join(tokenize(t)) == t."""
    return [token.text for token in iter_tokens(text)]
