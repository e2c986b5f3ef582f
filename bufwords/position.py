"""Editor (line, character) coordinates → offsets into the buffer text.

Lines end at LSP line terminators: \\r\\n, \\r or \\n. Offsets are code point
indexes into the Python string. The character column is measured in the
unit named by ``encoding``:

    "utf-32"  code points (one per str index)
    "utf-16"  UTF-16 code units, the LSP default
    "utf-8"   bytes
"""
import re

POSITION_ENCODINGS = ("utf-8", "utf-16", "utf-32")

_EOL = re.compile(r'\r\n|\r|\n')


def check_encoding(encoding: str) -> str:
    if encoding not in POSITION_ENCODINGS:
        raise ValueError(
            f"unknown position encoding {encoding!r}, expected one of {POSITION_ENCODINGS}"
        )
    return encoding


def split_lines(text: str) -> list[str]:
    """Line contents without terminators. Always at least one (possibly empty) line."""
    return _EOL.split(text)


def line_starts(text: str) -> list[int]:
    """Offset at which each line starts. The first line starts at 0."""
    starts = [0]
    starts.extend(m.end() for m in _EOL.finditer(text))
    return starts


def unit_width(ch: str, encoding: str) -> int:
    """Width of one character in the given column unit."""
    if encoding == "utf-16":
        return 2 if ord(ch) > 0xFFFF else 1
    if encoding == "utf-8":
        return len(ch.encode("utf-8", "surrogatepass"))
    return 1


def to_offset(text: str, line: int, character: int, encoding: str = "utf-32") -> int:
    """Translate a cursor coordinate into an offset into text.

    The column is counted forward from the start of the line and is not
    stopped at the line's end. The result is clamped to len(text), and a
    column pointing into the middle of a multi-unit character resolves to
    the boundary before it.
    """
    check_encoding(encoding)
    starts = line_starts(text)
    if line >= len(starts):
        return len(text)
    start = starts[max(line, 0)]
    character = max(character, 0)

    if encoding == "utf-32":
        return min(start + character, len(text))

    units = 0
    offset = start
    while offset < len(text):
        width = unit_width(text[offset], encoding)
        if units + width > character:
            break
        units += width
        offset += 1
    return offset


def column_to_index(line_text: str, character: int, encoding: str = "utf-32") -> int:
    """Translate a column into an index within a single line, clamped to the line."""
    return to_offset(line_text, 0, character, encoding)
