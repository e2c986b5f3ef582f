"""Document buffer — the open document's text, shared by all handlers."""
import logging
import threading
from contextlib import contextmanager
from typing import Iterable

from bufwords.completion import complete
from bufwords.position import check_encoding, to_offset

logger = logging.getLogger(__name__)

Coordinate = tuple[int, int]        # (line, character), both zero-based
Range = tuple[Coordinate, Coordinate]

FAILED_TO_ACQUIRE_LOCK_MSG = "failed to acquire lock"


class BufferLockError(RuntimeError):
    """An earlier edit failed while holding the buffer lock.

    Not recoverable: the current operation is aborted and the buffer stays
    unusable until a document is opened again.
    """


class DocumentBuffer:
    """Authoritative copy of the single open document.

    Every read and write happens under one lock, held only for the
    duration of the operation. Edits are applied in the order given, each
    against the text left by the previous one.
    """

    def __init__(self, position_encoding: str = "utf-32"):
        self._text = ""
        self._uri: str | None = None
        self._version: int | None = None
        self._open = False
        self._poisoned = False
        self._lock = threading.Lock()
        self._position_encoding = check_encoding(position_encoding)

    @contextmanager
    def _locked(self, reopen: bool = False):
        with self._lock:
            if self._poisoned and not reopen:
                raise BufferLockError(f"{FAILED_TO_ACQUIRE_LOCK_MSG}: buffer poisoned by a failed edit")
            try:
                yield
            except Exception:
                self._poisoned = True
                logger.error("Edit failed while holding the buffer lock; buffer poisoned")
                raise

    @property
    def uri(self) -> str | None:
        return self._uri

    @property
    def version(self) -> int | None:
        return self._version

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @property
    def position_encoding(self) -> str:
        return self._position_encoding

    def configure(self, position_encoding: str):
        """Switch the column unit; takes effect from the next operation."""
        check_encoding(position_encoding)
        with self._locked(reopen=True):
            self._position_encoding = position_encoding
        logger.debug("Buffer position encoding: %s", position_encoding)

    def snapshot(self) -> str:
        """Current text, read under the lock."""
        with self._locked():
            return self._text

    def replace_all(self, new_text: str, uri: str | None = None, version: int | None = None):
        """Install new_text as the whole document (document open, full change)."""
        with self._locked(reopen=True):
            self._text = new_text
            self._poisoned = False
            self._open = True
            if uri is not None:
                self._uri = uri
            if version is not None:
                self._version = version
        logger.debug("Buffer replaced: %d chars, uri=%s", len(new_text), self._uri)

    def apply_range(self, start: Coordinate, end: Coordinate, replacement: str):
        """Replace the span between two coordinates with replacement."""
        self.apply_changes([((start, end), replacement)])

    def apply_changes(self, changes: Iterable[tuple[Range | None, str]],
                      version: int | None = None):
        """Apply edits in order. A None range replaces the whole document.

        Offsets of each edit are computed against the text produced by the
        edit before it. The batch becomes visible all at once.
        """
        with self._locked():
            if not self._open:
                logger.debug("Ignoring change: no document open")
                return
            text = self._text
            for change_range, replacement in changes:
                if change_range is None:
                    text = replacement
                else:
                    text = self._splice(text, change_range, replacement)
            self._text = text
            if version is not None:
                self._version = version

    def _splice(self, text: str, change_range: Range, replacement: str) -> str:
        (start_line, start_char), (end_line, end_char) = change_range
        start = to_offset(text, start_line, start_char, self._position_encoding)
        end = to_offset(text, end_line, end_char, self._position_encoding)
        if end < start:
            start, end = end, start
        return text[:start] + replacement + text[end:]

    def close(self):
        """Drop the document. Reads return nothing until the next replace_all."""
        with self._locked(reopen=True):
            self._text = ""
            self._open = False
            self._version = None
        logger.debug("Buffer closed: uri=%s", self._uri)

    def complete(self, line: int, character: int) -> set[str]:
        """Completion candidates for a cursor in the current text."""
        with self._locked():
            if not self._open:
                return set()
            text = self._text
            encoding = self._position_encoding
        return complete(text, line, character, encoding)
