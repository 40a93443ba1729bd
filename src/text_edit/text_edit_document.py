"""Line model for text documents."""

import bisect
import re
from typing import List, Tuple


class TextDocument:
    """
    Immutable view of document text as lines plus a line ending.

    Lines never include their terminator.  A document that ends with a line
    ending has a final empty line, so joining the lines with the line ending
    always reproduces the original text.
    """

    _LINE_BREAK_PATTERN = re.compile(r'\r?\n')

    def __init__(self, text: str, eol: str | None = None):
        """
        Initialize the document.

        Args:
            text: Full document text
            eol: Line ending to use; detected from the text when not given
        """
        self._text = text
        self._eol = eol if eol is not None else self.detect_eol(text)
        self._lines = text.split(self._eol)

        self._line_starts: List[int] = []
        offset = 0
        for line in self._lines:
            self._line_starts.append(offset)
            offset += len(line) + len(self._eol)

    @staticmethod
    def detect_eol(text: str) -> str:
        """
        Detect line ending style from text.

        Args:
            text: Text to inspect

        Returns:
            '\\r\\n' if the text contains any CRLF sequence, otherwise '\\n'
        """
        if '\r\n' in text:
            return '\r\n'

        return '\n'

    @staticmethod
    def split(text: str) -> Tuple[List[str], str]:
        """
        Split text into lines and its detected line ending.

        Args:
            text: Text to split

        Returns:
            Tuple of (lines, eol)
        """
        eol = TextDocument.detect_eol(text)
        return text.split(eol), eol

    @staticmethod
    def join(lines: List[str], eol: str) -> str:
        """
        Join lines with a line ending; the inverse of split().

        Args:
            lines: Lines without terminators
            eol: Line ending to place between lines

        Returns:
            Joined text
        """
        return eol.join(lines)

    @property
    def text(self) -> str:
        """Full document text."""
        return self._text

    @property
    def eol(self) -> str:
        """Line ending used by the document."""
        return self._eol

    @property
    def lines(self) -> List[str]:
        """Document lines, without terminators."""
        return list(self._lines)

    def line_count(self) -> int:
        """Number of lines in the document (an empty document has one empty line)."""
        return len(self._lines)

    def line(self, index: int) -> str:
        """Get a single line (0-indexed)."""
        return self._lines[index]

    def line_start(self, index: int) -> int:
        """
        Get the offset of the first character of a line.

        Args:
            index: Line number (0-indexed); line_count() maps to the end of the text

        Returns:
            Character offset
        """
        if index >= len(self._lines):
            return len(self._text)

        return self._line_starts[index]

    def line_end(self, index: int) -> int:
        """Get the offset just past the last character of a line (before its terminator)."""
        return self._line_starts[index] + len(self._lines[index])

    def normalize_eol(self, text: str) -> str:
        """
        Convert every LF or CRLF line break in text to this document's line ending.

        Args:
            text: Text to convert

        Returns:
            Converted text
        """
        return self._LINE_BREAK_PATTERN.sub(lambda _match: self._eol, text)

    def position_at(self, offset: int) -> Tuple[int, int]:
        """
        Convert a character offset into a (line, column) position.

        Args:
            offset: Character offset, clamped to the document bounds

        Returns:
            Tuple of (line, column), both 0-indexed
        """
        offset = max(0, min(offset, len(self._text)))
        line = bisect.bisect_right(self._line_starts, offset) - 1

        # An offset inside a line ending belongs to the end of the line before it
        column = min(offset - self._line_starts[line], len(self._lines[line]))
        return line, column

    def offset_at(self, line: int, column: int) -> int:
        """
        Convert a (line, column) position into a character offset.

        Args:
            line: Line number (0-indexed)
            column: Column (0-indexed), clamped to the line length

        Returns:
            Character offset
        """
        if line < 0:
            return 0

        if line >= len(self._lines):
            return len(self._text)

        return self._line_starts[line] + max(0, min(column, len(self._lines[line])))
