"""Shared dataclasses for text edit operations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class MatchKind(Enum):
    """The strategy that located a match."""

    EXACT = 'exact'
    FUZZY = 'fuzzy'
    WHITESPACE = 'whitespace'
    SIMILARITY = 'similarity'


@dataclass(frozen=True)
class Needle:
    """The caller's old/new string pair, normalized to the document's line ending."""

    old_text: str
    new_text: str
    eol: str

    @property
    def old_lines(self) -> List[str]:
        """Old text split into lines (no terminators)."""
        return self.old_text.split(self.eol)

    @property
    def new_lines(self) -> List[str]:
        """New text split into lines (no terminators)."""
        return self.new_text.split(self.eol)


@dataclass(frozen=True)
class MatchCandidate:
    """A span of the document believed to correspond to the needle's old text."""

    start_line: int  # First line of the span (0-indexed)
    end_line: int  # One past the last line touched by the span
    start_offset: int  # Character offset where the span starts
    end_offset: int  # Character offset where the span ends (exclusive)
    confidence: float  # 0.0 to 1.0
    kind: MatchKind
    replacement: str  # Text that replaces the span


@dataclass(frozen=True)
class TextEdit:
    """A single replacement of a line/column range (0-indexed, end exclusive)."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    new_text: str

    def line_delta(self) -> int:
        """Number of lines this edit adds (negative if it removes lines)."""
        return self.new_text.count('\n') - (self.end_line - self.start_line)


@dataclass(frozen=True)
class PatchLine:
    """Represents a single line in a patch hunk."""

    type: str  # ' ' for context, '-' for deletion, '+' for addition
    content: str  # The actual line content (without the prefix character)


@dataclass(frozen=True)
class PatchHunk:
    """Represents a single hunk of a unified diff."""

    old_start: int  # Starting line number in original file (1-indexed)
    old_count: int  # Number of lines in original file
    new_start: int  # Starting line number in new file (1-indexed)
    new_count: int  # Number of lines in new file
    lines: List[PatchLine]  # The actual diff lines


@dataclass(frozen=True)
class PatchResult:
    """Result of applying a string replacement to a document."""

    updated_file: str
    edits: List[TextEdit] = field(default_factory=list)
    patch: List[PatchHunk] = field(default_factory=list)
    match_kind: MatchKind | None = None  # None when the edit created the document
    confidence: float = 1.0
