"""Match strategies used to locate the text to replace."""

from abc import ABC, abstractmethod
from typing import List, Tuple

from text_edit.text_edit_document import TextDocument
from text_edit.text_edit_types import MatchCandidate, MatchKind, Needle


# (start_line, start_column, end_line, end_column)
LineSpan = Tuple[int, int, int, int]


class LineRule(ABC):
    """
    Decides how a needle line compares with a document line.

    A needle of several lines may start part way through a document line and
    end part way through another, so the first and last needle lines are
    matched as a suffix and a prefix respectively.  Lines in between must
    compare equal after normalization.
    """

    @abstractmethod
    def normalize(self, line: str) -> str:
        """
        Normalize a line for whole-line comparison.

        Args:
            line: Line without terminator

        Returns:
            Normalized line
        """

    @abstractmethod
    def match_first(self, document_line: str, needle_line: str) -> int | None:
        """
        Match the first line of a multi-line needle against the end of a document line.

        Args:
            document_line: Document line
            needle_line: First needle line

        Returns:
            Column where the match starts, or None
        """

    @abstractmethod
    def match_last(self, document_line: str, needle_line: str) -> int | None:
        """
        Match the last line of a multi-line needle against the start of a document line.

        Args:
            document_line: Document line
            needle_line: Last needle line

        Returns:
            Column where the match ends (exclusive), or None
        """

    @abstractmethod
    def match_within(self, document_line: str, needle_line: str) -> List[Tuple[int, int]]:
        """
        Match a single-line needle inside a document line.

        Args:
            document_line: Document line
            needle_line: The only needle line

        Returns:
            Non-overlapping (start_column, end_column) pairs
        """


class ExactLineRule(LineRule):
    """Lines must be byte-identical."""

    def normalize(self, line: str) -> str:
        return line

    def match_first(self, document_line: str, needle_line: str) -> int | None:
        if not document_line.endswith(needle_line):
            return None

        return len(document_line) - len(needle_line)

    def match_last(self, document_line: str, needle_line: str) -> int | None:
        if not document_line.startswith(needle_line):
            return None

        return len(needle_line)

    def match_within(self, document_line: str, needle_line: str) -> List[Tuple[int, int]]:
        matches: List[Tuple[int, int]] = []
        if not needle_line:
            return matches

        search_idx = 0
        while True:
            idx = document_line.find(needle_line, search_idx)
            if idx == -1:
                break

            matches.append((idx, idx + len(needle_line)))
            search_idx = idx + len(needle_line)

        return matches


class TrailingWhitespaceLineRule(LineRule):
    """Lines must match once trailing spaces and tabs are removed; indentation must still match."""

    def normalize(self, line: str) -> str:
        return line.rstrip(' \t')

    def match_first(self, document_line: str, needle_line: str) -> int | None:
        stripped_document = self.normalize(document_line)
        stripped_needle = self.normalize(needle_line)
        if not stripped_document.endswith(stripped_needle):
            return None

        return len(stripped_document) - len(stripped_needle)

    def match_last(self, document_line: str, needle_line: str) -> int | None:
        stripped_needle = self.normalize(needle_line)
        if not stripped_needle:
            return 0

        if not document_line.startswith(stripped_needle):
            return None

        # Take any trailing whitespace that ends the line along with the match
        end = len(stripped_needle)
        if not self.normalize(document_line[end:]):
            return len(document_line)

        return end

    def match_within(self, document_line: str, needle_line: str) -> List[Tuple[int, int]]:
        # A single line only differs by trailing whitespace if it runs to the end of the line
        stripped_needle = self.normalize(needle_line)
        if not stripped_needle:
            return []

        start = self.match_first(document_line, needle_line)
        if start is None:
            return []

        return [(start, len(document_line))]


class TrimmedLineRule(LineRule):
    """Whole lines must match once leading and trailing whitespace is removed."""

    def normalize(self, line: str) -> str:
        return line.strip()

    def match_first(self, document_line: str, needle_line: str) -> int | None:
        if self.normalize(document_line) != self.normalize(needle_line):
            return None

        return 0

    def match_last(self, document_line: str, needle_line: str) -> int | None:
        if self.normalize(document_line) != self.normalize(needle_line):
            return None

        # An empty last needle line is a blank-line anchor: the match stops before it
        if not needle_line:
            return 0

        return len(document_line)

    def match_within(self, document_line: str, needle_line: str) -> List[Tuple[int, int]]:
        if self.normalize(document_line) != self.normalize(needle_line):
            return []

        return [(0, len(document_line))]


class WindowedLineComparator:
    """Slides a needle over the lines of a document, comparing lines with a LineRule."""

    def __init__(self, rule: LineRule):
        """
        Initialize the comparator.

        Args:
            rule: Line comparison rule
        """
        self._rule = rule

    def find_spans(self, document: TextDocument, needle_lines: List[str]) -> List[LineSpan]:
        """
        Find every non-overlapping place the needle matches.

        Args:
            document: Document to search
            needle_lines: Needle split into lines

        Returns:
            Matching spans in document order
        """
        lines = document.lines
        count = len(needle_lines)
        spans: List[LineSpan] = []

        if count == 0 or count > len(lines):
            return spans

        if count == 1:
            for line_num, line in enumerate(lines):
                for start_col, end_col in self._rule.match_within(line, needle_lines[0]):
                    spans.append((line_num, start_col, line_num, end_col))

            return self._drop_overlaps(spans)

        middle = [self._rule.normalize(line) for line in needle_lines[1:-1]]
        normalized = [self._rule.normalize(line) for line in lines]

        for line_num in range(len(lines) - count + 1):
            start_col = self._rule.match_first(lines[line_num], needle_lines[0])
            if start_col is None:
                continue

            if normalized[line_num + 1:line_num + count - 1] != middle:
                continue

            last_line = line_num + count - 1
            end_col = self._rule.match_last(lines[last_line], needle_lines[-1])
            if end_col is None:
                continue

            spans.append((line_num, start_col, last_line, end_col))

        return self._drop_overlaps(spans)

    def _drop_overlaps(self, spans: List[LineSpan]) -> List[LineSpan]:
        """
        Keep only spans that start at or after the end of the previously kept span.

        Args:
            spans: Spans in document order

        Returns:
            Non-overlapping spans
        """
        kept: List[LineSpan] = []
        for span in spans:
            if kept and (span[0], span[1]) < (kept[-1][2], kept[-1][3]):
                continue

            kept.append(span)

        return kept


class MatchStrategy(ABC):
    """Abstract base class for a single way of locating the needle in a document."""

    def __init__(self, kind: MatchKind):
        """
        Initialize the strategy.

        Args:
            kind: The kind of match this strategy reports
        """
        self._kind = kind

    @property
    def kind(self) -> MatchKind:
        """The kind of match this strategy reports."""
        return self._kind

    @abstractmethod
    def find_candidates(self, document: TextDocument, needle: Needle) -> List[MatchCandidate]:
        """
        Find every equally-qualified candidate for the needle.

        An empty list means this strategy found nothing and the next one should
        be tried; more than one candidate means the needle is ambiguous.

        Args:
            document: Document to search
            needle: Old/new strings, normalized to the document's line ending

        Returns:
            List of candidates
        """

    def _make_candidate(
        self,
        document: TextDocument,
        span: LineSpan,
        replacement: str,
        confidence: float
    ) -> MatchCandidate:
        """
        Build a candidate from a line/column span.

        Args:
            document: Document the span refers to
            span: (start_line, start_column, end_line, end_column)
            replacement: Text that replaces the span
            confidence: Strategy-specific confidence

        Returns:
            MatchCandidate
        """
        start_line, start_col, end_line, end_col = span
        return MatchCandidate(
            start_line=start_line,
            end_line=end_line + 1,
            start_offset=document.offset_at(start_line, start_col),
            end_offset=document.offset_at(end_line, end_col),
            confidence=confidence,
            kind=self._kind,
            replacement=replacement
        )


class ExactMatchStrategy(MatchStrategy):
    """Finds byte-exact occurrences of the old text."""

    def __init__(self) -> None:
        super().__init__(MatchKind.EXACT)
        self._comparator = WindowedLineComparator(ExactLineRule())

    def find_candidates(self, document: TextDocument, needle: Needle) -> List[MatchCandidate]:
        spans = self._comparator.find_spans(document, needle.old_lines)
        return [self._make_candidate(document, span, needle.new_text, 1.0) for span in spans]


class FuzzyMatchStrategy(MatchStrategy):
    """Finds occurrences of the old text that differ only by trailing whitespace."""

    def __init__(self) -> None:
        super().__init__(MatchKind.FUZZY)
        self._comparator = WindowedLineComparator(TrailingWhitespaceLineRule())

    def find_candidates(self, document: TextDocument, needle: Needle) -> List[MatchCandidate]:
        spans = self._comparator.find_spans(document, needle.old_lines)
        return [self._make_candidate(document, span, needle.new_text, 0.95) for span in spans]


class WhitespaceFlexibleMatchStrategy(MatchStrategy):
    """
    Finds whole-line blocks that match the old text once indentation is ignored.

    Because trimmed comparison is lax, the block must be followed by a blank
    line in the document.  The needle carries that requirement as a trailing
    empty line, and the blank line itself is left in place.
    """

    def __init__(self) -> None:
        super().__init__(MatchKind.WHITESPACE)
        self._comparator = WindowedLineComparator(TrimmedLineRule())

    def find_candidates(self, document: TextDocument, needle: Needle) -> List[MatchCandidate]:
        trimmed_old = needle.old_text.strip()
        if not trimmed_old:
            return []

        needle_lines = [line.strip() for line in trimmed_old.split(needle.eol)]
        needle_lines.append('')

        replacement = needle.new_text
        if replacement and not replacement.endswith(needle.eol):
            replacement += needle.eol

        spans = self._comparator.find_spans(document, needle_lines)
        candidates: List[MatchCandidate] = []
        for start_line, start_col, end_line, end_col in spans:
            # The span ends at the start of the blank line, so it covers whole lines before it
            candidates.append(MatchCandidate(
                start_line=start_line,
                end_line=end_line,
                start_offset=document.offset_at(start_line, start_col),
                end_offset=document.offset_at(end_line, end_col),
                confidence=0.9,
                kind=self.kind,
                replacement=replacement
            ))

        return candidates
