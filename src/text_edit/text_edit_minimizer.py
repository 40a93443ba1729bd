"""Shrinks a matched replacement down to the range that actually changes."""

from dataclasses import dataclass
from typing import List

from text_edit.text_edit_document import TextDocument
from text_edit.text_edit_types import MatchCandidate, TextEdit


@dataclass(frozen=True)
class IdenticalLines:
    """Counts of lines shared by the start and end of the old and new text."""

    leading: int
    trailing: int


@dataclass(frozen=True)
class MinimizedEdit:
    """A minimized replacement, as offsets into the document and as a line/column edit."""

    start_offset: int
    end_offset: int
    edit: TextEdit
    identical: IdenticalLines


class EditMinimizer:
    """
    Shrinks a matched span and its replacement to the smallest differing range.

    Whole identical lines at either end are dropped first, then any common
    character prefix or suffix of what remains.  Minimization only changes
    what is reported as edited: splicing the minimized edit into the document
    gives exactly the same text as replacing the whole matched span.
    """

    @staticmethod
    def split_pieces(text: str, eol: str) -> List[str]:
        """
        Split text into lines that keep their line ending.

        The last piece never has a line ending, so an empty string yields one
        empty piece and the pieces always join back into the original text.

        Args:
            text: Text to split
            eol: Line ending

        Returns:
            List of line pieces
        """
        parts = text.split(eol)
        return [part + eol for part in parts[:-1]] + [parts[-1]]

    @staticmethod
    def count_identical_lines(old_pieces: List[str], new_pieces: List[str]) -> IdenticalLines:
        """
        Count identical lines at the start and end of two texts without overlap.

        Args:
            old_pieces: Old text split with split_pieces()
            new_pieces: New text split with split_pieces()

        Returns:
            IdenticalLines with leading and trailing counts
        """
        limit = min(len(old_pieces), len(new_pieces))

        leading = 0
        while leading < limit and old_pieces[leading] == new_pieces[leading]:
            leading += 1

        trailing = 0
        remaining = limit - leading
        while trailing < remaining and old_pieces[-1 - trailing] == new_pieces[-1 - trailing]:
            trailing += 1

        return IdenticalLines(leading, trailing)

    @staticmethod
    def common_prefix_length(old: str, new: str) -> int:
        """
        Get the length of the common prefix of two strings, never ending inside a CRLF pair.

        Args:
            old: First string
            new: Second string

        Returns:
            Prefix length
        """
        limit = min(len(old), len(new))
        length = 0
        while length < limit and old[length] == new[length]:
            length += 1

        if 0 < length < len(old) and old[length - 1] == '\r' and old[length] == '\n':
            length -= 1

        return length

    @staticmethod
    def common_suffix_length(old: str, new: str, limit: int) -> int:
        """
        Get the length of the common suffix of two strings, never starting inside a CRLF pair.

        Args:
            old: First string
            new: Second string
            limit: Maximum suffix length (keeps the suffix clear of an already taken prefix)

        Returns:
            Suffix length
        """
        length = 0
        while length < limit and old[-1 - length] == new[-1 - length]:
            length += 1

        if 0 < length < len(old) and old[-length] == '\n' and old[-length - 1] == '\r':
            length -= 1

        return length

    def minimize(self, document: TextDocument, candidate: MatchCandidate) -> MinimizedEdit:
        """
        Minimize the replacement of a matched span.

        Args:
            document: Document the candidate refers to
            candidate: The accepted match

        Returns:
            MinimizedEdit describing the smallest equivalent replacement
        """
        eol = document.eol
        old_text = document.text[candidate.start_offset:candidate.end_offset]
        new_text = candidate.replacement

        old_pieces = self.split_pieces(old_text, eol)
        new_pieces = self.split_pieces(new_text, eol)
        identical = self.count_identical_lines(old_pieces, new_pieces)

        prefix = ''.join(old_pieces[:identical.leading])
        suffix = ''.join(old_pieces[len(old_pieces) - identical.trailing:])

        old_middle = old_text[len(prefix):len(old_text) - len(suffix)]
        new_middle = new_text[len(prefix):len(new_text) - len(suffix)]

        head = self.common_prefix_length(old_middle, new_middle)
        tail = self.common_suffix_length(old_middle, new_middle, min(len(old_middle), len(new_middle)) - head)

        start_offset = candidate.start_offset + len(prefix) + head
        end_offset = candidate.end_offset - len(suffix) - tail
        replacement = new_middle[head:len(new_middle) - tail]

        start_line, start_col = document.position_at(start_offset)
        end_line, end_col = document.position_at(end_offset)

        return MinimizedEdit(
            start_offset=start_offset,
            end_offset=end_offset,
            edit=TextEdit(start_line, start_col, end_line, end_col, replacement),
            identical=identical
        )
