"""Similarity-based matching, used when no structural strategy finds the old text."""

import difflib
import logging
import math
from typing import List, Tuple

from text_edit.text_edit_document import TextDocument
from text_edit.text_edit_matcher import MatchStrategy
from text_edit.text_edit_types import MatchCandidate, MatchKind, Needle


class SimilarityMatchStrategy(MatchStrategy):
    """
    Scores every window of document lines against the old text and keeps the best.

    This is the last resort for old text that was paraphrased or slightly
    mis-transcribed.  It never settles for a mediocre window: the best score
    must reach the threshold, and a tie for the best score is reported as
    ambiguous rather than resolved.
    """

    def __init__(
        self,
        threshold: float = 0.6,
        max_needle_chars: int = 1000,
        max_needle_lines: int = 20,
        max_document_lines: int = 1000
    ):
        """
        Initialize the strategy.

        Args:
            threshold: Minimum score (0.0-1.0) required for a match
            max_needle_chars: Old text longer than this is never scored
            max_needle_lines: Old text with more lines than this is never scored
            max_document_lines: Documents with more lines than this are never scored
        """
        super().__init__(MatchKind.SIMILARITY)
        self._threshold = threshold
        self._max_needle_chars = max_needle_chars
        self._max_needle_lines = max_needle_lines
        self._max_document_lines = max_document_lines
        self._logger = logging.getLogger("SimilarityMatchStrategy")

    def threshold(self) -> float:
        """Get the minimum score required for a match."""
        return self._threshold

    def find_candidates(self, document: TextDocument, needle: Needle) -> List[MatchCandidate]:
        expected_lines = self._expected_lines(document, needle)
        if expected_lines is None:
            return []

        scored = self._score_windows(document.lines, expected_lines)
        if not scored:
            return []

        best = max(score for _, score in scored)
        if best < self._threshold:
            self._logger.debug("Best similarity %.3f is below threshold %.3f", best, self._threshold)
            return []

        # A trailing line break on the old text means the span runs through the window's last line break
        has_trailing_eol = needle.old_text.endswith(needle.eol)

        candidates: List[MatchCandidate] = []
        for start_line, score in scored:
            if not math.isclose(score, best, rel_tol=0.0, abs_tol=1e-9):
                continue

            last_line = start_line + len(expected_lines) - 1
            if has_trailing_eol:
                end_offset = document.line_start(last_line + 1)

            else:
                end_offset = document.line_end(last_line)

            candidates.append(MatchCandidate(
                start_line=start_line,
                end_line=last_line + 1,
                start_offset=document.line_start(start_line),
                end_offset=end_offset,
                confidence=score,
                kind=self.kind,
                replacement=needle.new_text
            ))

        return candidates

    def best_match(self, document: TextDocument, needle: Needle) -> Tuple[int, float] | None:
        """
        Find the best-scoring window regardless of the threshold.

        Args:
            document: Document to search
            needle: Old/new strings, normalized to the document's line ending

        Returns:
            Tuple of (window start line, score), or None if the needle is not eligible
        """
        expected_lines = self._expected_lines(document, needle)
        if expected_lines is None:
            return None

        scored = self._score_windows(document.lines, expected_lines)
        if not scored:
            return None

        return max(scored, key=lambda item: item[1])

    def _expected_lines(self, document: TextDocument, needle: Needle) -> List[str] | None:
        """
        Get the lines to score, or None if the needle or document is too large.

        Args:
            document: Document to search
            needle: Old/new strings

        Returns:
            Old text lines without a trailing empty line, or None
        """
        if len(needle.old_text) > self._max_needle_chars:
            self._logger.debug("Old text is %d characters, skipping similarity match", len(needle.old_text))
            return None

        # A trailing line break counts towards the line limit
        old_line_count = len(needle.old_lines)
        if old_line_count > self._max_needle_lines:
            self._logger.debug("Old text has %d lines, skipping similarity match", old_line_count)
            return None

        old_text = needle.old_text
        if old_text.endswith(needle.eol):
            old_text = old_text[:-len(needle.eol)]

        expected_lines = old_text.split(needle.eol)

        if document.line_count() > self._max_document_lines:
            self._logger.debug("Document has %d lines, skipping similarity match", document.line_count())
            return None

        return expected_lines

    def _score_windows(self, document_lines: List[str], expected_lines: List[str]) -> List[Tuple[int, float]]:
        """
        Score every window of document lines the same length as the expected lines.

        Args:
            document_lines: All document lines
            expected_lines: Lines we expect to find

        Returns:
            List of (window start line, score)
        """
        window = len(expected_lines)
        scored: List[Tuple[int, float]] = []

        for start_line in range(len(document_lines) - window + 1):
            actual_lines = document_lines[start_line:start_line + window]
            scored.append((start_line, self.calculate_confidence(expected_lines, actual_lines)))

        return scored

    @staticmethod
    def calculate_confidence(expected: List[str], actual: List[str]) -> float:
        """
        Calculate confidence score for a potential match.

        Args:
            expected: Expected line contents
            actual: Actual line contents

        Returns:
            Confidence score from 0.0 to 1.0
        """
        if not expected or len(expected) != len(actual):
            return 0.0

        exact_matches = 0
        total_similarity = 0.0

        for exp, act in zip(expected, actual):
            exp_stripped = exp.strip()
            act_stripped = act.strip()

            if exp_stripped == act_stripped:
                exact_matches += 1
                total_similarity += 1.0

            else:
                similarity = difflib.SequenceMatcher(None, exp_stripped, act_stripped, autojunk=False).ratio()
                total_similarity += similarity

        # Weight exact line matches more heavily than character similarity
        exact_match_ratio = exact_matches / len(expected)
        avg_similarity = total_similarity / len(expected)

        return (exact_match_ratio * 0.6) + (avg_similarity * 0.4)
