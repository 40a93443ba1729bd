"""Tests for similarity-based matching."""

import pytest

from text_edit.text_edit_similarity import SimilarityMatchStrategy
from text_edit.text_edit_types import MatchKind


class TestCalculateConfidence:
    """Test window scoring."""

    def test_identical_lines(self):
        """Test identical lines score 1.0."""
        assert SimilarityMatchStrategy.calculate_confidence(['a', 'b'], ['a', 'b']) == 1.0

    def test_indentation_ignored(self):
        """Test leading and trailing whitespace does not affect the score."""
        assert SimilarityMatchStrategy.calculate_confidence(['foo()'], ['    foo()  ']) == 1.0

    def test_mismatched_lengths(self):
        """Test windows of different sizes score zero."""
        assert SimilarityMatchStrategy.calculate_confidence(['a'], ['a', 'b']) == 0.0
        assert SimilarityMatchStrategy.calculate_confidence([], []) == 0.0

    def test_exact_lines_weighted(self):
        """Test four identical lines out of five score above the default threshold."""
        score = SimilarityMatchStrategy.calculate_confidence(
            ['Alpha', 'Bravo', 'Xray', 'Delta', 'Echo'],
            ['Alpha', 'Bravo', 'Charlie', 'Delta', 'Echo']
        )

        assert 0.8 < score < 0.85

    def test_single_differing_line_stays_low(self):
        """Test a single inexact line can never reach the default threshold."""
        score = SimilarityMatchStrategy.calculate_confidence(['alpha betx'], ['alpha beta'])

        assert score == pytest.approx(0.36)


class TestFindCandidates:
    """Test candidate selection."""

    def test_best_window_above_threshold(self, helpers):
        """Test the best window becomes the only candidate."""
        document = helpers.document("def greet(name):\n    print('Hello ' + name)\n    return None")
        needle = helpers.needle(document, "def greet(nam):\n    print('Hello ' + name)", 'x')

        candidates = SimilarityMatchStrategy().find_candidates(document, needle)

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.kind == MatchKind.SIMILARITY
        assert candidate.start_line == 0
        assert candidate.end_line == 2
        assert candidate.start_offset == 0
        assert candidate.end_offset == document.line_end(1)
        assert candidate.replacement == 'x'
        assert 0.6 <= candidate.confidence < 1.0

    def test_threshold_rejects_window(self, helpers):
        """Test a window below the threshold is not a candidate."""
        document = helpers.document("def greet(name):\n    print('Hello ' + name)\n    return None")
        needle = helpers.needle(document, "def greet(nam):\n    print('Hello ' + name)", 'x')

        strategy = SimilarityMatchStrategy(threshold=0.9)

        assert strategy.find_candidates(document, needle) == []
        assert strategy.threshold() == 0.9

    def test_ties_are_all_returned(self, helpers):
        """Test equally good windows are all returned."""
        document = helpers.document('start\nvalue = 1\nend\nstart\nvalue = 1\nend')
        needle = helpers.needle(document, 'start\nvalue = 2', 'x')

        candidates = SimilarityMatchStrategy().find_candidates(document, needle)

        assert [c.start_line for c in candidates] == [0, 3]

    def test_trailing_line_break_extends_span(self, helpers):
        """Test old text ending with a line break spans through the window's last line break."""
        document = helpers.document('a\nb\nc\n')
        needle = helpers.needle(document, 'a\nbx\n', 'a\nB\n')

        candidates = SimilarityMatchStrategy().find_candidates(document, needle)

        assert len(candidates) == 1
        assert document.text[candidates[0].start_offset:candidates[0].end_offset] == 'a\nb\n'

    def test_needle_character_limit(self, helpers):
        """Test old text over the character limit is never scored."""
        document = helpers.document('a\nb\nc')
        needle = helpers.needle(document, 'a\nb' + ' ' * 20, 'x')

        strategy = SimilarityMatchStrategy(max_needle_chars=10)

        assert strategy.find_candidates(document, needle) == []
        assert strategy.best_match(document, needle) is None

    def test_needle_line_limit(self, helpers):
        """Test old text over the line limit is never scored."""
        document = helpers.document('a\nb\nc')
        needle = helpers.needle(document, 'a\nb\nd', 'x')

        assert SimilarityMatchStrategy(max_needle_lines=2).find_candidates(document, needle) == []

    def test_needle_line_limit_counts_trailing_line_break(self, helpers):
        """Test 20 lines plus a trailing line break are over the default line limit."""
        document = helpers.document(helpers.join([f'line {i}' for i in range(25)]))
        old_lines = [f'line {i}' for i in range(20)]
        old_lines[5] = 'changed 5'

        at_limit = helpers.needle(document, helpers.join(old_lines), 'x')
        over_limit = helpers.needle(document, helpers.join(old_lines) + '\n', 'x')

        strategy = SimilarityMatchStrategy()

        assert len(strategy.find_candidates(document, at_limit)) == 1
        assert strategy.find_candidates(document, over_limit) == []
        assert strategy.best_match(document, over_limit) is None

    def test_document_line_limit(self, helpers):
        """Test documents over the line limit are never scored."""
        document = helpers.document('a\nb\nc')
        needle = helpers.needle(document, 'a\nbx', 'x')

        assert SimilarityMatchStrategy(max_document_lines=2).find_candidates(document, needle) == []


class TestBestMatch:
    """Test reporting the closest window."""

    def test_best_match_ignores_threshold(self, helpers):
        """Test the best window is reported even below the threshold."""
        document = helpers.document('alpha\nbeta\ngamma')
        needle = helpers.needle(document, 'gamme', 'x')

        best = SimilarityMatchStrategy().best_match(document, needle)

        assert best is not None
        line, score = best
        assert line == 2
        assert 0.0 < score < 0.6

    def test_best_match_needle_longer_than_document(self, helpers):
        """Test no window exists when the old text has more lines than the document."""
        document = helpers.document('one line')
        needle = helpers.needle(document, 'a\nb', 'x')

        assert SimilarityMatchStrategy().best_match(document, needle) is None
