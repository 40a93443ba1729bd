"""Applies string replacements to documents using a cascade of match strategies."""

import logging
from typing import Any, Callable, Dict, List, Tuple

from text_edit.text_edit_config import TextEditConfig
from text_edit.text_edit_document import TextDocument
from text_edit.text_edit_exceptions import (
    ContentFormatError,
    EditError,
    MultipleMatchesError,
    NoChangeError,
    NoMatchError,
)
from text_edit.text_edit_matcher import (
    ExactMatchStrategy,
    FuzzyMatchStrategy,
    MatchStrategy,
    WhitespaceFlexibleMatchStrategy,
)
from text_edit.text_edit_minimizer import EditMinimizer
from text_edit.text_edit_patch import build_patch
from text_edit.text_edit_similarity import SimilarityMatchStrategy
from text_edit.text_edit_types import MatchCandidate, MatchKind, Needle, PatchResult, TextEdit


class TextEditApplier:
    """
    Replaces one occurrence of an old string with a new string.

    Match strategies are tried in order, from exact to most permissive, until
    one of them finds the old string.  A strategy that finds it more than once
    stops the cascade: ambiguity is never resolved by trying a laxer strategy.
    The accepted match is then minimized and spliced into the original text so
    that everything outside the edit, line endings included, is unchanged.
    """

    _MULTIPLE_MATCH_SUGGESTIONS = {
        MatchKind.EXACT: 'Multiple exact matches found. Make your search string more specific.',
        MatchKind.FUZZY: 'Multiple fuzzy matches found. Try including more context in your search string.',
        MatchKind.WHITESPACE: 'Multiple matches found with flexible whitespace. Make your search string more unique.',
        MatchKind.SIMILARITY: 'Multiple equally similar matches found. Include more surrounding lines in your search string.',
    }

    def __init__(self, config: TextEditConfig | None = None):
        """
        Initialize the applier.

        Args:
            config: Matching limits; defaults are used when not given
        """
        self._config = config if config is not None else TextEditConfig()
        self._strategies = self._create_strategies()
        self._minimizer = EditMinimizer()
        self._logger = logging.getLogger("TextEditApplier")

    def config(self) -> TextEditConfig:
        """Get the configuration used by this applier."""
        return self._config

    def strategies(self) -> List[MatchStrategy]:
        """Get the match strategies in the order they are tried."""
        return list(self._strategies)

    def _create_strategies(self) -> List[MatchStrategy]:
        """
        Create the match strategies, in the order they are tried.

        Returns:
            List of MatchStrategy instances
        """
        return [
            ExactMatchStrategy(),
            FuzzyMatchStrategy(),
            WhitespaceFlexibleMatchStrategy(),
            SimilarityMatchStrategy(
                threshold=self._config.similarity_threshold,
                max_needle_chars=self._config.similarity_max_needle_chars,
                max_needle_lines=self._config.similarity_max_needle_lines,
                max_document_lines=self._config.similarity_max_document_lines
            ),
        ]

    def apply_edit(
        self,
        path: str,
        old_string: str,
        new_string: str,
        current_text: Callable[[], str],
        is_notebook_cell: Callable[[str], bool] | None = None
    ) -> PatchResult:
        """
        Replace the single occurrence of old_string in a document with new_string.

        Args:
            path: Identifier of the document, reported in errors
            old_string: Text to find; empty to create a new document
            new_string: Replacement text
            current_text: Returns the document's current text; may raise FileNotFoundError
            is_notebook_cell: Returns True if path refers to notebook cell content

        Returns:
            PatchResult with the updated text, the applied edits and a patch

        Raises:
            NoMatchError: If old_string cannot be located
            MultipleMatchesError: If old_string matches more than one location
            NoChangeError: If the edit would not change the document
            ContentFormatError: If old_string is empty but the document is not
            EditError: If the document cannot be read
        """
        try:
            original = current_text()

        except FileNotFoundError as e:
            if old_string.strip():
                raise EditError(f"File not found: {path}", 'fileNotFound', path) from e

            self._logger.debug("Document %s does not exist, creating it", path)
            original = ''

        except EditError:
            raise

        except Exception as e:
            raise EditError(f"Failed to edit file: {str(e)}", 'unknownError', path) from e

        # Notebook cell content always uses LF line endings
        eol = '\n' if is_notebook_cell is not None and is_notebook_cell(path) else None
        return self.apply_to_document(path, TextDocument(original, eol), old_string, new_string)

    def apply_to_text(self, path: str, text: str, old_string: str, new_string: str) -> PatchResult:
        """
        Replace the single occurrence of old_string in text with new_string.

        Args:
            path: Identifier of the document, reported in errors
            text: Current document text
            old_string: Text to find
            new_string: Replacement text

        Returns:
            PatchResult
        """
        return self.apply_to_document(path, TextDocument(text), old_string, new_string)

    def apply_to_document(
        self,
        path: str,
        document: TextDocument,
        old_string: str,
        new_string: str
    ) -> PatchResult:
        """
        Replace the single occurrence of old_string in a document with new_string.

        Args:
            path: Identifier of the document, reported in errors
            document: Document to edit
            old_string: Text to find
            new_string: Replacement text

        Returns:
            PatchResult
        """
        old_text = document.normalize_eol(old_string)
        new_text = document.normalize_eol(new_string)

        if not document.text and not old_text.strip():
            return self._create_document(document, new_text)

        if not old_text:
            raise ContentFormatError(
                'File already exists. Please provide a non-empty old_string for replacement.',
                path
            )

        if old_text == new_text:
            raise NoChangeError('The old and new strings are identical. No change to apply.', path)

        needle = Needle(old_text, new_text, document.eol)
        candidate = self.find_match(path, document, needle)

        minimized = self._minimizer.minimize(document, candidate)
        updated = self.apply_edits(path, document, [minimized.edit])
        if updated == document.text:
            raise NoChangeError(
                'Original and edited file match exactly. Failed to apply edit. '
                'Re-read the file and determine the correct edit.',
                path,
                {'strategy': candidate.kind.value, 'line': candidate.start_line + 1}
            )

        if candidate.kind is MatchKind.SIMILARITY:
            self._logger.warning(
                "Used similarity matching with %.1f%% confidence for %s. Verify the result is correct.",
                candidate.confidence * 100,
                path
            )

        self._logger.debug(
            "Applied %s match to %s at line %d (%d identical leading, %d identical trailing lines)",
            candidate.kind.value,
            path,
            candidate.start_line + 1,
            minimized.identical.leading,
            minimized.identical.trailing
        )

        return PatchResult(
            updated_file=updated,
            edits=[minimized.edit],
            patch=build_patch(document.text, updated, document.eol, self._config.patch_context_lines),
            match_kind=candidate.kind,
            confidence=candidate.confidence
        )

    def find_match(self, path: str, document: TextDocument, needle: Needle) -> MatchCandidate:
        """
        Run the strategy cascade and return the single accepted match.

        Args:
            path: Identifier of the document, reported in errors
            document: Document to search
            needle: Old/new strings, normalized to the document's line ending

        Returns:
            The accepted MatchCandidate

        Raises:
            MultipleMatchesError: If a strategy finds more than one candidate
            NoMatchError: If no strategy finds a candidate
        """
        for strategy in self._strategies:
            candidates = strategy.find_candidates(document, needle)
            if not candidates:
                self._logger.debug("No %s match in %s", strategy.kind.value, path)
                continue

            if len(candidates) > 1:
                suggestion = self._MULTIPLE_MATCH_SUGGESTIONS[strategy.kind]
                raise MultipleMatchesError(
                    f'Multiple matches found for the text to replace. {suggestion}',
                    path,
                    {
                        'strategy': strategy.kind.value,
                        'match_lines': [candidate.start_line + 1 for candidate in candidates],
                        'suggestion': suggestion
                    }
                )

            return candidates[0]

        suggestion = 'Try making your search string more specific or checking for whitespace/formatting differences.'
        raise NoMatchError(
            f'Could not find matching text to replace. {suggestion}',
            path,
            self._no_match_details(document, needle, suggestion)
        )

    def _no_match_details(self, document: TextDocument, needle: Needle, suggestion: str) -> Dict[str, Any]:
        """
        Build error details for a failed match, including the closest window found.

        Args:
            document: Document that was searched
            needle: Needle that could not be found
            suggestion: Hint for the caller

        Returns:
            Dictionary of error details
        """
        details: Dict[str, Any] = {
            'strategies': [strategy.kind.value for strategy in self._strategies],
            'suggestion': suggestion
        }

        for strategy in self._strategies:
            if not isinstance(strategy, SimilarityMatchStrategy):
                continue

            best = strategy.best_match(document, needle)
            if best is not None:
                details['best_match'] = {
                    'line': best[0] + 1,
                    'confidence': round(best[1], 2),
                    'threshold': strategy.threshold()
                }

        return details

    def apply_edits(self, path: str, document: TextDocument, edits: List[TextEdit]) -> str:
        """
        Splice edits into the document's original text.

        Edits are applied from the bottom of the document upwards so earlier
        offsets stay valid.  Text outside the edits is returned unchanged.

        Args:
            path: Identifier of the document, reported in errors
            document: Document the edits refer to
            edits: Edits to apply

        Returns:
            Updated text

        Raises:
            EditError: If edits overlap or have an end before their start
        """
        located: List[Tuple[int, int, TextEdit]] = []
        for edit in edits:
            start = document.offset_at(edit.start_line, edit.start_column)
            end = document.offset_at(edit.end_line, edit.end_column)
            if end < start:
                raise EditError(
                    f'Edit ends before it starts: {edit}',
                    'invalidEdit',
                    path
                )

            located.append((start, end, edit))

        located.sort(key=lambda item: item[0], reverse=True)
        self._check_for_overlaps(path, located)

        text = document.text
        for start, end, edit in located:
            text = text[:start] + edit.new_text + text[end:]

        return text

    def _check_for_overlaps(self, path: str, located: List[Tuple[int, int, TextEdit]]) -> None:
        """
        Check that no two edits touch the same text.

        Args:
            path: Identifier of the document, reported in errors
            located: List of (start, end, edit) tuples, sorted by start offset, highest first

        Raises:
            EditError: If overlaps found
        """
        for i in range(len(located) - 1):
            later_start, _, later_edit = located[i]
            _, earlier_end, earlier_edit = located[i + 1]

            if earlier_end > later_start:
                raise EditError(
                    'Edits would overlap when applied',
                    'overlappingEdits',
                    path,
                    {
                        'edit1_range': [earlier_edit.start_line, earlier_edit.end_line],
                        'edit2_range': [later_edit.start_line, later_edit.end_line],
                    }
                )

    def _create_document(self, document: TextDocument, new_text: str) -> PatchResult:
        """
        Build the result of creating a document from scratch.

        Args:
            document: The (empty) document
            new_text: Content of the new document

        Returns:
            PatchResult
        """
        edits = [TextEdit(0, 0, 0, 0, new_text)] if new_text else []
        return PatchResult(
            updated_file=new_text,
            edits=edits,
            patch=build_patch('', new_text, document.eol, self._config.patch_context_lines),
            match_kind=None,
            confidence=1.0
        )
