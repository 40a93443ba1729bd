"""
Single-occurrence string replacement with tolerant matching.

This package finds one occurrence of an old string in a document, even when
whitespace or small details differ, replaces it with a new string, and
reports the smallest equivalent edit plus a unified diff of the change.
"""

from text_edit.text_edit_applier import TextEditApplier
from text_edit.text_edit_config import TextEditConfig
from text_edit.text_edit_document import TextDocument
from text_edit.text_edit_exceptions import (
    ContentFormatError,
    EditError,
    MultipleMatchesError,
    NoChangeError,
    NoMatchError,
    UnsafePathError,
)
from text_edit.text_edit_filesystem import FilesystemTextEditApplier
from text_edit.text_edit_matcher import (
    ExactMatchStrategy,
    FuzzyMatchStrategy,
    MatchStrategy,
    WhitespaceFlexibleMatchStrategy,
)
from text_edit.text_edit_minimizer import EditMinimizer
from text_edit.text_edit_patch import build_patch, format_patch
from text_edit.text_edit_path_safety import assert_path_is_safe
from text_edit.text_edit_similarity import SimilarityMatchStrategy
from text_edit.text_edit_types import (
    MatchCandidate,
    MatchKind,
    Needle,
    PatchHunk,
    PatchLine,
    PatchResult,
    TextEdit,
)

__all__ = [
    # Exceptions
    'EditError',
    'NoMatchError',
    'MultipleMatchesError',
    'NoChangeError',
    'ContentFormatError',
    'UnsafePathError',
    # Types
    'MatchKind',
    'Needle',
    'MatchCandidate',
    'TextEdit',
    'PatchLine',
    'PatchHunk',
    'PatchResult',
    # Core classes
    'TextDocument',
    'TextEditConfig',
    'MatchStrategy',
    'ExactMatchStrategy',
    'FuzzyMatchStrategy',
    'WhitespaceFlexibleMatchStrategy',
    'SimilarityMatchStrategy',
    'EditMinimizer',
    'TextEditApplier',
    'FilesystemTextEditApplier',
    # Functions
    'assert_path_is_safe',
    'build_patch',
    'format_patch',
]
