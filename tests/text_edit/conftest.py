"""Shared fixtures and utilities for text edit tests."""

import pytest
from typing import List

from text_edit.text_edit_applier import TextEditApplier
from text_edit.text_edit_config import TextEditConfig
from text_edit.text_edit_document import TextDocument
from text_edit.text_edit_types import Needle


@pytest.fixture
def applier():
    """Create a text edit applier with default configuration."""
    return TextEditApplier()


@pytest.fixture
def applier_custom():
    """Factory for text edit appliers with custom configuration."""
    def _create_applier(**kwargs):
        return TextEditApplier(TextEditConfig(**kwargs))
    return _create_applier


class TextEditTestHelpers:
    """Helper utilities for text edit testing."""

    @staticmethod
    def document(text: str) -> TextDocument:
        """Create a document, detecting its line ending."""
        return TextDocument(text)

    @staticmethod
    def needle(document: TextDocument, old: str, new: str) -> Needle:
        """Create a needle normalized to the document's line ending."""
        return Needle(document.normalize_eol(old), document.normalize_eol(new), document.eol)

    @staticmethod
    def join(lines: List[str], eol: str = '\n') -> str:
        """Join lines into document text."""
        return eol.join(lines)


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return TextEditTestHelpers
