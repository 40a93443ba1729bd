"""
Text Replace Tool - Single-occurrence string replacement for files.

This package provides a command-line front end for the text_edit engine,
suitable for applying LLM-generated edits that may not match the file exactly.
"""

from .replacer import TextReplacer

__version__ = "1.0.0"

__all__ = [
    "TextReplacer",
]
