"""Unified diff hunks describing an applied edit."""

import difflib
from typing import List

from text_edit.text_edit_types import PatchHunk, PatchLine


def _split_lines(text: str, eol: str) -> List[str]:
    """Split text into lines, treating an empty text as having no lines."""
    if not text:
        return []

    return text.split(eol)


def build_patch(original: str, updated: str, eol: str, context_lines: int = 3) -> List[PatchHunk]:
    """
    Build unified diff hunks that turn the original text into the updated text.

    Args:
        original: Text before the edit
        updated: Text after the edit
        eol: Line ending used to split both texts
        context_lines: Number of unchanged lines to keep around each change

    Returns:
        List of hunks, empty if the texts are identical
    """
    old_lines = _split_lines(original, eol)
    new_lines = _split_lines(updated, eol)

    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    hunks: List[PatchHunk] = []

    for group in matcher.get_grouped_opcodes(context_lines):
        first, last = group[0], group[-1]
        old_start, old_end = first[1], last[2]
        new_start, new_end = first[3], last[4]

        lines: List[PatchLine] = []
        for tag, i1, i2, j1, j2 in group:
            if tag == 'equal':
                lines.extend(PatchLine(' ', line) for line in old_lines[i1:i2])
                continue

            if tag in ('replace', 'delete'):
                lines.extend(PatchLine('-', line) for line in old_lines[i1:i2])

            if tag in ('replace', 'insert'):
                lines.extend(PatchLine('+', line) for line in new_lines[j1:j2])

        old_count = old_end - old_start
        new_count = new_end - new_start

        # Unified diff numbers an empty range by the line before it
        hunks.append(PatchHunk(
            old_start=old_start + 1 if old_count else old_start,
            old_count=old_count,
            new_start=new_start + 1 if new_count else new_start,
            new_count=new_count,
            lines=lines
        ))

    return hunks


def format_patch(hunks: List[PatchHunk], path: str) -> str:
    """
    Render hunks as unified diff text.

    Args:
        hunks: Hunks from build_patch()
        path: Path shown in the file headers

    Returns:
        Unified diff text, empty if there are no hunks
    """
    if not hunks:
        return ''

    output = [f'--- {path}', f'+++ {path}']
    for hunk in hunks:
        output.append(f'@@ -{hunk.old_start},{hunk.old_count} +{hunk.new_start},{hunk.new_count} @@')
        output.extend(f'{line.type}{line.content}' for line in hunk.lines)

    return '\n'.join(output) + '\n'
