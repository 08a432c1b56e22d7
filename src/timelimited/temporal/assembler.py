"""Splice edits back into the original text."""

from typing import Iterable, Optional

from timelimited.temporal.models import Edit


def apply_edits(text: str, edits: Iterable[Edit], start: int = 0, end: Optional[int] = None) -> str:
    """
    Apply non-overlapping edits to text[start:end] in one left-to-right pass.

    Text outside the edited spans is copied unchanged.

    Raises:
        ValueError: If edits overlap, are out of order or fall outside the region
    """
    if end is None:
        end = len(text)

    parts = []
    cursor = start
    for edit in edits:
        if edit.start < cursor or edit.end < edit.start or edit.end > end:
            raise ValueError(f"edit {edit.start}:{edit.end} overlaps or lies outside {cursor}:{end}")
        parts.append(text[cursor:edit.start])
        parts.append(edit.replacement)
        cursor = edit.end
    parts.append(text[cursor:end])
    return ''.join(parts)
