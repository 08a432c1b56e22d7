#!/usr/bin/env python3
"""
Line and indentation helpers.

Only '\\n' counts as a line break; a trailing '\\r' stays part of its line so
CRLF input is reproduced byte-for-byte.
"""

from bisect import bisect_right
from typing import List, Tuple

# Characters that make up indentation
INDENT_CHARS = ' \t'


def line_starts(text: str) -> List[int]:
    """Return the offset of the first character of every line."""
    starts = [0]
    pos = text.find('\n')
    while pos != -1:
        starts.append(pos + 1)
        pos = text.find('\n', pos + 1)
    return starts


def line_and_column(starts: List[int], offset: int) -> Tuple[int, int]:
    """Map an offset to a (1-based line, 0-based column) pair using line_starts() output."""
    index = bisect_right(starts, offset) - 1
    return index + 1, offset - starts[index]


def line_start(text: str, offset: int) -> int:
    """Offset of the start of the line containing offset."""
    return text.rfind('\n', 0, offset) + 1


def line_end(text: str, offset: int) -> int:
    """Offset of the '\\n' ending the line containing offset, or len(text) on the last line."""
    pos = text.find('\n', offset)
    return len(text) if pos == -1 else pos


def after_line_break(text: str, offset: int) -> int:
    """Offset just past the line break ending the line containing offset."""
    end = line_end(text, offset)
    return end if end == len(text) else end + 1


def is_blank(segment: str) -> bool:
    return not segment.strip()


def split_lines(text: str) -> List[str]:
    """Split text into lines, keeping each line's '\\n'."""
    parts = text.split('\n')
    lines = [part + '\n' for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def indent_width(line: str) -> int:
    """Number of leading spaces and tabs."""
    return len(line) - len(line.lstrip(INDENT_CHARS))


def dedent_line(line: str, width: int) -> str:
    """Remove at most width leading indentation characters from line."""
    return line[min(width, indent_width(line)):]
