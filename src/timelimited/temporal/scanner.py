#!/usr/bin/env python3
"""
Find time-limited marker comments in source text.

A marker is a comment whose whole body is a tag:

    /* < time-limited to="2024-12-31 23:59:59" unwrap-block > */
    /* < /time-limited > */

Text that looks like a tag but sits outside a comment (for example inside a
string literal) is not a marker.
"""

import re
from typing import Iterator, List, Tuple

from timelimited.config import DEFAULT_DELIMITER_END, DEFAULT_DELIMITER_START, DEFAULT_TAG_NAME
from timelimited.temporal.models import Tag, TagKind
from timelimited.util.text_utils import line_and_column, line_starts


def _tag_patterns(tag_name: str) -> Tuple[re.Pattern, re.Pattern]:
    name = re.escape(tag_name)
    # Quoted values may contain '>' and line breaks
    start = re.compile(
        r'\s*<\s*' + name + r'(?P<attrs>(?:\s(?:[^>"\']|"[^"]*"|\'[^\']*\')*)?)>\s*',
        re.DOTALL,
    )
    end = re.compile(r'\s*<\s*/\s*' + name + r'\s*>\s*')
    return start, end


def iter_comments(text: str, delimiter_start: str, delimiter_end: str) -> Iterator[Tuple[int, int, str]]:
    """
    Yield (offset, end, body) for every comment in text.

    A comment runs from delimiter_start to the first delimiter_end after it.
    An unterminated comment ends the scan.
    """
    if not delimiter_start or not delimiter_end:
        raise ValueError("comment delimiters must not be empty")

    pos = 0
    while True:
        open_at = text.find(delimiter_start, pos)
        if open_at == -1:
            return
        body_start = open_at + len(delimiter_start)
        close_at = text.find(delimiter_end, body_start)
        if close_at == -1:
            return
        end = close_at + len(delimiter_end)
        yield open_at, end, text[body_start:close_at]
        pos = end


def scan_tags(
    text: str,
    delimiter_start: str = DEFAULT_DELIMITER_START,
    delimiter_end: str = DEFAULT_DELIMITER_END,
    tag_name: str = DEFAULT_TAG_NAME,
) -> List[Tag]:
    """
    Return the start and end tags in text, in document order.

    Args:
        text: Source text to scan
        delimiter_start: Opening comment delimiter
        delimiter_end: Closing comment delimiter
        tag_name: Name of the marker tag

    Returns:
        List[Tag]: Tags with their comment span, position and raw attribute text
    """
    start_pattern, end_pattern = _tag_patterns(tag_name)
    starts = None
    tags = []

    for offset, end, body in iter_comments(text, delimiter_start, delimiter_end):
        start_match = start_pattern.fullmatch(body)
        if start_match:
            kind, raw_attributes = TagKind.START, start_match.group('attrs')
        elif end_pattern.fullmatch(body):
            kind, raw_attributes = TagKind.END, None
        else:
            continue

        if starts is None:
            starts = line_starts(text)
        line, column = line_and_column(starts, offset)
        tags.append(Tag(kind, offset, end, line, column, raw_attributes))

    return tags
