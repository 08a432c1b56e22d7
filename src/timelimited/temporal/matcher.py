#!/usr/bin/env python3
"""
Pair start and end tags into a tree of blocks.

Every end tag closes the most recently opened start tag. A stray end tag or a
start tag left open at the end of the document raises UnbalancedTagsError;
callers must then leave the document alone, since block boundaries are
ambiguous.
"""

from typing import List, Optional, Tuple

from timelimited.temporal.attributes import parse_attributes
from timelimited.temporal.errors import TagAttributeError, UnbalancedTagsError
from timelimited.temporal.models import Block, Tag, TagKind


def _build_block(start_tag: Tag, end_tag: Tag, children: List[Block], time_offset: Optional[str]) -> Block:
    try:
        attributes = parse_attributes(start_tag.raw_attributes or '', time_offset)
    except TagAttributeError as exc:
        return Block(start_tag, end_tag, attribute_error=exc.message, children=tuple(children))
    return Block(start_tag, end_tag, attributes=attributes, children=tuple(children))


def match_blocks(tags: List[Tag], time_offset: Optional[str] = None) -> List[Block]:
    """
    Build the block tree from a scanned tag list.

    Args:
        tags: Tags in document order, as returned by scan_tags()
        time_offset: UTC offset used when parsing to="..." timestamps

    Returns:
        List[Block]: Top-level blocks in document order

    Raises:
        UnbalancedTagsError: If the tags are not properly nested
    """
    stack: List[Tuple[Tag, List[Block]]] = []
    roots: List[Block] = []

    for tag in tags:
        if tag.kind is TagKind.START:
            stack.append((tag, []))
            continue

        if not stack:
            raise UnbalancedTagsError("end tag has no matching start tag", tag.line, tag.column)

        start_tag, children = stack.pop()
        block = _build_block(start_tag, tag, children, time_offset)
        if stack:
            stack[-1][1].append(block)
        else:
            roots.append(block)

    if stack:
        start_tag = stack[-1][0]
        raise UnbalancedTagsError(
            f"start tag is never closed ({len(stack)} unclosed start tag(s))",
            start_tag.line,
            start_tag.column,
        )

    return roots


def iter_blocks(blocks: List[Block]):
    """Yield every block in the tree, parents before children."""
    for block in blocks:
        yield block
        yield from iter_blocks(list(block.children))
