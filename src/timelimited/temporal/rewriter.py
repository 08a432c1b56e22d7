#!/usr/bin/env python3
"""
Turn a block tree into edits.

Rules, applied top-down:

1. ACTIVE blocks stay as they are; their children are processed.
2. EXPIRED blocks without unwrap-block are deleted together with everything
   nested in them. When the markers sit on their own lines, the whole lines go.
3. EXPIRED blocks with unwrap-block lose their marker lines and the first and
   last body line (the "shell"); the lines in between are kept, dedented by one
   shell level. If the block does not have that shape it is left untouched and
   an UnwrapIneligible diagnostic explains why; its children are still
   processed.
"""

import logging
from datetime import datetime
from typing import List, NamedTuple, Optional

from timelimited.temporal.assembler import apply_edits
from timelimited.temporal.expiry import classify
from timelimited.temporal.models import Block, Classification, Diagnostic, DiagnosticKind, Edit
from timelimited.util.text_utils import (
    after_line_break,
    dedent_line,
    indent_width,
    is_blank,
    line_end,
    line_start,
    split_lines,
)

logger = logging.getLogger(__name__)


class UnwrapRefused(Exception):
    """Raised internally when an unwrap-block cannot be unwrapped safely."""


class UnwrapShell(NamedTuple):
    """Where an eligible unwrap-block's pieces are, measured on the original text."""

    replace_start: int
    replace_end: int
    kept_start: int
    kept_end: int
    dedent: int
    trailing_line_break: bool


class Rewriter:
    """
    Compute the edits for one document.

    A Rewriter is bound to one text and one reference instant; create a new one
    per document.
    """

    def __init__(self, text: str, reference_instant: datetime):
        self.text = text
        self.reference_instant = reference_instant
        self.diagnostics: List[Diagnostic] = []
        self.stripped = 0
        self.unwrapped = 0
        self.ineligible = 0

    def rewrite(self, blocks: List[Block], region_start: int = 0, region_end: Optional[int] = None) -> List[Edit]:
        """Return the edits for blocks, which must all lie inside text[region_start:region_end]."""
        if region_end is None:
            region_end = len(self.text)

        edits: List[Edit] = []
        for block in blocks:
            edits.extend(self._rewrite_block(block, region_start, region_end))
        return edits

    def _rewrite_block(self, block: Block, region_start: int, region_end: int) -> List[Edit]:
        start_tag = block.start_tag
        inner_start, inner_end = block.inner_span

        if block.attributes is None:
            logger.debug(f"Line {start_tag.line}: unreadable attributes, leaving block as is")
            return self.rewrite(list(block.children), inner_start, inner_end)

        if classify(block, self.reference_instant) is Classification.ACTIVE:
            logger.debug(f"Line {start_tag.line}: block still active (to {block.attributes.expiry})")
            return self.rewrite(list(block.children), inner_start, inner_end)

        if not block.attributes.unwrap:
            self.stripped += 1
            logger.debug(f"Line {start_tag.line}: removing expired block (to {block.attributes.expiry})")
            return [self._strip_edit(block, region_start, region_end)]

        try:
            shell = self._unwrap_shell(block)
        except UnwrapRefused as exc:
            self.ineligible += 1
            reason = str(exc)
            logger.debug(f"Line {start_tag.line}: expired unwrap-block left as is: {reason}")
            self.diagnostics.append(Diagnostic(
                DiagnosticKind.UNWRAP_INELIGIBLE,
                f"expired unwrap-block left untouched: {reason}",
                start_tag.line,
                start_tag.column,
            ))
            return self.rewrite(list(block.children), inner_start, inner_end)

        self.unwrapped += 1
        logger.debug(f"Line {start_tag.line}: unwrapping expired block (to {block.attributes.expiry})")
        return [self._unwrap_edit(block, shell)]

    def _strip_edit(self, block: Block, region_start: int, region_end: int) -> Edit:
        text = self.text
        start, end = block.outer_span

        first_line = line_start(text, start)
        last_line_end = after_line_break(text, end)
        if first_line < region_start or last_line_end > region_end:
            return Edit(start, end)
        if not is_blank(text[first_line:start]) or not is_blank(text[end:last_line_end]):
            return Edit(start, end)

        # Markers on their own lines: remove the lines
        start, end = first_line, last_line_end
        if 0 < start and end < region_end:
            # Avoid leaving two blank lines where the block was
            previous_line = text[line_start(text, start - 1):start]
            following_end = after_line_break(text, end)
            if following_end <= region_end and is_blank(previous_line) and is_blank(text[end:following_end]):
                end = following_end
        return Edit(start, end)

    def _unwrap_shell(self, block: Block) -> UnwrapShell:
        """
        Check that block can be unwrapped and locate its pieces.

        Raises:
            UnwrapRefused: With the reason, on the first failed check
        """
        text = self.text
        start_tag, end_tag = block.start_tag, block.end_tag

        start_line_begin = line_start(text, start_tag.offset)
        start_line_end = line_end(text, start_tag.end)
        end_line_begin = line_start(text, end_tag.offset)
        end_line_end = line_end(text, end_tag.end)

        if start_line_end == len(text) or not is_blank(text[start_tag.end:start_line_end]):
            raise UnwrapRefused("start tag is not followed by a line break")
        if not is_blank(text[end_line_begin:end_tag.offset]):
            raise UnwrapRefused("end tag is not preceded by a line break")
        if not is_blank(text[start_line_begin:start_tag.offset]):
            raise UnwrapRefused("start tag shares its line with other text")
        if not is_blank(text[end_tag.end:end_line_end]):
            raise UnwrapRefused("end tag shares its line with other text")

        body_start = start_line_end + 1
        body_lines = split_lines(text[body_start:end_line_begin])
        if all(is_blank(line) for line in body_lines):
            raise UnwrapRefused("block body is empty")
        if is_blank(body_lines[0]):
            raise UnwrapRefused("opening line of the block body is blank")
        if is_blank(body_lines[-1]):
            raise UnwrapRefused("closing line of the block body is blank")

        if indent_width(text[start_line_begin:start_tag.offset]) > indent_width(body_lines[0]):
            raise UnwrapRefused("start tag is indented deeper than the block body")

        if len(body_lines) < 3:
            raise UnwrapRefused("block body needs an opening line, at least one inner line and a closing line")

        kept_start = body_start + len(body_lines[0])
        kept_end = end_line_begin - len(body_lines[-1])
        for child in block.children:
            child_start, child_end = child.outer_span
            if child_start < kept_start or child_end > kept_end:
                raise UnwrapRefused(f"nested marker at line {child.start_tag.line} overlaps the opening or closing line")

        kept_lines = body_lines[1:-1]
        inner = next((line for line in kept_lines if not is_blank(line)), None)
        dedent = 0
        if inner is not None:
            dedent = max(0, indent_width(inner) - indent_width(body_lines[0]))

        replace_end = after_line_break(text, end_tag.end)
        return UnwrapShell(
            replace_start=start_line_begin,
            replace_end=replace_end,
            kept_start=kept_start,
            kept_end=kept_end,
            dedent=dedent,
            trailing_line_break=text[replace_end - 1:replace_end] == '\n',
        )

    def _unwrap_edit(self, block: Block, shell: UnwrapShell) -> Edit:
        # Nested blocks are rewritten first; the dedent was measured before that
        child_edits = self.rewrite(list(block.children), shell.kept_start, shell.kept_end)
        kept = apply_edits(self.text, child_edits, shell.kept_start, shell.kept_end)
        replacement = ''.join(dedent_line(line, shell.dedent) for line in split_lines(kept))
        if not shell.trailing_line_break and replacement.endswith('\n'):
            replacement = replacement[:-1]
        return Edit(shell.replace_start, shell.replace_end, replacement)
