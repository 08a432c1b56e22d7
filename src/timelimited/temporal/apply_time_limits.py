#!/usr/bin/env python3
"""
Apply time limits to annotated source text.

Blocks of code bracketed by time-limited markers are removed, or unwrapped
(unwrap-block), once their expiry has passed relative to a reference instant.

Rules:
1. Blocks whose to="..." second has fully passed are expired; all others are active
2. Expired blocks are removed together with everything nested in them
3. Expired unwrap-block blocks keep their body minus its first and last line,
   dedented one level, when their layout allows it; otherwise they are left as is
4. Active blocks are kept, but expired blocks nested inside them are processed
5. Unbalanced markers leave the whole document unchanged
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from timelimited.config import MarkerConfig
from timelimited.temporal.assembler import apply_edits
from timelimited.temporal.errors import UnbalancedTagsError
from timelimited.temporal.matcher import iter_blocks, match_blocks
from timelimited.temporal.models import Block, Diagnostic, DiagnosticKind, TransformResult
from timelimited.temporal.rewriter import Rewriter
from timelimited.temporal.scanner import scan_tags
from timelimited.util.file_utils import read_file_content, save_to_disk

logger = logging.getLogger(__name__)


def parse_document(source_text: str, config: Optional[MarkerConfig] = None) -> List[Block]:
    """
    Scan and match the markers in source_text.

    Returns:
        List[Block]: Top-level blocks

    Raises:
        UnbalancedTagsError: If start and end tags do not pair up
    """
    config = config or MarkerConfig()
    tags = scan_tags(source_text, config.delimiter_start, config.delimiter_end, config.tag_name)
    return match_blocks(tags, config.time_offset)


def attribute_diagnostics(blocks: List[Block]) -> List[Diagnostic]:
    return [
        Diagnostic(
            DiagnosticKind.ATTRIBUTE_ERROR,
            block.attribute_error,
            block.start_tag.line,
            block.start_tag.column,
        )
        for block in iter_blocks(blocks)
        if block.attribute_error is not None
    ]


def apply_time_limits(
    source_text: str,
    reference_instant: datetime,
    config: Optional[MarkerConfig] = None,
) -> TransformResult:
    """
    Remove or unwrap expired time-limited blocks.

    Args:
        source_text: The annotated source text
        reference_instant: Instant to evaluate expiry against; naive means UTC
        config: Marker syntax, defaults to /* < time-limited ... > */ in UTC

    Returns:
        TransformResult: The new text and any diagnostics. On a structural
        error the text is returned unchanged.
    """
    try:
        blocks = parse_document(source_text, config)
    except UnbalancedTagsError as exc:
        logger.debug(f"Unbalanced markers, leaving document unchanged: {exc.message}")
        return TransformResult(
            text=source_text,
            diagnostics=[Diagnostic(DiagnosticKind.STRUCTURAL_ERROR, exc.message, exc.line, exc.column)],
            changed=False,
        )

    rewriter = Rewriter(source_text, reference_instant)
    edits = rewriter.rewrite(blocks)
    text = apply_edits(source_text, edits)

    diagnostics = attribute_diagnostics(blocks) + rewriter.diagnostics
    diagnostics.sort(key=lambda d: (d.line or 0, d.column or 0))

    if edits:
        logger.info(
            f"Removed {rewriter.stripped} and unwrapped {rewriter.unwrapped} expired block(s)"
        )

    return TransformResult(text=text, diagnostics=diagnostics, changed=text != source_text)


def apply_time_limits_to_file(
    file_path: Union[str, Path],
    reference_instant: datetime,
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[MarkerConfig] = None,
    encoding: str = 'utf-8',
    dry_run: bool = False,
) -> TransformResult:
    """
    Apply time limits to a file.

    Args:
        file_path: Path to the file to process
        reference_instant: Instant to evaluate expiry against
        output_path: Where to write the result. If None, the file is rewritten in place
        config: Marker syntax
        encoding: Text encoding of the file
        dry_run: If True, nothing is written

    Returns:
        TransformResult: The result for the file

    Raises:
        FileNotFoundError: If the file does not exist
        IOError: If the file cannot be read or written
    """
    content = read_file_content(file_path, encoding)
    result = apply_time_limits(content, reference_instant, config)

    if dry_run or result.is_fatal:
        return result

    if output_path is not None:
        save_to_disk(output_path, result.text, encoding)
        logger.debug(f"Time limits applied to {file_path} and saved to {output_path}")
    elif result.changed:
        save_to_disk(file_path, result.text, encoding)
        logger.debug(f"Time limits applied to {file_path}")

    return result
