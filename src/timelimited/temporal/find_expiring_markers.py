#!/usr/bin/env python3
"""
List time-limited blocks in a document.

Used to preview what a run would remove (expired blocks only) or to get an
overview of every annotation and when it expires.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from timelimited.config import MarkerConfig
from timelimited.temporal.apply_time_limits import apply_time_limits, attribute_diagnostics, parse_document
from timelimited.temporal.errors import UnbalancedTagsError
from timelimited.temporal.expiry import classify
from timelimited.temporal.models import Block, Classification, Diagnostic, DiagnosticKind
from timelimited.util.datetime_utils import format_timestamp
from timelimited.util.text_utils import line_end

EXCERPT_LENGTH = 60


@dataclass(frozen=True)
class MarkerReport:
    line: int
    column: int
    expiry: Optional[datetime]
    classification: Classification
    mode: str
    comment: Optional[str]
    excerpt: str


def _excerpt(text: str, offset: int) -> str:
    """First non-blank line of the block body, shortened."""
    cursor = offset
    while cursor < len(text):
        end = line_end(text, cursor)
        line = text[cursor:end].strip()
        if line:
            return line if len(line) <= EXCERPT_LENGTH else line[:EXCERPT_LENGTH - 3] + '...'
        cursor = end + 1
    return ''


def _reportable_blocks(blocks: List[Block], reference_instant: datetime) -> Iterator[Tuple[Block, Classification]]:
    """Yield blocks with their classification, skipping those inside an expired strip block."""
    for block in blocks:
        classification = classify(block, reference_instant)
        yield block, classification
        if classification is Classification.EXPIRED and not block.is_unwrap:
            continue
        yield from _reportable_blocks(list(block.children), reference_instant)


def find_expiring_markers(
    source_text: str,
    reference_instant: datetime,
    config: Optional[MarkerConfig] = None,
    include_active: bool = False,
) -> Tuple[List[MarkerReport], List[Diagnostic]]:
    """
    Report the time-limited blocks in source_text.

    Args:
        source_text: The annotated source text
        reference_instant: Instant to evaluate expiry against
        config: Marker syntax
        include_active: If True, active (pending) blocks are reported as well

    Returns:
        Tuple of (reports in document order, diagnostics). Unbalanced markers
        give no reports and a StructuralError diagnostic.
    """
    try:
        blocks = parse_document(source_text, config)
    except UnbalancedTagsError as exc:
        return [], [Diagnostic(DiagnosticKind.STRUCTURAL_ERROR, exc.message, exc.line, exc.column)]

    reports = []
    for block, classification in _reportable_blocks(blocks, reference_instant):
        if classification is Classification.ACTIVE and not include_active:
            continue
        attributes = block.attributes
        reports.append(MarkerReport(
            line=block.start_tag.line,
            column=block.start_tag.column,
            expiry=attributes.expiry if attributes else None,
            classification=classification,
            mode='unwrap' if block.is_unwrap else 'strip',
            comment=attributes.comment if attributes else None,
            excerpt=_excerpt(source_text, block.start_tag.end),
        ))

    # Unwrap eligibility is only known after a rewrite pass
    diagnostics = attribute_diagnostics(blocks) + [
        d for d in apply_time_limits(source_text, reference_instant, config).diagnostics
        if d.kind is DiagnosticKind.UNWRAP_INELIGIBLE
    ]
    diagnostics.sort(key=lambda d: (d.line or 0, d.column or 0))
    return reports, diagnostics


def format_report(reports: List[MarkerReport], source_name: str = '<stdin>') -> str:
    """Render reports as a plain-text table."""
    if not reports:
        return f"{source_name}: no time-limited blocks to report\n"

    lines = [
        f"{source_name}: {len(reports)} time-limited block(s)",
        f"{'Line':<8} {'Status':<8} {'Mode':<7} {'Expires':<24} {'Content'}",
        "-" * 100,
    ]
    for report in reports:
        expiry = format_timestamp(report.expiry) if report.expiry else 'invalid'
        lines.append(
            f"{report.line:<8} {report.classification.value:<8} {report.mode:<7} {expiry:<24} {report.excerpt}"
        )
        if report.comment:
            lines.append(f"{'':<8} # {report.comment}")
    return '\n'.join(lines) + '\n'
