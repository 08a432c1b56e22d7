#!/usr/bin/env python3
"""
Tests for the rewriter's unwrap eligibility checks and bookkeeping.
"""

import pytest
from timelimited.temporal.apply_time_limits import parse_document
from timelimited.temporal.assembler import apply_edits
from timelimited.temporal.models import DiagnosticKind
from timelimited.temporal.rewriter import Rewriter

EXPIRED = '/* < time-limited to="2020-12-31 23:59:59" > */'
EXPIRED_UNWRAP = '/* < time-limited to="2020-12-31 23:59:59" unwrap-block > */'
ACTIVE = '/* < time-limited to="2099-12-31 23:59:59" > */'
END = '/* < /time-limited > */'


def lines(*parts):
    return "\n".join(parts) + "\n"


def rewrite(text, reference_instant):
    rewriter = Rewriter(text, reference_instant)
    edits = rewriter.rewrite(parse_document(text))
    return rewriter, apply_edits(text, edits)


# ===========================================================================
# Unwrap eligibility
# ===========================================================================

@pytest.mark.unit
class TestUnwrapEligibility:
    """Test that badly shaped unwrap-blocks are left untouched with a reason."""

    @pytest.mark.parametrize("text, reason", [
        (
            lines(EXPIRED_UNWRAP + " enable();", END),
            "start tag is not followed by a line break",
        ),
        (
            lines(EXPIRED_UNWRAP, "if (x) {", "  y();", "} " + END),
            "end tag is not preceded by a line break",
        ),
        (
            lines("x(); " + EXPIRED_UNWRAP, "if (x) {", "  y();", "}", END),
            "start tag shares its line with other text",
        ),
        (
            lines(EXPIRED_UNWRAP, "if (x) {", "  y();", "}", END + " z();"),
            "end tag shares its line with other text",
        ),
        (
            lines(EXPIRED_UNWRAP, END),
            "block body is empty",
        ),
        (
            lines(EXPIRED_UNWRAP, "", "   ", END),
            "block body is empty",
        ),
        (
            lines(EXPIRED_UNWRAP, "", "if (x) {", "  a();", "}", END),
            "opening line of the block body is blank",
        ),
        (
            lines(EXPIRED_UNWRAP, "if (x) {", "  a();", "}", "", END),
            "closing line of the block body is blank",
        ),
        (
            lines("        " + EXPIRED_UNWRAP, "  if (isReleased) {", "    run();", "  }", "        " + END),
            "start tag is indented deeper than the block body",
        ),
        (
            lines(EXPIRED_UNWRAP, "run();", END),
            "needs an opening line, at least one inner line and a closing line",
        ),
        (
            lines(EXPIRED_UNWRAP, "if (x) {", "}", END),
            "needs an opening line, at least one inner line and a closing line",
        ),
        (
            lines(EXPIRED_UNWRAP, ACTIVE, "if (x) {", "  y();", "}", END, END),
            "nested marker at line 2 overlaps the opening or closing line",
        ),
    ])
    def test_ineligible_block_is_untouched(self, text, reason, reference_instant):
        rewriter, result = rewrite(text, reference_instant)

        assert result == text
        assert rewriter.ineligible == 1
        assert rewriter.unwrapped == 0
        assert len(rewriter.diagnostics) == 1
        diagnostic = rewriter.diagnostics[0]
        assert diagnostic.kind is DiagnosticKind.UNWRAP_INELIGIBLE
        assert reason in diagnostic.message
        assert diagnostic.message.startswith("expired unwrap-block left untouched")

    def test_tab_indentation(self, reference_instant):
        text = lines("\t" + EXPIRED_UNWRAP, "\tif (x) {", "\t\ty();", "\t}", "\t" + END)

        rewriter, result = rewrite(text, reference_instant)

        assert result == "\ty();\n"
        assert rewriter.diagnostics == []


# ===========================================================================
# Counters
# ===========================================================================

@pytest.mark.unit
class TestRewriterCounters:
    """Test the stripped/unwrapped/ineligible counters."""

    def test_counts(self, reference_instant):
        text = lines(
            EXPIRED, "a();", END,
            EXPIRED_UNWRAP, "if (x) {", "  b();", "}", END,
            EXPIRED_UNWRAP + " c();", END,
            ACTIVE, "d();", END,
        )

        rewriter, result = rewrite(text, reference_instant)

        assert (rewriter.stripped, rewriter.unwrapped, rewriter.ineligible) == (1, 1, 1)
        assert result == lines("b();", EXPIRED_UNWRAP + " c();", END, ACTIVE, "d();", END)

    def test_children_of_removed_block_are_not_counted(self, reference_instant):
        text = lines(EXPIRED, EXPIRED, "a();", END, END)

        rewriter, result = rewrite(text, reference_instant)

        assert rewriter.stripped == 1
        assert result == ""

    def test_rewrite_without_blocks(self, reference_instant):
        rewriter = Rewriter("plain text\n", reference_instant)

        assert rewriter.rewrite([]) == []
