#!/usr/bin/env python3
"""
Tests for pairing tags into a block tree.
"""

import pytest
from timelimited.temporal.errors import UnbalancedTagsError
from timelimited.temporal.matcher import iter_blocks, match_blocks
from timelimited.temporal.scanner import scan_tags

START = '/* < time-limited to="{}" > */'
END = '/* < /time-limited > */'


def _blocks(text, time_offset=None):
    return match_blocks(scan_tags(text), time_offset)


@pytest.mark.unit
class TestMatchBlocks:
    """Test building the block tree."""

    def test_no_tags(self):
        assert match_blocks([]) == []

    def test_siblings(self):
        text = "\n".join([
            START.format("2020-01-01 00:00:00"), "a", END,
            START.format("2030-01-01 00:00:00"), "b", END,
        ])

        blocks = _blocks(text)

        assert len(blocks) == 2
        assert blocks[0].children == ()
        assert blocks[0].attributes.expiry.year == 2020
        assert blocks[1].attributes.expiry.year == 2030
        assert blocks[0].start_tag.line == 1
        assert blocks[1].end_tag.line == 6

    def test_nested_children_in_document_order(self):
        text = "\n".join([
            START.format("2030-01-01 00:00:00"),
            START.format("2021-01-01 00:00:00"), "a", END,
            START.format("2022-01-01 00:00:00"), "b", END,
            END,
        ])

        blocks = _blocks(text)

        assert len(blocks) == 1
        years = [child.attributes.expiry.year for child in blocks[0].children]
        assert years == [2021, 2022]

    def test_spans(self):
        text = START.format("2020-01-01 00:00:00") + "\nbody\n" + END
        block = _blocks(text)[0]

        inner_start, inner_end = block.inner_span
        outer_start, outer_end = block.outer_span
        assert text[inner_start:inner_end] == "\nbody\n"
        assert (outer_start, outer_end) == (0, len(text))

    def test_end_without_start_raises(self):
        text = "x\n" + END + "\n"

        with pytest.raises(UnbalancedTagsError) as exc_info:
            _blocks(text)

        assert exc_info.value.line == 2
        assert "no matching start tag" in exc_info.value.message

    def test_unclosed_start_raises_at_innermost(self):
        text = "\n".join([
            START.format("2020-01-01 00:00:00"),
            "  " + START.format("2020-01-01 00:00:00"),
            "body",
        ])

        with pytest.raises(UnbalancedTagsError) as exc_info:
            _blocks(text)

        assert (exc_info.value.line, exc_info.value.column) == (2, 2)
        assert "2 unclosed" in exc_info.value.message

    def test_attribute_error_is_kept_on_the_block(self):
        text = '/* < time-limited to="someday" > */\n' + START.format("2020-01-01 00:00:00") + "\nx\n" + END + "\n" + END

        block = _blocks(text)[0]

        assert block.attributes is None
        assert "YYYY-MM-DD HH:MM:SS" in block.attribute_error
        assert block.children[0].attributes is not None

    def test_time_offset_is_applied(self):
        text = START.format("2020-01-01 09:00:00") + "\n" + END

        block = _blocks(text, "+09:00")[0]

        assert block.attributes.expiry.hour == 9
        assert block.attributes.expiry.utcoffset().total_seconds() == 9 * 3600


@pytest.mark.unit
class TestIterBlocks:
    """Test walking the block tree."""

    def test_parents_before_children(self):
        text = "\n".join([
            START.format("2001-01-01 00:00:00"),
            START.format("2002-01-01 00:00:00"),
            START.format("2003-01-01 00:00:00"), END,
            END,
            END,
            START.format("2004-01-01 00:00:00"), END,
        ])

        years = [block.attributes.expiry.year for block in iter_blocks(_blocks(text))]

        assert years == [2001, 2002, 2003, 2004]
