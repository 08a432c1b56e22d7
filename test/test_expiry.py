#!/usr/bin/env python3
"""
Tests for expiry evaluation.
"""

from datetime import datetime, timedelta, timezone

import pytest
from timelimited.temporal.apply_time_limits import parse_document
from timelimited.temporal.expiry import classify, is_expired
from timelimited.temporal.models import Classification

EXPIRY = datetime(2020, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


# ===========================================================================
# is_expired Tests - the to="..." second is inclusive
# ===========================================================================

@pytest.mark.unit
class TestIsExpired:
    """Test the expiry boundary."""

    def test_at_expiry_second_is_active(self):
        assert not is_expired(EXPIRY, EXPIRY)

    def test_last_millisecond_is_active(self):
        assert not is_expired(EXPIRY, EXPIRY + timedelta(milliseconds=999))

    def test_sub_millisecond_is_truncated(self):
        assert not is_expired(EXPIRY, EXPIRY + timedelta(microseconds=999999))

    def test_next_second_is_expired(self):
        assert is_expired(EXPIRY, datetime(2021, 1, 1, tzinfo=timezone.utc))

    def test_before_expiry_is_active(self):
        assert not is_expired(EXPIRY, datetime(2020, 6, 1, tzinfo=timezone.utc))

    def test_naive_reference_means_utc(self):
        assert is_expired(EXPIRY, datetime(2021, 1, 1))
        assert not is_expired(EXPIRY, datetime(2020, 12, 31, 23, 59, 59, 500000))

    def test_reference_in_other_offset(self):
        tokyo = timezone(timedelta(hours=9))

        assert not is_expired(EXPIRY, datetime(2021, 1, 1, 8, 59, 59, 999000, tzinfo=tokyo))
        assert is_expired(EXPIRY, datetime(2021, 1, 1, 9, 0, 0, tzinfo=tokyo))


# ===========================================================================
# classify Tests
# ===========================================================================

@pytest.mark.unit
class TestClassify:
    """Test classifying blocks."""

    def _block(self, attributes):
        text = f"/* < time-limited {attributes} > */\nx\n/* < /time-limited > */\n"
        return parse_document(text)[0]

    def test_expired(self, reference_instant):
        block = self._block('to="2020-12-31 23:59:59"')

        assert classify(block, reference_instant) is Classification.EXPIRED

    def test_active(self, reference_instant):
        block = self._block('to="2099-12-31 23:59:59"')

        assert classify(block, reference_instant) is Classification.ACTIVE

    def test_skip_is_always_active(self, reference_instant):
        block = self._block('to="2020-12-31 23:59:59" skip')

        assert classify(block, reference_instant) is Classification.ACTIVE

    def test_unreadable_attributes_are_active(self, reference_instant):
        block = self._block('to="not a date"')

        assert classify(block, reference_instant) is Classification.ACTIVE

    def test_child_is_classified_on_its_own(self, reference_instant):
        text = (
            '/* < time-limited to="2099-12-31 23:59:59" > */\n'
            '/* < time-limited to="2020-12-31 23:59:59" > */\n'
            'x\n'
            '/* < /time-limited > */\n'
            '/* < /time-limited > */\n'
        )
        parent = parse_document(text)[0]

        assert classify(parent, reference_instant) is Classification.ACTIVE
        assert classify(parent.children[0], reference_instant) is Classification.EXPIRED
