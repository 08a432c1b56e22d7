"""Decide whether a block's annotation has expired."""

from datetime import datetime, timedelta

from timelimited.temporal.models import Block, Classification
from timelimited.util.datetime_utils import ensure_aware

# A to="..." timestamp covers its whole second
EXPIRY_GRACE = timedelta(milliseconds=999)


def is_expired(expiry: datetime, reference_instant: datetime) -> bool:
    reference = ensure_aware(reference_instant)
    # Compare at millisecond precision
    reference = reference.replace(microsecond=reference.microsecond // 1000 * 1000)
    return reference > ensure_aware(expiry) + EXPIRY_GRACE


def classify(block: Block, reference_instant: datetime) -> Classification:
    """
    Classify a block by its own expiry only.

    Blocks whose attributes could not be parsed, and blocks marked skip, are
    always ACTIVE.
    """
    attributes = block.attributes
    if attributes is None or attributes.skip:
        return Classification.ACTIVE
    if is_expired(attributes.expiry, reference_instant):
        return Classification.EXPIRED
    return Classification.ACTIVE
