#!/usr/bin/env python3
"""
Parse the attribute text of a time-limited start tag.

Recognised attributes:

- to="YYYY-MM-DD HH:MM:SS" (required): expiry, in the configured offset
- unwrap-block: remove the markers and one shell layer instead of everything
- skip: never transform this block
- c="...": free-form comment, kept verbatim

Anything else between attributes (such as the " * " decoration of a
multi-line block comment) and unknown attributes are ignored.
"""

import re
from typing import Dict, Optional

from timelimited.temporal.errors import TagAttributeError
from timelimited.temporal.models import Attributes
from timelimited.util.datetime_utils import parse_timestamp

ATTRIBUTE_PATTERN = re.compile(
    r'(?P<name>[A-Za-z_][\w:.-]*)(?:\s*=\s*(?:"(?P<dq>[^"]*)"|\'(?P<sq>[^\']*)\'))?'
)

EXPIRY_ATTRIBUTE = 'to'
UNWRAP_ATTRIBUTE = 'unwrap-block'
SKIP_ATTRIBUTE = 'skip'
COMMENT_ATTRIBUTE = 'c'


def split_attributes(raw: str) -> Dict[str, Optional[str]]:
    """
    Split raw attribute text into a name -> value mapping.

    Bare flags map to None. Names are lower-cased; the first occurrence of a
    name wins.
    """
    attributes: Dict[str, Optional[str]] = {}
    for match in ATTRIBUTE_PATTERN.finditer(raw or ''):
        name = match.group('name').lower()
        value = match.group('dq')
        if value is None:
            value = match.group('sq')
        attributes.setdefault(name, value)
    return attributes


def parse_attributes(raw: str, time_offset: Optional[str] = None) -> Attributes:
    """
    Parse a start tag's attribute text.

    Args:
        raw: Everything between the tag name and the closing '>'
        time_offset: UTC offset the to="..." timestamp is written in

    Returns:
        Attributes: The parsed attributes

    Raises:
        TagAttributeError: If to="..." is missing or not a valid timestamp
    """
    attributes = split_attributes(raw)

    if EXPIRY_ATTRIBUTE not in attributes:
        raise TagAttributeError('missing required attribute to="YYYY-MM-DD HH:MM:SS"')
    expiry_text = attributes[EXPIRY_ATTRIBUTE]
    if expiry_text is None:
        raise TagAttributeError('attribute "to" has no value')

    try:
        expiry = parse_timestamp(expiry_text, time_offset)
    except ValueError as exc:
        raise TagAttributeError(str(exc)) from exc

    return Attributes(
        expiry=expiry,
        unwrap=UNWRAP_ATTRIBUTE in attributes,
        comment=attributes.get(COMMENT_ATTRIBUTE),
        skip=SKIP_ATTRIBUTE in attributes,
    )
