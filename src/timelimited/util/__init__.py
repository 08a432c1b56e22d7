"""
Utility modules for timelimited.
"""

from .datetime_utils import parse_reference_instant, parse_timestamp
from .file_utils import read_file_content, save_to_disk

__all__ = ['parse_reference_instant', 'parse_timestamp', 'read_file_content', 'save_to_disk']
