# Temporal module - finds time-limited markers, evaluates expiry and rewrites the text

from .apply_time_limits import apply_time_limits, apply_time_limits_to_file, parse_document
from .find_expiring_markers import find_expiring_markers, format_report
from .expiry import classify

__all__ = [
    'apply_time_limits',
    'apply_time_limits_to_file',
    'parse_document',
    'find_expiring_markers',
    'format_report',
    'classify'
]
