"""
timelimited

Remove or unwrap blocks of source code whose time-limited annotation has
expired.
"""

__version__ = "1.0.0"

from .temporal.apply_time_limits import apply_time_limits, apply_time_limits_to_file
from .temporal.models import Diagnostic, DiagnosticKind, TransformResult
from .config import Config, MarkerConfig

__all__ = [
    "apply_time_limits",
    "apply_time_limits_to_file",
    "Diagnostic",
    "DiagnosticKind",
    "TransformResult",
    "Config",
    "MarkerConfig",
]
