"""
Row conversion into storage records.
"""

from .normalize import normalize_scalar, normalize_struct, normalize_value
from .record_converter import RecordConverter

__all__ = [
    "RecordConverter",
    "normalize_scalar",
    "normalize_struct",
    "normalize_value",
]
