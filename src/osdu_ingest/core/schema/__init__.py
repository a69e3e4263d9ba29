"""
Row schema resolution and loading.
"""

from .loader import load_schema, schema_from_dict
from .resolver import FieldPositions, resolve_field_positions

__all__ = [
    "FieldPositions",
    "load_schema",
    "resolve_field_positions",
    "schema_from_dict",
]
