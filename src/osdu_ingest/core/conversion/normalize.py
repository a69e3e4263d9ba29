"""
Recursive normalization of Spark payload values into plain JSON types.

Structs become dicts, arrays become lists, maps become dicts with string
keys, and every leaf is reduced to str, int, float, bool or None. String
subclasses (numpy.str_ and similar wrappers) are turned into exact ``str``
at every depth so the serialized batch carries no engine-specific types.
"""

import base64
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from pyspark.sql.types import ArrayType, DataType, MapType, StructType

from osdu_ingest.core.errors import ConversionError


def normalize_value(value: Any, data_type: DataType, path: str) -> Any:
    """
    Normalize one value according to its Spark data type.

    Args:
        value: Value taken from a row
        data_type: Spark type the value was declared with
        path: Dotted path of the value, used in error messages

    Returns:
        Plain Python value safe for JSON serialization

    Raises:
        ConversionError: If the value does not match its declared type
    """
    if value is None:
        return None

    if isinstance(data_type, StructType):
        return normalize_struct(value, data_type, path)

    if isinstance(data_type, ArrayType):
        if not isinstance(value, (list, tuple)):
            raise ConversionError(path, f"expected array, got {type(value).__name__}")
        return [
            normalize_value(element, data_type.elementType, f"{path}[{i}]")
            for i, element in enumerate(value)
        ]

    if isinstance(data_type, MapType):
        if not isinstance(value, Mapping):
            raise ConversionError(path, f"expected map, got {type(value).__name__}")
        result = {}
        for key, item in value.items():
            name = str(normalize_scalar(key, f"{path}.<key>"))
            result[name] = normalize_value(item, data_type.valueType, f"{path}.{name}")
        return result

    return normalize_scalar(value, path)


def normalize_struct(value: Any, schema: StructType, path: str) -> dict[str, Any]:
    """
    Normalize a struct value (Row, tuple or mapping) into a dict keyed by field name.

    Raises:
        ConversionError: If the value's shape does not match the schema
    """
    if isinstance(value, Mapping):
        return {
            field.name: normalize_value(value.get(field.name), field.dataType, f"{path}.{field.name}")
            for field in schema.fields
        }

    if not isinstance(value, (tuple, list)):
        raise ConversionError(path, f"expected struct, got {type(value).__name__}")

    if len(value) != len(schema.fields):
        raise ConversionError(
            path,
            f"struct has {len(value)} values but the schema declares {len(schema.fields)} fields"
        )

    return {
        field.name: normalize_value(item, field.dataType, f"{path}.{field.name}")
        for field, item in zip(schema.fields, value)
    }


def normalize_scalar(value: Any, path: str) -> Any:
    """
    Reduce a leaf value to str, int, float, bool or None.

    Raises:
        ConversionError: If the value has no JSON representation
    """
    if value is None or isinstance(value, bool):
        return value

    if isinstance(value, str):
        return str(value)

    if isinstance(value, int):
        return int(value)

    if isinstance(value, float):
        # NaN and infinities are not valid JSON
        return float(value) if math.isfinite(value) else None

    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else None

    if isinstance(value, (datetime, date)):
        return value.isoformat()

    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")

    # numpy scalars and similar boxed values
    if hasattr(value, "item") and callable(value.item):
        return normalize_scalar(value.item(), path)

    raise ConversionError(path, f"unsupported value type {type(value).__name__}")
