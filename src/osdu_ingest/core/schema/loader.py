"""
Loading row schemas from YAML or JSON files.

The file holds a Spark schema in the layout produced by
``StructType.jsonValue()``:

    type: struct
    fields:
      - name: kind
        type: string
        nullable: false
        metadata: {}
      ...
"""

from pathlib import Path
from typing import Any

import yaml
from pyspark.sql.types import StructType

from osdu_ingest.core.errors import SchemaError


def schema_from_dict(schema_dict: dict[str, Any]) -> StructType:
    """
    Convert a schema dictionary into a StructType.

    Field entries may omit "nullable" (default True) and "metadata".

    Raises:
        SchemaError: If the dictionary is not a valid struct schema
    """
    if not isinstance(schema_dict, dict) or schema_dict.get("type") != "struct":
        raise SchemaError("<root>", "schema document must be a struct with a 'fields' list")

    fields = []
    for field_def in schema_dict.get("fields", []):
        fields.append(_with_defaults(field_def))

    try:
        return StructType.fromJson({"type": "struct", "fields": fields})
    except (KeyError, TypeError, ValueError) as e:
        raise SchemaError("<root>", f"invalid schema document: {e}") from e


def _with_defaults(field_def: Any) -> Any:
    """Fill in optional keys recursively so StructType.fromJson accepts the field."""
    if not isinstance(field_def, dict):
        return field_def

    result = dict(field_def)
    if "name" in result:
        result.setdefault("nullable", True)
        result.setdefault("metadata", {})

    data_type = result.get("type")
    if isinstance(data_type, dict):
        nested = dict(data_type)
        if nested.get("type") == "struct":
            nested["fields"] = [_with_defaults(f) for f in nested.get("fields", [])]
        elif nested.get("type") == "array":
            nested.setdefault("containsNull", True)
            nested["elementType"] = _nested_type(nested.get("elementType"))
        elif nested.get("type") == "map":
            nested.setdefault("valueContainsNull", True)
            nested["valueType"] = _nested_type(nested.get("valueType"))
        result["type"] = nested
    return result


def _nested_type(data_type: Any) -> Any:
    if isinstance(data_type, dict):
        return _with_defaults({"type": data_type})["type"]
    return data_type


def load_schema(path: str | Path) -> StructType:
    """
    Load a row schema from a YAML or JSON file.

    Args:
        path: Path to the schema file

    Returns:
        Spark StructType

    Raises:
        FileNotFoundError: If the file does not exist
        SchemaError: If the file does not contain a valid schema
    """
    schema_path = Path(path)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    with open(schema_path) as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SchemaError("<root>", f"cannot parse {schema_path.name}: {e}") from e

    return schema_from_dict(document)
