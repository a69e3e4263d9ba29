"""
Schema resolution for storage-record rows.

Locates the fields a storage record is built from once, so that
per-row conversion only does positional lookups.
"""

from pydantic import BaseModel
from pyspark.sql.types import ArrayType, DataType, StringType, StructType

from osdu_ingest.core.errors import SchemaError
from osdu_ingest.observability.logger import get_logger

logger = get_logger(__name__)


class FieldPositions(BaseModel):
    """
    Resolved field indexes of a row schema (immutable).

    Attributes:
        id: Index of the optional "id" column, None when the schema has none
        kind: Index of "kind"
        acl: Index of the "acl" struct
        acl_viewers: Index of "viewers" inside "acl"
        acl_owners: Index of "owners" inside "acl"
        legal: Index of the "legal" struct
        legal_tags: Index of "legaltags" inside "legal"
        legal_other_countries: Index of "otherRelevantDataCountries" inside "legal"
        data: Index of the "data" struct
        data_schema: Schema of the "data" payload
        data_num_fields: Number of fields in the payload schema
    """

    id: int | None = None
    kind: int
    acl: int
    acl_viewers: int
    acl_owners: int
    legal: int
    legal_tags: int
    legal_other_countries: int
    data: int
    data_schema: StructType
    data_num_fields: int

    class Config:
        frozen = True
        arbitrary_types_allowed = True


def _field_index(
    struct: StructType,
    name: str,
    path: str,
    expected_type: type[DataType] | None = None,
) -> int:
    """
    Return the index of a named field, checking its data type.

    Raises:
        SchemaError: If the field is missing or has an unexpected type
    """
    names = struct.fieldNames()
    if name not in names:
        raise SchemaError(path, "required field is missing")

    idx = names.index(name)
    data_type = struct.fields[idx].dataType
    if expected_type is not None and not isinstance(data_type, expected_type):
        raise SchemaError(
            path,
            f"expected {expected_type.typeName()}, got {data_type.simpleString()}"
        )
    return idx


def _string_array_index(struct: StructType, name: str, path: str) -> int:
    """
    Return the index of an array<string> field.

    Raises:
        SchemaError: If the field is missing, not an array, or holds non-string elements
    """
    idx = _field_index(struct, name, path, ArrayType)
    element_type = struct.fields[idx].dataType.elementType
    if not isinstance(element_type, StringType):
        raise SchemaError(path, f"expected array<string>, got array<{element_type.simpleString()}>")
    return idx


def resolve_field_positions(schema: StructType) -> FieldPositions:
    """
    Resolve the positions of all storage-record fields in a row schema.

    Args:
        schema: Spark schema of the rows to be written

    Returns:
        FieldPositions for the schema

    Raises:
        SchemaError: If a required field is missing or malformed
    """
    if not isinstance(schema, StructType):
        raise SchemaError("<root>", f"expected struct, got {type(schema).__name__}")

    # if the id is not provided, it's auto-generated by the service
    idx_id = None
    if "id" in schema.fieldNames():
        idx_id = _field_index(schema, "id", "id", StringType)

    idx_kind = _field_index(schema, "kind", "kind", StringType)

    idx_acl = _field_index(schema, "acl", "acl", StructType)
    acl_schema = schema.fields[idx_acl].dataType
    idx_viewers = _string_array_index(acl_schema, "viewers", "acl.viewers")
    idx_owners = _string_array_index(acl_schema, "owners", "acl.owners")

    idx_legal = _field_index(schema, "legal", "legal", StructType)
    legal_schema = schema.fields[idx_legal].dataType
    idx_tags = _string_array_index(legal_schema, "legaltags", "legal.legaltags")
    idx_other = _string_array_index(
        legal_schema,
        "otherRelevantDataCountries",
        "legal.otherRelevantDataCountries",
    )

    idx_data = _field_index(schema, "data", "data", StructType)
    data_schema = schema.fields[idx_data].dataType

    positions = FieldPositions(
        id=idx_id,
        kind=idx_kind,
        acl=idx_acl,
        acl_viewers=idx_viewers,
        acl_owners=idx_owners,
        legal=idx_legal,
        legal_tags=idx_tags,
        legal_other_countries=idx_other,
        data=idx_data,
        data_schema=data_schema,
        data_num_fields=len(data_schema.fields),
    )

    logger.debug(
        "Resolved storage record schema",
        extra={"has_id": idx_id is not None, "data_fields": positions.data_num_fields}
    )
    return positions
