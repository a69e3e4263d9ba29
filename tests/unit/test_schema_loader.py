"""
Unit tests for loading row schemas from files.
"""

from pathlib import Path

import pytest
from pyspark.sql.types import ArrayType, DateType, StringType, StructType

from osdu_ingest.core.errors import SchemaError
from osdu_ingest.core.schema import load_schema, resolve_field_positions, schema_from_dict

from conftest import build_row_schema

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


@pytest.mark.unit
class TestSchemaLoader:
    """Tests for load_schema and schema_from_dict"""

    def test_round_trip_of_spark_json(self, tmp_path):
        """Test that a schema written by Spark loads back unchanged"""
        schema = build_row_schema()
        path = tmp_path / "schema.json"
        path.write_text(schema.json())

        assert load_schema(path) == schema

    def test_yaml_with_omitted_defaults(self, tmp_path):
        """Test that nullable, metadata and containsNull may be omitted"""
        path = tmp_path / "schema.yaml"
        path.write_text(
            "type: struct\n"
            "fields:\n"
            "  - name: kind\n"
            "    type: string\n"
            "  - name: tags\n"
            "    type: {type: array, elementType: string}\n"
        )

        schema = load_schema(path)

        assert schema.fieldNames() == ["kind", "tags"]
        assert isinstance(schema["tags"].dataType, ArrayType)
        assert schema["tags"].dataType.elementType == StringType()

    def test_bundled_well_schema_resolves(self):
        """Test that the example schema in config/ is a valid record schema"""
        schema = load_schema(CONFIG_DIR / "well_schema.yaml")
        positions = resolve_field_positions(schema)

        assert positions.id == 0
        assert isinstance(positions.data_schema["SpudDate"].dataType, DateType)
        assert isinstance(positions.data_schema["SpatialLocation"].dataType, StructType)

    def test_missing_file(self, tmp_path):
        """Test that a missing schema file raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            load_schema(tmp_path / "absent.yaml")

    def test_non_struct_document(self):
        """Test that the document root must be a struct"""
        with pytest.raises(SchemaError):
            schema_from_dict({"type": "array"})

    def test_unparsable_yaml(self, tmp_path):
        """Test that broken YAML is reported as SchemaError"""
        path = tmp_path / "broken.yaml"
        path.write_text("type: struct\nfields: [\n")

        with pytest.raises(SchemaError):
            load_schema(path)
