"""
Unit tests for the ingest CLI commands that do not start Spark.
"""

import json
from pathlib import Path

import pytest

from osdu_ingest.cli.ingest_cli import build_write_options, main

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


@pytest.mark.unit
class TestIngestCli:
    """Tests for ingest_cli"""

    def test_schema_command_prints_positions(self, capsys):
        """Test validating the bundled schema"""
        exit_code = main(["schema", "--schema", str(CONFIG_DIR / "well_schema.yaml")])

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["id"] == 0
        assert summary["kind"] == 1
        assert "SpatialLocation" in summary["data_fields"]

    def test_schema_command_rejects_invalid_schema(self, tmp_path):
        """Test that a schema without legal fails"""
        path = tmp_path / "schema.yaml"
        path.write_text(
            "type: struct\n"
            "fields:\n"
            "  - {name: kind, type: string}\n"
        )

        assert main(["schema", "--schema", str(path)]) == 1

    def test_load_missing_input(self, tmp_path):
        """Test that a missing input file fails before Spark starts"""
        exit_code = main([
            "load",
            "--input", str(tmp_path / "absent.json"),
            "--schema", str(CONFIG_DIR / "well_schema.yaml"),
        ])

        assert exit_code == 1

    def test_load_without_connection_settings(self, tmp_path, clean_osdu_env):
        """Test that missing endpoint settings fail before Spark starts"""
        data = tmp_path / "wells.json"
        data.write_text("{}\n")

        exit_code = main([
            "load",
            "--input", str(data),
            "--schema", str(CONFIG_DIR / "well_schema.yaml"),
        ])

        assert exit_code == 1

    def test_no_command_prints_help(self):
        """Test that running without a subcommand fails"""
        assert main([]) == 1

    def test_build_write_options_skips_unset_flags(self):
        """Test that only provided flags become options"""

        class Args:
            endpoint = "https://h"
            partition_id = "opendes"
            token = None
            strategy = None
            batch_size = 100
            timeout = None
            client_factory = None

        assert build_write_options(Args()) == {
            "endpoint": "https://h",
            "partitionId": "opendes",
            "batchSize": "100",
        }
