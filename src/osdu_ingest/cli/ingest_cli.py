"""
Command-line interface for loading record files into OSDU storage.

Usage:
    python -m osdu_ingest.cli.ingest_cli load --input <path> --schema <schema.yaml> [options]
    python -m osdu_ingest.cli.ingest_cli schema --schema <schema.yaml>
"""

import argparse
import json
import sys
from pathlib import Path

from pyspark.sql import SparkSession

from osdu_ingest.batch.readers import FileReader
from osdu_ingest.core.conversion import RecordConverter
from osdu_ingest.core.errors import IngestError
from osdu_ingest.core.models import WriterConfig
from osdu_ingest.core.schema import load_schema, resolve_field_positions
from osdu_ingest.datasource import OsduDataSource
from osdu_ingest.observability.logger import get_logger, log_operation

logger = get_logger(__name__)


def create_spark_session(app_name: str = "OsduIngest") -> SparkSession:
    """
    Create Spark session for loading.

    Args:
        app_name: Application name

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master("local[*]") \
        .config("spark.sql.adaptive.enabled", "true") \
        .getOrCreate()

    return spark


def build_write_options(args) -> dict[str, str]:
    """
    Map CLI flags onto data source options. Unset flags fall back to OSDU_* env vars.
    """
    options = {
        "endpoint": args.endpoint,
        "partitionId": args.partition_id,
        "bearerToken": args.token,
        "submissionStrategy": args.strategy,
        "batchSize": str(args.batch_size) if args.batch_size else None,
        "requestTimeout": str(args.timeout) if args.timeout else None,
        "clientFactory": args.client_factory,
    }
    return {k: v for k, v in options.items() if v is not None}


def schema_command(args) -> int:
    """
    Validate a schema file and print the resolved field positions.
    """
    try:
        schema = load_schema(args.schema)
        positions = resolve_field_positions(schema)
    except (IngestError, FileNotFoundError) as e:
        logger.error(f"Invalid schema: {e}")
        return 1

    summary = positions.model_dump(exclude={"data_schema"})
    summary["data_fields"] = positions.data_schema.fieldNames()
    print(json.dumps(summary, indent=2))
    return 0


def load_command(args) -> int:
    """
    Execute the load command.
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    try:
        schema = load_schema(args.schema)
        resolve_field_positions(schema)
        options = build_write_options(args)
        if not args.dry_run:
            WriterConfig.from_options(options)
    except (IngestError, FileNotFoundError) as e:
        logger.error(f"Cannot start load: {e}")
        return 1

    logger.info("Creating Spark session...")
    spark = create_spark_session(f"OsduIngest-{input_path.stem}")

    try:
        df = FileReader(spark).read(
            str(input_path),
            schema=schema,
            file_format=args.format,
            multi_line=args.multi_line,
        )

        if args.dry_run:
            converter = RecordConverter(resolve_field_positions(df.schema))
            count = 0
            with log_operation("Dry-run conversion", logger=logger, input=str(input_path)):
                for row in df.toLocalIterator():
                    converter.convert(row)
                    count += 1
            logger.info(f"DRY RUN: {count} rows converted, nothing submitted")
            return 0

        spark.dataSource.register(OsduDataSource)
        with log_operation("OSDU load", logger=logger, input=str(input_path)):
            df.write.format(OsduDataSource.name()).options(**options).mode("append").save()
        return 0

    except Exception as e:
        logger.error(f"Error during load: {e}", exc_info=True)
        return 1
    finally:
        spark.stop()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Load nested record files into OSDU storage",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Load a JSON lines file (connection settings from OSDU_* env vars)
  python -m osdu_ingest.cli.ingest_cli load --input data/wells.json --schema config/well_schema.yaml

  # Convert only, without contacting the service
  python -m osdu_ingest.cli.ingest_cli load --input data/wells.json --schema config/well_schema.yaml --dry-run

  # Check a schema file
  python -m osdu_ingest.cli.ingest_cli schema --schema config/well_schema.yaml
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    load_parser = subparsers.add_parser("load", help="Load a record file")
    load_parser.add_argument("--input", required=True, help="Path to input file or directory")
    load_parser.add_argument("--schema", required=True, help="Path to row schema (YAML or JSON)")
    load_parser.add_argument(
        "--format",
        default="json",
        choices=["json", "parquet"],
        help="Input file format (default: json)"
    )
    load_parser.add_argument("--multi-line", action="store_true", help="JSON documents span multiple lines")
    load_parser.add_argument("--endpoint", help="OSDU base URL (default: env OSDU_ENDPOINT)")
    load_parser.add_argument("--partition-id", help="Data partition id (default: env OSDU_PARTITION_ID)")
    load_parser.add_argument("--token", help="Bearer token (default: env OSDU_BEARER_TOKEN)")
    load_parser.add_argument(
        "--strategy",
        choices=["direct", "client-library"],
        help="Submission strategy (default: direct)"
    )
    load_parser.add_argument("--client-factory", help="'module:callable' building the storage client")
    load_parser.add_argument("--batch-size", type=int, help="Records per batch (default: 500)")
    load_parser.add_argument("--timeout", type=float, help="HTTP request timeout in seconds (default: 30)")
    load_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Convert rows without submitting them"
    )

    schema_parser = subparsers.add_parser("schema", help="Validate a row schema file")
    schema_parser.add_argument("--schema", required=True, help="Path to row schema (YAML or JSON)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "load":
        return load_command(args)
    return schema_command(args)


if __name__ == "__main__":
    sys.exit(main())
