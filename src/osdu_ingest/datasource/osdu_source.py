"""
Spark Python data source "osdu".

Usage:
    spark.dataSource.register(OsduDataSource)
    df.write.format("osdu") \\
        .option("endpoint", "https://osdu.example.com") \\
        .option("partitionId", "opendes") \\
        .option("bearerToken", token) \\
        .mode("append") \\
        .save()
"""

from typing import Iterator, List

from pyspark import TaskContext
from pyspark.sql import Row
from pyspark.sql.datasource import DataSource, DataSourceWriter, WriterCommitMessage
from pyspark.sql.types import StructType

from osdu_ingest.batch.writer import StorageRecordWriter, WriteSucceeded
from osdu_ingest.core.errors import ConfigurationError
from osdu_ingest.core.models import WriterConfig
from osdu_ingest.core.schema import resolve_field_positions
from osdu_ingest.observability.logger import get_logger

logger = get_logger(__name__)


class OsduDataSource(DataSource):
    """
    Write-only data source loading DataFrame rows into OSDU storage.
    """

    @classmethod
    def name(cls) -> str:
        return "osdu"

    def writer(self, schema: StructType, overwrite: bool) -> "OsduDataSourceWriter":
        if overwrite:
            raise ConfigurationError("The osdu data source only supports append mode")
        return OsduDataSourceWriter(self.options, schema)


class OsduDataSourceWriter(DataSourceWriter):
    """
    Runs one StorageRecordWriter per partition on the executors.

    Options and schema are validated on the driver so a bad job fails
    before any task starts.
    """

    def __init__(self, options: dict, schema: StructType):
        self.config = WriterConfig.from_options(options)
        self.schema = schema
        resolve_field_positions(schema)

    def _partition_index(self) -> int | None:
        context = TaskContext.get()
        return context.partitionId() if context is not None else None

    def create_partition_writer(self) -> StorageRecordWriter:
        return StorageRecordWriter(
            self.config,
            self.schema,
            partition_index=self._partition_index(),
        )

    def write(self, iterator: Iterator[Row]) -> WriterCommitMessage:
        """
        Write all rows of one partition and commit.

        Any failure aborts the partition writer and is re-raised so Spark
        marks the task as failed.
        """
        writer = self.create_partition_writer()
        try:
            for row in iterator:
                writer.write(row)
            return writer.commit()
        except Exception:
            writer.abort()
            raise
        finally:
            writer.close()

    def commit(self, messages: List[WriterCommitMessage | None]) -> None:
        succeeded = [m for m in messages if isinstance(m, WriteSucceeded)]
        logger.info(
            "OSDU write job committed",
            extra={
                "partitions": len(succeeded),
                "records_written": sum(m.records_written for m in succeeded),
                "batches_submitted": sum(m.batches_submitted for m in succeeded),
            }
        )

    def abort(self, messages: List[WriterCommitMessage | None]) -> None:
        succeeded = [m for m in messages if isinstance(m, WriteSucceeded)]
        logger.warning(
            "OSDU write job aborted; records from successful partitions remain in storage",
            extra={
                "partitions_succeeded": len(succeeded),
                "partitions_failed": len(messages) - len(succeeded),
                "records_not_rolled_back": sum(m.records_written for m in succeeded),
            }
        )
