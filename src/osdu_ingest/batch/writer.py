"""
Per-partition storage record writer.

Implements the write / commit / abort / close lifecycle a Spark task
drives for one output partition:

    write(row)*  -> commit()  -> close()
                 \\-> abort()   -> close()

Delivery is at-most-once per batch. Batches flushed during write() are
already applied remotely; abort() does not retract them, and a re-run
partition may therefore create duplicate records.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pyspark.sql.datasource import WriterCommitMessage
from pyspark.sql.types import StructType

from osdu_ingest.batch.buffer import RecordBuffer
from osdu_ingest.core.conversion import RecordConverter
from osdu_ingest.core.errors import SubmissionError, WriterStateError
from osdu_ingest.core.models import StorageRecord, WriterConfig
from osdu_ingest.core.schema import resolve_field_positions
from osdu_ingest.observability.logger import get_logger
from osdu_ingest.observability.metrics import partitions_total
from osdu_ingest.storage import BatchSubmitter, create_submitter

logger = get_logger(__name__)


class WriterState(str, Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass
class WriteSucceeded(WriterCommitMessage):
    """Commit message reported to the driver for one partition."""

    partition_index: int | None
    records_written: int
    batches_submitted: int


class StorageRecordWriter:
    """
    Converts rows of one partition into storage records and submits them in batches.

    Each instance owns its field positions, buffer and submitter; nothing is
    shared between partitions. Calls must be made sequentially.
    """

    def __init__(
        self,
        config: WriterConfig,
        schema: StructType,
        submitter: BatchSubmitter | None = None,
        partition_index: int | None = None,
    ):
        """
        Initialize writer.

        Args:
            config: Writer configuration
            schema: Schema of the rows to be written
            submitter: Batch submitter (defaults to the configured strategy)
            partition_index: Spark partition id, reported in the commit message

        Raises:
            SchemaError: If the schema lacks a required field
            ConfigurationError: If the submission strategy cannot be set up
        """
        self.config = config
        self.partition_index = partition_index
        self.positions = resolve_field_positions(schema)
        self.converter = RecordConverter(self.positions)
        self.submitter = submitter or create_submitter(config)
        self.buffer = RecordBuffer(self._submit_batch)

        self.state = WriterState.OPEN
        self.rows_written = 0
        self.records_submitted = 0
        self.batches_submitted = 0
        self._closed = False

        logger.debug(
            "Storage record writer opened",
            extra={
                "partition_index": partition_index,
                "partition_id": config.partition_id,
                "batch_size": config.batch_size,
                "strategy": config.submission_strategy,
            }
        )

    def _submit_batch(self, records: list[StorageRecord]) -> None:
        self.submitter.submit(records)
        self.records_submitted += len(records)
        self.batches_submitted += 1

    def _require_open(self, operation: str) -> None:
        if self.state is not WriterState.OPEN:
            raise WriterStateError(f"Cannot {operation}: writer is already {self.state.value}")

    def write(self, row: Any) -> None:
        """
        Convert and buffer one row, submitting a batch once batch_size records are buffered.

        Args:
            row: Spark Row matching the writer schema

        Raises:
            ConversionError: If the row does not match the schema
            SubmissionError: If a mid-stream batch submission fails
        """
        self._require_open("write")

        record = self.converter.convert(row)
        self.buffer.append(record)
        self.rows_written += 1

        self.buffer.maybe_flush(self.config.batch_size)

    def commit(self) -> WriteSucceeded:
        """
        Submit the remaining records and mark the partition as written.

        Returns:
            WriteSucceeded commit message

        Raises:
            SubmissionError: If the final batch fails; the writer stays open
                and the records stay buffered
        """
        self._require_open("commit")

        # post final batch, even a single record
        try:
            self.buffer.force_flush()
        except SubmissionError:
            partitions_total.labels(outcome="commit_failed").inc()
            raise

        self.state = WriterState.COMMITTED
        partitions_total.labels(outcome="committed").inc()
        logger.info(
            "Partition committed",
            extra={
                "partition_index": self.partition_index,
                "records_written": self.records_submitted,
                "batches_submitted": self.batches_submitted,
            }
        )
        return WriteSucceeded(
            partition_index=self.partition_index,
            records_written=self.records_submitted,
            batches_submitted=self.batches_submitted,
        )

    def abort(self) -> None:
        """
        Discard buffered records without contacting the service.

        Batches already submitted by write() remain applied remotely.
        """
        if self.state is WriterState.ABORTED:
            return
        self._require_open("abort")

        discarded = self.buffer.discard()
        self.state = WriterState.ABORTED
        partitions_total.labels(outcome="aborted").inc()
        logger.warning(
            "Partition aborted; previously submitted batches are not retracted",
            extra={
                "partition_index": self.partition_index,
                "records_discarded": discarded,
                "records_already_submitted": self.records_submitted,
                "batches_already_submitted": self.batches_submitted,
            }
        )

    def close(self) -> None:
        """Release the submitter. Idempotent and allowed in any state."""
        if self._closed:
            return
        self._closed = True
        self.submitter.close()

    @property
    def pending(self) -> int:
        """Number of converted records not yet submitted."""
        return len(self.buffer)

    def __enter__(self) -> "StorageRecordWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
