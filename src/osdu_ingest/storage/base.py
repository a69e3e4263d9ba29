"""
Base submitter interface for sending batches to the storage service.

Implementations must send the whole batch in a single call and must not
retry: a failed batch surfaces as SubmissionError to the writer.
"""

import time
from abc import ABC, abstractmethod
from typing import Sequence

from osdu_ingest.core.errors import SubmissionError
from osdu_ingest.core.models import StorageRecord, WriterConfig
from osdu_ingest.observability.logger import get_logger
from osdu_ingest.observability.metrics import record_batch_submission

logger = get_logger(__name__)


class BatchSubmitter(ABC):
    """
    Abstract base class for batch submission strategies.

    Subclasses implement _send(); submit() wraps it with timing,
    metrics and logging.
    """

    def __init__(self, config: WriterConfig):
        """
        Initialize submitter.

        Args:
            config: Writer configuration (endpoint, partition, token)
        """
        self.config = config

    @property
    @abstractmethod
    def strategy(self) -> str:
        """Return the strategy identifier."""
        pass

    @abstractmethod
    def _send(self, records: Sequence[StorageRecord]) -> None:
        """
        Send one batch to the storage service.

        Raises:
            SubmissionError: If the service did not accept the batch
        """
        pass

    def submit(self, records: Sequence[StorageRecord]) -> None:
        """
        Submit a batch of records as one request.

        Args:
            records: Records to create or update

        Raises:
            SubmissionError: If the submission failed (not retried)
        """
        start = time.time()
        try:
            self._send(records)
        except SubmissionError as e:
            duration = time.time() - start
            record_batch_submission(self.strategy, len(records), duration, success=False)
            logger.error(
                f"Batch submission failed: {e}",
                extra={
                    "strategy": self.strategy,
                    "partition_id": self.config.partition_id,
                    "batch_size": len(records),
                    "status_code": e.status_code,
                }
            )
            raise

        duration = time.time() - start
        record_batch_submission(self.strategy, len(records), duration, success=True)
        logger.info(
            f"Submitted batch of {len(records)} records",
            extra={
                "strategy": self.strategy,
                "partition_id": self.config.partition_id,
                "batch_size": len(records),
                "duration_seconds": round(duration, 3),
            }
        )

    def close(self) -> None:
        """Release network resources. Safe to call more than once."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(endpoint={self.config.endpoint}, partition={self.config.partition_id})"
