"""
In-memory record buffer with threshold-based flushing.
"""

from typing import Callable

from osdu_ingest.core.models import StorageRecord

SubmitFn = Callable[[list[StorageRecord]], None]


class RecordBuffer:
    """
    Ordered buffer of converted records awaiting submission.

    The buffer is cleared only after the submit callback returns; if it
    raises, every record stays buffered. Contents are never persisted.
    """

    def __init__(self, submit: SubmitFn):
        """
        Initialize record buffer.

        Args:
            submit: Callback receiving the whole buffer as one batch
        """
        self._submit = submit
        self._records: list[StorageRecord] = []

    def append(self, record: StorageRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[StorageRecord]:
        """Snapshot of the buffered records, oldest first."""
        return list(self._records)

    def maybe_flush(self, minimum_batch_size: int) -> bool:
        """
        Submit the buffer as one batch if it holds at least minimum_batch_size records.

        Args:
            minimum_batch_size: Flush threshold (>= 1)

        Returns:
            True if a batch was submitted
        """
        if minimum_batch_size < 1:
            raise ValueError(f"minimum_batch_size must be >= 1, got {minimum_batch_size}")

        if len(self._records) < minimum_batch_size:
            return False

        self._submit(list(self._records))
        self._records.clear()
        return True

    def force_flush(self) -> bool:
        """Submit whatever is buffered, even a single record. No-op when empty."""
        return self.maybe_flush(1)

    def discard(self) -> int:
        """
        Drop all buffered records without submitting them.

        Returns:
            Number of records discarded
        """
        count = len(self._records)
        self._records.clear()
        return count
