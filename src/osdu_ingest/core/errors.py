"""
Exception hierarchy for the OSDU ingestion writer.

All errors propagate to the caller (ultimately the Spark task), which
treats the partition as failed. Nothing here is retried.
"""


class IngestError(Exception):
    """Base class for all ingestion errors."""


class ConfigurationError(IngestError):
    """Raised when writer configuration is missing or invalid."""


class SchemaError(IngestError):
    """Raised when the row schema lacks a required field or has the wrong shape."""

    def __init__(self, field_path: str, message: str):
        self.field_path = field_path
        self.message = message
        super().__init__(f"{field_path}: {message}")


class ConversionError(IngestError):
    """Raised when a row cannot be converted into a storage record."""

    def __init__(self, field_path: str, message: str):
        self.field_path = field_path
        self.message = message
        super().__init__(f"{field_path}: {message}")


class SubmissionError(IngestError):
    """
    Raised when a batch could not be submitted to the storage service.

    Batches submitted earlier by the same writer remain applied remotely.
    """

    def __init__(
        self,
        message: str,
        batch_size: int,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        self.batch_size = batch_size
        self.status_code = status_code
        self.response_body = response_body
        detail = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"{message}{detail} [batch of {batch_size} records]")


class WriterStateError(IngestError):
    """Raised when a lifecycle call is made on a committed or aborted writer."""
