"""
Partition writing: record buffering and the writer lifecycle.
"""

from .buffer import RecordBuffer
from .writer import StorageRecordWriter, WriterState, WriteSucceeded

__all__ = [
    "RecordBuffer",
    "StorageRecordWriter",
    "WriterState",
    "WriteSucceeded",
]
