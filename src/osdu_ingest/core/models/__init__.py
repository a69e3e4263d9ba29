"""
Core data models for the OSDU ingestion writer.

All models use Pydantic for runtime validation and type safety.
"""

from .storage_record import StorageAcl, StorageLegal, StorageRecord
from .writer_config import WriterConfig

__all__ = [
    "StorageAcl",
    "StorageLegal",
    "StorageRecord",
    "WriterConfig",
]
