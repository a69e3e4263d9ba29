"""
Batch submission strategies for the OSDU storage service.
"""

from osdu_ingest.core.models import WriterConfig

from .base import BatchSubmitter
from .client_library import ClientLibrarySubmitter, load_client_factory
from .direct import DirectSubmitter

SUBMITTERS: dict[str, type[BatchSubmitter]] = {
    "direct": DirectSubmitter,
    "client-library": ClientLibrarySubmitter,
}


def create_submitter(config: WriterConfig) -> BatchSubmitter:
    """
    Create the submitter selected by config.submission_strategy.

    Args:
        config: Writer configuration

    Returns:
        BatchSubmitter instance
    """
    return SUBMITTERS[config.submission_strategy](config)


__all__ = [
    "BatchSubmitter",
    "ClientLibrarySubmitter",
    "DirectSubmitter",
    "SUBMITTERS",
    "create_submitter",
    "load_client_factory",
]
