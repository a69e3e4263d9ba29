"""
ClientLibrarySubmitter - submits batches through a generated storage client.

The generated client is supplied by a factory ``(endpoint, bearer_token) -> client``;
the returned object must provide
``create_or_update_records(partition_id, skipdupes, context, records)``.
"""

import importlib
from typing import Any, Callable, Sequence

from osdu_ingest.core.errors import ConfigurationError, SubmissionError
from osdu_ingest.core.models import StorageRecord, WriterConfig

from .base import BatchSubmitter

ClientFactory = Callable[[str, str], Any]


def load_client_factory(path: str) -> ClientFactory:
    """
    Import a client factory from a "package.module:callable" path.

    Raises:
        ConfigurationError: If the path is malformed or cannot be imported
    """
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ConfigurationError(f"Client factory must look like 'module:callable', got '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import client factory module '{module_name}': {e}") from e

    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigurationError(f"Client factory '{path}' is not callable")
    return factory


class ClientLibrarySubmitter(BatchSubmitter):
    """
    Delegates each batch to a generated storage API client with create-or-update semantics.
    """

    def __init__(self, config: WriterConfig, client_factory: ClientFactory | None = None):
        super().__init__(config)

        if client_factory is None:
            if not config.client_factory:
                raise ConfigurationError(
                    "The client-library strategy requires a client factory "
                    "(option 'clientFactory' or env var OSDU_CLIENT_FACTORY)"
                )
            client_factory = load_client_factory(config.client_factory)

        self._client = client_factory(config.endpoint, config.bearer_token)
        self._closed = False

    @property
    def strategy(self) -> str:
        return "client-library"

    def _send(self, records: Sequence[StorageRecord]) -> None:
        try:
            self._client.create_or_update_records(
                self.config.partition_id,
                skipdupes=True,
                context="",
                records=[record.to_payload() for record in records],
            )
        except Exception as e:
            # The generated client's exception types are not known here
            raise SubmissionError(
                f"Storage client call failed: {e}",
                batch_size=len(records),
                status_code=getattr(e, "status", None),
            ) from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        close = getattr(self._client, "close", None)
        if callable(close):
            close()
