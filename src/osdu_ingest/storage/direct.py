"""
DirectSubmitter - submits batches with a plain HTTP PUT.
"""

from typing import Sequence

import requests

from osdu_ingest.core.errors import SubmissionError
from osdu_ingest.core.models import StorageRecord, WriterConfig

from .base import BatchSubmitter

RECORDS_PATH = "/api/storage/v2/records"

# Response bodies kept on errors are truncated to this many characters
MAX_ERROR_BODY = 2000


class DirectSubmitter(BatchSubmitter):
    """
    Submits batches to the storage service's create-or-update endpoint.

    One PUT per batch, JSON array body, bearer authentication and the
    data-partition-id header. No retry adapter is mounted on the session.
    """

    def __init__(self, config: WriterConfig, session: requests.Session | None = None):
        super().__init__(config)
        self.url = f"{config.endpoint}{RECORDS_PATH}"
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {config.bearer_token}",
            "data-partition-id": config.partition_id,
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        self._closed = False

    @property
    def strategy(self) -> str:
        return "direct"

    def _send(self, records: Sequence[StorageRecord]) -> None:
        body = [record.to_payload() for record in records]

        try:
            response = self._session.put(
                self.url,
                params={"skipdupes": "true"},
                json=body,
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise SubmissionError(
                f"Request to {self.url} failed: {e}",
                batch_size=len(records),
            ) from e

        if not 200 <= response.status_code < 300:
            raise SubmissionError(
                f"Storage service rejected batch: {response.reason}",
                batch_size=len(records),
                status_code=response.status_code,
                response_body=response.text[:MAX_ERROR_BODY],
            )

    def close(self) -> None:
        if not self._closed:
            self._session.close()
            self._closed = True
