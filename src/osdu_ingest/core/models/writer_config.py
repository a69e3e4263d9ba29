"""
WriterConfig model: connection and batching settings for one writer.
"""

import os
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from osdu_ingest.core.errors import ConfigurationError

DEFAULT_BATCH_SIZE = 500
DEFAULT_REQUEST_TIMEOUT = 30.0

# option key -> (config field, environment variable)
OPTION_KEYS = {
    "endpoint": ("endpoint", "OSDU_ENDPOINT"),
    "partitionid": ("partition_id", "OSDU_PARTITION_ID"),
    "bearertoken": ("bearer_token", "OSDU_BEARER_TOKEN"),
    "submissionstrategy": ("submission_strategy", "OSDU_SUBMISSION_STRATEGY"),
    "batchsize": ("batch_size", "OSDU_BATCH_SIZE"),
    "requesttimeout": ("request_timeout", "OSDU_REQUEST_TIMEOUT"),
    "clientfactory": ("client_factory", "OSDU_CLIENT_FACTORY"),
}

TRUE_VALUES = ("true", "1", "yes")


class WriterConfig(BaseModel):
    """
    Settings shared by every partition writer of one write job.

    Attributes:
        endpoint: Base URL of the OSDU deployment (no trailing slash)
        partition_id: Data partition sent with every batch
        bearer_token: Pre-acquired OAuth token; never logged
        submission_strategy: "direct" (HTTP) or "client-library" (generated client)
        batch_size: Records buffered before a mid-stream submission
        request_timeout: Timeout of one HTTP submission in seconds
        client_factory: "module:callable" building the generated storage client
    """

    endpoint: str = Field(..., min_length=1)
    partition_id: str = Field(..., min_length=1)
    bearer_token: str = Field(..., min_length=1, repr=False)
    submission_strategy: Literal["direct", "client-library"] = "direct"
    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=1)
    request_timeout: float = Field(DEFAULT_REQUEST_TIMEOUT, gt=0)
    client_factory: str | None = None

    @field_validator("endpoint")
    @classmethod
    def check_endpoint(cls, v: str) -> str:
        """Require an http(s) URL and strip trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL, got '{v}'")
        return v.rstrip("/")

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "WriterConfig":
        """
        Build a config from Spark write options, falling back to environment variables.

        Option keys are matched case-insensitively (Spark lower-cases them).
        The legacy ``useOSDUSDK=true`` flag selects the client-library strategy.

        Args:
            options: Spark options such as {"endpoint": ..., "partitionId": ...}

        Returns:
            Validated WriterConfig

        Raises:
            ConfigurationError: If a required setting is missing or invalid
        """
        lowered = {str(k).lower(): v for k, v in (options or {}).items()}

        values: dict[str, Any] = {}
        for key, (field_name, env_var) in OPTION_KEYS.items():
            value = lowered.get(key)
            if value is None:
                value = os.getenv(env_var)
            if value is not None and value != "":
                values[field_name] = value

        use_sdk = lowered.get("useosdusdk")
        if use_sdk is not None and "submission_strategy" not in values:
            if str(use_sdk).lower() in TRUE_VALUES:
                values["submission_strategy"] = "client-library"

        missing = [
            name for name in ("endpoint", "partition_id", "bearer_token")
            if name not in values
        ]
        if missing:
            raise ConfigurationError(f"Missing required writer settings: {', '.join(missing)}")

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid writer settings: {e}") from e

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "endpoint": "https://osdu.example.com",
                "partition_id": "opendes",
                "bearer_token": "<token>",
                "submission_strategy": "direct",
                "batch_size": 500,
                "request_timeout": 30.0
            }
        }
