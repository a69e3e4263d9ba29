"""
Structured JSON logging for osdu-ingest

Spark executors ship stdout to the driver logs, so every writer logs
one JSON object per line through python-json-logger.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "osdu-ingest"

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Never emitted, even when passed as extra fields
REDACTED_FIELDS = {"bearer_token", "authorization", "token"}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter adding timestamp, level, logger and task context fields
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        if log_record.get("level"):
            log_record["level"] = log_record["level"].upper()
        else:
            log_record["level"] = record.levelname

        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["process_id"] = record.process

        for key in REDACTED_FIELDS:
            if key in log_record:
                log_record[key] = "***"


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Setup and configure a logger

    Args:
        name: Logger name
        level: Log level (defaults to env var LOG_LEVEL, then INFO)
        format_type: "json" or "text" (defaults to env var LOG_FORMAT, then json)

    Returns:
        Configured logger instance
    """
    log_level_str = level or os.getenv("LOG_LEVEL", "INFO")
    log_level = LOG_LEVELS.get(log_level_str.upper(), logging.INFO)
    format_type = format_type or os.getenv("LOG_FORMAT", "json")

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format_type == "json":
        formatter = CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance, configuring it on first use

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_logger(name)

    return logger


class log_operation:
    """
    Context manager for logging operation duration

    Usage:
        with log_operation("Submitting batch", logger=logger, batch_size=500):
            submitter.submit(records)
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time: float | None = None
        self.duration: float = 0.0

    def __enter__(self):
        self.start_time = time.time()
        self.logger.debug(
            f"Starting: {self.operation_name}",
            extra={"operation": self.operation_name, **self.extra_fields}
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.time() - self.start_time

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra={
                    "operation": self.operation_name,
                    "duration_seconds": round(self.duration, 3),
                    "status": "success",
                    **self.extra_fields
                }
            )
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra={
                    "operation": self.operation_name,
                    "duration_seconds": round(self.duration, 3),
                    "status": "error",
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val),
                    **self.extra_fields
                }
            )
        return False  # Don't suppress exceptions
