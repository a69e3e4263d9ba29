"""
Pytest configuration and fixtures for osdu-ingest tests

Unit tests only need pyspark's pure-Python types (Row, StructType); the
Spark session fixture is used by integration tests.
"""
import os
from typing import Generator, Sequence
from unittest.mock import MagicMock

import pytest
from pyspark.sql import Row, SparkSession
from pyspark.sql.types import (
    ArrayType,
    DoubleType,
    LongType,
    MapType,
    StringType,
    StructField,
    StructType,
)

from osdu_ingest.core.errors import SubmissionError
from osdu_ingest.core.models import StorageRecord, WriterConfig
from osdu_ingest.storage import BatchSubmitter


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that start a local Spark session"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# SCHEMA AND ROW FIXTURES
# =======================

LOCATION_SCHEMA = StructType([
    StructField("latitude", DoubleType()),
    StructField("longitude", DoubleType()),
    StructField("label", StringType()),
])

DATA_SCHEMA = StructType([
    StructField("name", StringType()),
    StructField("depth", DoubleType()),
    StructField("count", LongType()),
    StructField("location", LOCATION_SCHEMA),
    StructField("tags", ArrayType(StringType())),
    StructField("attributes", MapType(StringType(), StringType())),
])

ACL_SCHEMA = StructType([
    StructField("viewers", ArrayType(StringType())),
    StructField("owners", ArrayType(StringType())),
])

LEGAL_SCHEMA = StructType([
    StructField("legaltags", ArrayType(StringType())),
    StructField("otherRelevantDataCountries", ArrayType(StringType())),
])


def build_row_schema(with_id: bool = True) -> StructType:
    fields = [
        StructField("kind", StringType(), False),
        StructField("acl", ACL_SCHEMA),
        StructField("legal", LEGAL_SCHEMA),
        StructField("data", DATA_SCHEMA),
    ]
    if with_id:
        fields.insert(0, StructField("id", StringType()))
    return StructType(fields)


def build_row(
    index: int = 0,
    with_id: bool = True,
    kind: str = "osdu:wks:master-data--Well:1.0.0",
    viewers: Sequence[str] = ("data.default.viewers@opendes.example.com",),
    owners: Sequence[str] = ("data.default.owners@opendes.example.com",),
    legaltags: Sequence[str] = ("opendes-public-usa-dataset-1",),
    countries: Sequence[str] = ("US",),
    data: Row | None = None,
) -> Row:
    if data is None:
        data = Row(
            name=f"Well {index}",
            depth=1500.5 + index,
            count=index,
            location=Row(latitude=29.76, longitude=-95.37, label="Houston"),
            tags=["onshore", "exploration"],
            attributes={"basin": "Gulf Coast"},
        )

    values = {
        "kind": kind,
        "acl": Row(viewers=list(viewers), owners=list(owners)),
        "legal": Row(legaltags=list(legaltags), otherRelevantDataCountries=list(countries)),
        "data": data,
    }
    if with_id:
        values = {"id": f"opendes:master-data--Well:{index}", **values}
    return Row(**values)


@pytest.fixture(scope="session")
def row_schema() -> StructType:
    """Row schema with an explicit id column"""
    return build_row_schema(with_id=True)


@pytest.fixture(scope="session")
def row_schema_without_id() -> StructType:
    """Row schema relying on service-generated ids"""
    return build_row_schema(with_id=False)


@pytest.fixture(scope="session")
def make_row():
    """Factory building rows matching row_schema"""
    return build_row


# =======================
# CONFIG AND SUBMITTER FIXTURES
# =======================

@pytest.fixture(scope="session")
def writer_config() -> WriterConfig:
    """Writer configuration pointing at a non-routable test endpoint"""
    return WriterConfig(
        endpoint="https://osdu.test.example.com/",
        partition_id="opendes",
        bearer_token="test-token",
        batch_size=500,
    )


class RecordingSubmitter(BatchSubmitter):
    """Submitter that keeps every batch in memory instead of calling the service"""

    def __init__(self, config: WriterConfig, fail_on_call: int | None = None):
        super().__init__(config)
        self.batches: list[list[StorageRecord]] = []
        self.calls = 0
        self.fail_on_call = fail_on_call
        self.closed = 0

    @property
    def strategy(self) -> str:
        return "recording"

    def _send(self, records: Sequence[StorageRecord]) -> None:
        self.calls += 1
        if self.fail_on_call is not None and self.calls >= self.fail_on_call:
            raise SubmissionError("simulated outage", batch_size=len(records), status_code=503)
        self.batches.append(list(records))

    def close(self) -> None:
        self.closed += 1


def fake_storage_client(endpoint: str, bearer_token: str):
    """Client factory returning a mock generated storage client"""
    client = MagicMock(name="StorageApi")
    client.endpoint = endpoint
    client.bearer_token = bearer_token
    return client


@pytest.fixture
def recording_submitter(writer_config) -> RecordingSubmitter:
    """Fresh recording submitter"""
    return RecordingSubmitter(writer_config)


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session() -> Generator[SparkSession, None, None]:
    """
    Create a Spark session for testing with local mode

    Yields:
        SparkSession configured for local testing
    """
    spark = (
        SparkSession.builder
        .appName("osdu-ingest-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")
        .config("spark.sql.warehouse.dir", "/tmp/spark-warehouse")
        .getOrCreate()
    )

    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


# =======================
# ENVIRONMENT FIXTURES
# =======================

@pytest.fixture
def clean_osdu_env(monkeypatch):
    """Remove OSDU_* variables so config tests see only explicit options"""
    for key in list(os.environ):
        if key.startswith("OSDU_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
