"""
Integration tests for the osdu data source running inside local Spark.

A local HTTP server stands in for the storage service and records every
PUT body it receives.
"""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from osdu_ingest.batch.readers import FileReader
from osdu_ingest.datasource import OsduDataSource

from conftest import build_row, build_row_schema


class StorageHandler(BaseHTTPRequestHandler):
    """Accepts storage PUT requests and keeps the decoded bodies"""

    def do_PUT(self):
        length = int(self.headers.get("Content-Length", 0))
        body = json.loads(self.rfile.read(length))
        with self.server.lock:
            self.server.requests.append({
                "path": self.path,
                "partition": self.headers.get("data-partition-id"),
                "authorization": self.headers.get("Authorization"),
                "records": body,
            })

        status = 500 if self.server.fail else 201
        payload = json.dumps({"recordCount": len(body)}).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def storage_server():
    """Local storage service on an ephemeral port"""
    server = ThreadingHTTPServer(("127.0.0.1", 0), StorageHandler)
    server.requests = []
    server.lock = threading.Lock()
    server.fail = False
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server

    server.shutdown()
    server.server_close()


def write_options(server, batch_size=2):
    host, port = server.server_address
    return {
        "endpoint": f"http://{host}:{port}",
        "partitionId": "opendes",
        "bearerToken": "integration-token",
        "batchSize": str(batch_size),
    }


@pytest.mark.integration
@pytest.mark.slow
class TestSparkWrite:
    """End-to-end writes through df.write.format("osdu")"""

    def test_append_submits_all_rows(self, spark_session, storage_server):
        """Test that every row arrives exactly once as a storage record"""
        spark_session.dataSource.register(OsduDataSource)
        df = spark_session.createDataFrame(
            [build_row(i) for i in range(7)], build_row_schema()
        ).coalesce(1)

        df.write.format("osdu").options(**write_options(storage_server)).mode("append").save()

        requests_seen = storage_server.requests
        assert [len(r["records"]) for r in requests_seen] == [2, 2, 2, 1]
        assert all(r["path"] == "/api/storage/v2/records?skipdupes=true" for r in requests_seen)
        assert all(r["partition"] == "opendes" for r in requests_seen)
        assert all(r["authorization"] == "Bearer integration-token" for r in requests_seen)

        records = [rec for r in requests_seen for rec in r["records"]]
        assert sorted(rec["id"] for rec in records) == sorted(
            f"opendes:master-data--Well:{i}" for i in range(7)
        )
        first = next(rec for rec in records if rec["id"].endswith(":0"))
        assert first["kind"] == "osdu:wks:master-data--Well:1.0.0"
        assert first["legal"]["otherRelevantDataCountries"] == ["US"]
        assert first["data"]["location"] == {
            "latitude": 29.76,
            "longitude": -95.37,
            "label": "Houston",
        }
        assert first["data"]["attributes"] == {"basin": "Gulf Coast"}

    def test_service_error_fails_job(self, spark_session, storage_server):
        """Test that a rejected batch fails the Spark job"""
        storage_server.fail = True
        spark_session.dataSource.register(OsduDataSource)
        df = spark_session.createDataFrame([build_row(0)], build_row_schema())

        with pytest.raises(Exception, match="500"):
            df.write.format("osdu").options(**write_options(storage_server)).mode("append").save()

    def test_reads_json_lines_file(self, spark_session, storage_server, tmp_path):
        """Test loading a JSON lines file through FileReader"""
        path = tmp_path / "wells.json"
        lines = []
        for i in range(3):
            row = build_row(i).asDict(recursive=True)
            lines.append(json.dumps(row))
        path.write_text("\n".join(lines) + "\n")

        df = FileReader(spark_session).read(str(path), schema=build_row_schema())
        spark_session.dataSource.register(OsduDataSource)
        df.coalesce(1).write.format("osdu") \
            .options(**write_options(storage_server, batch_size=10)) \
            .mode("append") \
            .save()

        assert len(storage_server.requests) == 1
        assert len(storage_server.requests[0]["records"]) == 3
