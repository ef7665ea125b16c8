"""Pytest configuration and shared fixtures"""
import pytest
import os
import sys
import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'telemetry'))

from api.schemas import Sample
from core.config import ServerConfig


def _vector_item(labels, value, timestamp=None):
    """One element of a Prometheus instant-vector result"""
    return {"metric": dict(labels), "value": [timestamp or time.time(), str(value)]}


@pytest.fixture
def make_vector():
    """Build a raw vector result from (labels, value) pairs"""
    def _make(*items):
        return [_vector_item(labels, value) for labels, value in items]
    return _make


@pytest.fixture
def make_samples():
    """Build Sample objects from (labels, value) pairs"""
    def _make(*items):
        return [Sample(labels=labels, value=value) for labels, value in items]
    return _make


@pytest.fixture
def traffic_samples(make_samples):
    """A -> B at 10 bytes/s and C -> A at 5 bytes/s"""
    return make_samples(
        ({"source_app": "A", "destination_app": "B"}, 10.0),
        ({"source_app": "C", "destination_app": "A"}, 5.0),
    )


@pytest.fixture
def config(monkeypatch):
    """Server configuration pointing at a fake backend"""
    monkeypatch.delenv("PROMETHEUS_ADDRESS", raising=False)
    return ServerConfig(prometheus_address="http://prometheus.test:9090")


@pytest.fixture
def mock_prometheus():
    """Patch PrometheusConnect; yields the class mock (instance is .return_value)"""
    with patch('api.prometheus_client.PrometheusConnect') as mock_connect:
        mock_connect.return_value.custom_query.return_value = []
        yield mock_connect


class _SlowPrometheusHandler(BaseHTTPRequestHandler):
    """Answers /api/v1/query with an empty vector, trickled out in two pauses"""
    delay = 0.0
    body = json.dumps({"status": "success", "data": {"resultType": "vector", "result": []}}).encode()

    def do_GET(self):
        time.sleep(self.delay)
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(self.body)))
        self.end_headers()
        self.wfile.write(self.body[:5])
        self.wfile.flush()
        time.sleep(self.delay)
        self.wfile.write(self.body[5:])

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_prometheus():
    """Start a local backend; call with the pause length, get its base URL"""
    servers = []

    def _start(delay):
        handler = type("Handler", (_SlowPrometheusHandler,), {"delay": delay})
        server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        server.daemon_threads = True
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_address[1]}"

    yield _start

    for server in servers:
        server.shutdown()
        server.server_close()
