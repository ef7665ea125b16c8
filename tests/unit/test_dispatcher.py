"""Unit tests for QueryDispatcher

Tests the build-then-execute path against a mocked backend.
"""
import pytest
import sys
import os
import time

import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'telemetry'))

from api.dispatcher import QueryDispatcher
from api.errors import InvalidQueryParameter, QueryExecutionError
from api.queries import MetricKind
from core.config import ServerConfig


class TestExecute:
    """One query per call, samples passed through"""

    def test_returns_samples(self, config, mock_prometheus, make_vector):
        prom = mock_prometheus.return_value
        prom.custom_query.return_value = make_vector(
            ({"source_app": "A", "destination_app": "B"}, 10),
        )

        samples = QueryDispatcher(config).execute(MetricKind.APP_TRAFFIC, "shop", "A", "")

        assert len(samples) == 1
        assert samples[0].value == 10.0
        query = prom.custom_query.call_args.kwargs["query"]
        assert 'app="A"' in query
        assert "[5m]" in query

    def test_connects_to_configured_address(self, config, mock_prometheus):
        QueryDispatcher(config).execute(MetricKind.NODE_LATENCY)
        assert mock_prometheus.call_args.kwargs["url"] == "http://prometheus.test:9090"

    def test_fresh_client_per_execute(self, config, mock_prometheus):
        dispatcher = QueryDispatcher(config)
        dispatcher.execute(MetricKind.NODE_LATENCY)
        dispatcher.execute(MetricKind.NODE_LATENCY)
        assert mock_prometheus.call_count == 2

    def test_averaged_variant(self, config, mock_prometheus):
        QueryDispatcher(config).execute(MetricKind.APP_CPU, "shop", averaged=True)
        query = mock_prometheus.return_value.custom_query.call_args.kwargs["query"]
        assert query.startswith("avg_over_time((")
        assert query.endswith(")[1h:5m])")

    def test_config_defaults_reach_builder(self, mock_prometheus, monkeypatch):
        monkeypatch.delenv("PROMETHEUS_ADDRESS", raising=False)
        config = ServerConfig(default_range_width="15m", average_window="3h")

        QueryDispatcher(config).execute(MetricKind.APP_MEMORY, "shop", averaged=True)

        query = mock_prometheus.return_value.custom_query.call_args.kwargs["query"]
        assert query.endswith(")[3h:15m])")


class TestDeadline:
    """Fixed deadline, shortened on request, never extended"""

    def test_default_deadline(self, config, mock_prometheus):
        QueryDispatcher(config).execute(MetricKind.NODE_LATENCY)
        assert mock_prometheus.return_value.custom_query.call_args.kwargs["timeout"] == 10.0

    def test_shorter_deadline(self, config, mock_prometheus):
        QueryDispatcher(config).execute(MetricKind.NODE_LATENCY, timeout=2.5)
        assert mock_prometheus.return_value.custom_query.call_args.kwargs["timeout"] == 2.5

    def test_longer_deadline_clamped(self, config, mock_prometheus):
        QueryDispatcher(config).execute(MetricKind.NODE_LATENCY, timeout=60)
        assert mock_prometheus.return_value.custom_query.call_args.kwargs["timeout"] == 10.0


class TestErrors:
    """Failures surface once with no retry"""

    def test_timeout_not_retried(self, config, mock_prometheus):
        prom = mock_prometheus.return_value
        prom.custom_query.side_effect = requests.exceptions.Timeout()

        with pytest.raises(QueryExecutionError, match="query execution failed"):
            QueryDispatcher(config).execute(MetricKind.APP_TRAFFIC, "shop")

        assert prom.custom_query.call_count == 1

    def test_client_construction_failure(self, config, mock_prometheus):
        mock_prometheus.side_effect = ValueError("bad url")

        with pytest.raises(QueryExecutionError, match="failed to create metrics client"):
            QueryDispatcher(config).execute(MetricKind.APP_CPU, "shop")

    def test_invalid_range_width_never_reaches_backend(self, config, mock_prometheus):
        with pytest.raises(InvalidQueryParameter):
            QueryDispatcher(config).execute(MetricKind.APP_CPU, "shop", range_width="5m]")

        mock_prometheus.return_value.custom_query.assert_not_called()


class TestDeadlineAgainstBackend:
    """Configured deadline enforced end to end"""

    def test_slow_backend_fails_at_deadline(self, slow_prometheus, monkeypatch):
        monkeypatch.delenv("PROMETHEUS_ADDRESS", raising=False)
        config = ServerConfig(prometheus_address=slow_prometheus(0.4), query_timeout=0.5)

        started = time.monotonic()
        with pytest.raises(QueryExecutionError, match="timed out"):
            QueryDispatcher(config).execute(MetricKind.NODE_LATENCY)

        assert time.monotonic() - started < 0.75
