"""Prometheus API client for instant vector queries."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, List, Optional

import requests
from prometheus_api_client import PrometheusConnect
from prometheus_api_client.exceptions import PrometheusApiClientException
from pydantic import ValidationError
from urllib3.util.retry import Retry

from .errors import QueryExecutionError
from .schemas import Sample
from .queries.constants import QUERY_TIMEOUT_SECONDS

logger = logging.getLogger("telemetry.server")


def parse_vector(result: Any) -> List[Sample]:
    """
    Validate an instant-query result as a vector.

    Scalar and string results come back as a bare [ts, "v"] pair and matrix
    elements carry "values" instead of "value"; both are rejected.

    Raises:
        QueryExecutionError: If the result is not a vector
    """
    if not isinstance(result, list):
        raise QueryExecutionError(f"query result is not a vector: {result!r}")
    try:
        return [Sample.from_prometheus(item) for item in result]
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        raise QueryExecutionError(f"query result is not a vector: {e}") from e


class PrometheusClient:
    """Client for the Prometheus HTTP API."""

    def __init__(self, address: str, timeout: float = QUERY_TIMEOUT_SECONDS):
        """
        Initialize Prometheus client.

        Args:
            address: Prometheus base URL, e.g. http://prometheus:9090
            timeout: Deadline in seconds for each query

        Raises:
            QueryExecutionError: If the client cannot be constructed
        """
        self.address = address
        self.timeout = timeout
        try:
            # No retries: one attempt per request, bounded by the timeout
            self.prometheus = PrometheusConnect(
                url=address,
                disable_ssl=True,
                retry=Retry(total=0),
            )
        except Exception as e:
            raise QueryExecutionError(f"failed to create metrics client: {e}") from e

    def query_vector(self, query: str, at: Optional[float] = None) -> List[Sample]:
        """
        Run an instant query evaluated at `at` (now by default).

        The timeout caps the whole call: the request runs on a worker and is
        abandoned once the deadline passes, however slowly the backend answers.
        Prometheus also gets the timeout so it stops evaluating.

        Returns:
            Samples in backend order; empty when nothing matched

        Raises:
            QueryExecutionError: On transport failure, timeout, API error or bad result shape
        """
        params = {
            "time": at if at is not None else time.time(),
            "timeout": f"{self.timeout:g}",
        }
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(
                self.prometheus.custom_query, query=query, params=params, timeout=self.timeout
            )
            result = future.result(timeout=self.timeout)
        except (FuturesTimeoutError, requests.exceptions.Timeout) as e:
            raise QueryExecutionError(f"timed out after {self.timeout}s") from e
        except (requests.exceptions.RequestException, PrometheusApiClientException) as e:
            raise QueryExecutionError(str(e)) from e
        finally:
            executor.shutdown(wait=False)

        samples = parse_vector(result)
        logger.debug(f"Prometheus returned {len(samples)} samples")
        return samples
