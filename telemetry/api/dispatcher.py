"""
Query dispatch.

Resolves a metric kind to PromQL and runs it against Prometheus: one
outbound call per execute, no retries, bounded by the configured deadline.
Failures propagate unlogged; the route edge audits each one once.
"""

import logging
from typing import List, Optional

from .prometheus_client import PrometheusClient
from .schemas import Sample
from .queries.builder import QueryBuilder
from .queries.catalog import MetricKind

try:
    from ..core.config import ServerConfig
except ImportError:
    from core.config import ServerConfig

logger = logging.getLogger("telemetry.server")


class QueryDispatcher:
    """Builds and executes catalogue queries for one configured backend."""

    def __init__(self, config: ServerConfig, builder: Optional[QueryBuilder] = None):
        self.config = config
        self.builder = builder or QueryBuilder(
            default_range_width=config.default_range_width,
            average_window=config.average_window,
        )

    def _deadline(self, timeout: Optional[float]) -> float:
        # A caller may shorten the deadline, never extend it
        if timeout is None:
            return self.config.query_timeout
        return min(timeout, self.config.query_timeout)

    def execute(self, kind: MetricKind, scope_group: str = "", entity: Optional[str] = None,
                range_width: Optional[str] = None, averaged: bool = False,
                timeout: Optional[float] = None) -> List[Sample]:
        """
        Execute one metric query.

        Args:
            kind: Metric kind from the catalogue
            scope_group: Application group
            entity: App or node name, None for the all-entities view
            range_width: PromQL duration, "" or None for the default
            averaged: Use the averaged variant of the template
            timeout: Optional shorter deadline in seconds

        Returns:
            Samples from the backend; an empty list is a valid result

        Raises:
            InvalidQueryParameter: If range_width is not a duration
            QueryExecutionError: On any backend failure
        """
        query = self.builder.build(kind, scope_group, entity, range_width, averaged=averaged)
        client = PrometheusClient(self.config.prometheus_address, timeout=self._deadline(timeout))
        samples = client.query_vector(query)

        logger.debug(f"{MetricKind(kind).value} query returned {len(samples)} samples")
        return samples
