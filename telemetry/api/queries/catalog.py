"""
Query catalogue.

One fixed PromQL template per metric kind. Templates use string.Template
placeholders; $selector is filled with the scoped or the all-entities label
matcher clause, which is the only thing that differs between the two views.
"""

from dataclasses import dataclass
from enum import Enum
from string import Template
from typing import Dict, Optional, Tuple

from .constants import (
    CONTAINER, DESTINATION_APP, DESTINATION_NODE, NODE_ID, ORIGIN_NODE, SOURCE_APP
)


class MetricKind(str, Enum):
    APP_TRAFFIC = "app-traffic"
    APP_CPU = "app-cpu"
    APP_MEMORY = "app-memory"
    NODE_LATENCY = "node-latency"
    NODE_AVAILABLE_MEMORY = "node-available-memory"
    NODE_AVAILABLE_CPU = "node-available-cpu"


@dataclass(frozen=True)
class QueryTemplate:
    kind: MetricKind
    description: str
    entity_type: str
    expression: Template
    scoped_selector: Template
    all_selector: Template
    # Pairwise metrics pivot over (source, destination); resource metrics over one label
    pair_labels: Optional[Tuple[str, str]] = None
    scalar_label: Optional[str] = None

    @property
    def is_pairwise(self) -> bool:
        return self.pair_labels is not None


_TRAFFIC = Template("""
    sum(
        rate(istio_request_bytes_sum{$selector}[$range_width])
        +
        rate(istio_response_bytes_sum{$selector}[$range_width])
    ) by (source_app, destination_app)
    or
    sum(
        rate(istio_tcp_sent_bytes_total{$selector}[$range_width])
        +
        rate(istio_tcp_received_bytes_total{$selector}[$range_width])
    ) by (source_app, destination_app)
""")

_CPU = Template(
    'avg by(container) (rate(container_cpu_usage_seconds_total{$selector}[$range_width])) * 1000'
)

_MEMORY = Template(
    'avg by(container) (avg_over_time(container_memory_working_set_bytes{$selector}[$range_width]) / (1024 * 1024))'
)

_LATENCY = Template(
    '(rate(node_latency_sum{$selector}[$range_width]) / rate(node_latency_count{$selector}[$range_width])) * 1000'
)

_AVAILABLE_MEMORY = Template(
    'avg by(node_id) (avg_over_time(node_memory_MemAvailable_bytes{$selector}[$range_width]) / (1024 * 1024))'
)

_AVAILABLE_CPU = Template(
    'sum by(node_id) (rate(node_cpu_seconds_total{$selector}[$range_width])) * 1000'
)

# Wraps any base expression for the averaged endpoints
AVERAGED = Template('avg_over_time(($expression)[$average_window:$range_width])')

_KNOWN_APP_FILTER = 'source_app!="unknown", destination_app!="unknown"'

CATALOG: Dict[MetricKind, QueryTemplate] = {
    MetricKind.APP_TRAFFIC: QueryTemplate(
        kind=MetricKind.APP_TRAFFIC,
        description="traffic",
        entity_type="app",
        expression=_TRAFFIC,
        scoped_selector=Template(f'app_group="$app_group", app="$entity", {_KNOWN_APP_FILTER}'),
        all_selector=Template(f'reporter="source", app_group="$app_group", {_KNOWN_APP_FILTER}'),
        pair_labels=(SOURCE_APP, DESTINATION_APP),
    ),
    MetricKind.APP_CPU: QueryTemplate(
        kind=MetricKind.APP_CPU,
        description="cpu usage",
        entity_type="app",
        expression=_CPU,
        scoped_selector=Template('container="$container"'),
        all_selector=Template('container=~"$container_pattern"'),
        scalar_label=CONTAINER,
    ),
    MetricKind.APP_MEMORY: QueryTemplate(
        kind=MetricKind.APP_MEMORY,
        description="memory usage",
        entity_type="app",
        expression=_MEMORY,
        scoped_selector=Template('container="$container"'),
        all_selector=Template('container=~"$container_pattern"'),
        scalar_label=CONTAINER,
    ),
    MetricKind.NODE_LATENCY: QueryTemplate(
        kind=MetricKind.NODE_LATENCY,
        description="latency",
        entity_type="node",
        expression=_LATENCY,
        scoped_selector=Template('origin_node="$entity", destination_node!="$entity"'),
        all_selector=Template(''),
        pair_labels=(ORIGIN_NODE, DESTINATION_NODE),
    ),
    MetricKind.NODE_AVAILABLE_MEMORY: QueryTemplate(
        kind=MetricKind.NODE_AVAILABLE_MEMORY,
        description="available memory",
        entity_type="node",
        expression=_AVAILABLE_MEMORY,
        scoped_selector=Template('node_id="$entity"'),
        all_selector=Template(''),
        scalar_label=NODE_ID,
    ),
    MetricKind.NODE_AVAILABLE_CPU: QueryTemplate(
        kind=MetricKind.NODE_AVAILABLE_CPU,
        description="available cpu",
        entity_type="node",
        expression=_AVAILABLE_CPU,
        scoped_selector=Template('mode="idle", node_id="$entity"'),
        all_selector=Template('mode="idle"'),
        scalar_label=NODE_ID,
    ),
}


def get_template(kind: MetricKind) -> QueryTemplate:
    return CATALOG[MetricKind(kind)]
