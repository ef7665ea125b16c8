#!/usr/bin/env python3
"""
Telemetry API Dependencies - Query Parameter Parsing
"""

from fastapi import Query

from .schemas import MetricRequest


def app_metric_request(
    app_group: str = Query("", alias="app-group"),
    app: str = Query(""),
    range_width: str = Query("", alias="range-width"),
) -> MetricRequest:
    """Scope for application metrics. An empty app selects every app in the group."""
    return MetricRequest(scope_group=app_group, entity=app or None, range_width=range_width)


def node_metric_request(
    node: str = Query(""),
    range_width: str = Query("", alias="range-width"),
) -> MetricRequest:
    """Scope for node metrics. An empty node selects every node."""
    return MetricRequest(entity=node or None, range_width=range_width)
