#!/usr/bin/env python3
"""
Metrics Routes - Traffic, Resource Usage and Latency Between Entities

Every endpoint is the same dispatch-then-reshape handler, parameterized by
metric kind, request scope and whether the averaged template is used.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List

from fastapi import APIRouter, Depends, HTTPException, Request

from ..dependencies import app_metric_request, node_metric_request
from ..dispatcher import QueryDispatcher
from ..errors import InvalidQueryParameter, MetricNotFoundError, QueryExecutionError
from ..queries import MetricKind, get_template, reshape
from ..schemas import MetricRequest

# Support running as script or as package
try:
    from ...core.audit import audit_logger
except ImportError:
    from core.audit import audit_logger

logger = logging.getLogger("telemetry.server")


@dataclass(frozen=True)
class MetricEndpoint:
    path: str
    kind: MetricKind
    scope: Callable[..., MetricRequest]


ENDPOINTS: List[MetricEndpoint] = [
    MetricEndpoint("/metrics/app/traffic", MetricKind.APP_TRAFFIC, app_metric_request),
    MetricEndpoint("/metrics/app/cpu", MetricKind.APP_CPU, app_metric_request),
    MetricEndpoint("/metrics/app/memory", MetricKind.APP_MEMORY, app_metric_request),
    MetricEndpoint("/metrics/node/latencies", MetricKind.NODE_LATENCY, node_metric_request),
    MetricEndpoint("/metrics/node/available-memory", MetricKind.NODE_AVAILABLE_MEMORY, node_metric_request),
    MetricEndpoint("/metrics/node/available-cpu", MetricKind.NODE_AVAILABLE_CPU, node_metric_request),
]


def create_metrics_routes(dispatcher: QueryDispatcher) -> APIRouter:
    """Create metric query routes, each with an /average variant."""
    router = APIRouter()
    bare_scalar = dispatcher.config.bare_scalar_responses

    def add_endpoint(endpoint: MetricEndpoint, averaged: bool):
        template = get_template(endpoint.kind)
        path = f"{endpoint.path}/average" if averaged else endpoint.path

        def get_metric(request: Request, params: MetricRequest = Depends(endpoint.scope)):
            audit_logger.query_issued(
                kind=endpoint.kind.value,
                scope_group=params.scope_group,
                entity=params.entity,
                range_width=params.range_width,
                averaged=averaged,
                request=request
            )

            try:
                samples = dispatcher.execute(
                    endpoint.kind,
                    scope_group=params.scope_group,
                    entity=params.entity,
                    range_width=params.range_width,
                    averaged=averaged,
                )
                return reshape(template, samples, entity=params.entity, bare_scalar=bare_scalar)
            except InvalidQueryParameter as e:
                audit_logger.query_failed(endpoint.kind.value, 400, str(e), request=request)
                raise HTTPException(status_code=400, detail=str(e))
            except MetricNotFoundError as e:
                logger.debug(str(e))
                raise HTTPException(status_code=404, detail=str(e))
            except QueryExecutionError as e:
                audit_logger.query_failed(endpoint.kind.value, 500, e.reason, request=request)
                raise HTTPException(status_code=500, detail=str(e))

        get_metric.__name__ = f"get_{endpoint.kind.name.lower()}{'_average' if averaged else ''}"
        get_metric.__doc__ = f"{'Averaged ' if averaged else ''}{template.description} between entities."
        router.add_api_route(path, get_metric, methods=["GET"], name=get_metric.__name__)

    for endpoint in ENDPOINTS:
        add_endpoint(endpoint, averaged=False)
        add_endpoint(endpoint, averaged=True)

    return router
