#!/usr/bin/env python3
"""
sophos-telemetry FastAPI application factory
"""

import logging

from fastapi import FastAPI

# Support running as script or as package
try:
    from .. import __version__
    from ..api.dispatcher import QueryDispatcher
    from ..api.routes.health_routes import create_health_routes
    from ..api.routes.metrics_routes import create_metrics_routes
    from .config import ServerConfig
except ImportError:
    from api.dispatcher import QueryDispatcher
    from api.routes.health_routes import create_health_routes
    from api.routes.metrics_routes import create_metrics_routes
    from core.config import ServerConfig
    __version__ = "1.0.0"

logger = logging.getLogger("telemetry.server")


def setup_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def create_app(config: ServerConfig) -> FastAPI:
    """Create the FastAPI app with all routes bound to one dispatcher."""
    app = FastAPI(title="sophos-telemetry", version=__version__)

    dispatcher = QueryDispatcher(config)
    app.include_router(create_metrics_routes(dispatcher))
    app.include_router(create_health_routes(config))

    logger.info(f"Serving metrics from Prometheus at {config.prometheus_address}")
    return app
