#!/usr/bin/env python3
"""
Health Routes - Liveness and Configured Backend
"""

import time

from fastapi import APIRouter

# Support running as script or as package
try:
    from ...core.config import ServerConfig
except ImportError:
    from core.config import ServerConfig


def create_health_routes(config: ServerConfig) -> APIRouter:
    """Create health check routes."""
    router = APIRouter()

    @router.get("/health")
    def health():
        """Health check endpoint. Does not contact the backend."""
        return {
            "status": "ok",
            "prometheus_address": config.prometheus_address,
            "timestamp": int(time.time())
        }

    return router
