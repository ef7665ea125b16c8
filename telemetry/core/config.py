#!/usr/bin/env python3
"""
sophos-telemetry Server Configuration

Loaded once at startup and handed to the app factory; nothing reads it
from module state afterwards.

Priority for the Prometheus address:
1. PROMETHEUS_ADDRESS environment variable (or .env file)
2. prometheus_address in the YAML config
3. Default http://localhost:9090
"""

import logging
import os
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Support running as script or as package
try:
    from ..api.queries.constants import (
        DEFAULT_AVERAGE_WINDOW, DEFAULT_RANGE_WIDTH, DURATION_PATTERN, QUERY_TIMEOUT_SECONDS
    )
except ImportError:
    from api.queries.constants import (
        DEFAULT_AVERAGE_WINDOW, DEFAULT_RANGE_WIDTH, DURATION_PATTERN, QUERY_TIMEOUT_SECONDS
    )

logger = logging.getLogger("telemetry.server")

PROMETHEUS_ADDRESS_ENV = "PROMETHEUS_ADDRESS"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    # Backend
    prometheus_address: str = "http://localhost:9090"
    query_timeout: float = QUERY_TIMEOUT_SECONDS
    # Query policy
    default_range_width: str = DEFAULT_RANGE_WIDTH
    average_window: str = DEFAULT_AVERAGE_WINDOW
    # Single-entity scalar endpoints answer with a bare number instead of {entity: value}
    bare_scalar_responses: bool = True

    @field_validator("default_range_width", "average_window")
    @classmethod
    def _check_duration(cls, value: str) -> str:
        if not DURATION_PATTERN.fullmatch(value):
            raise ValueError(f"not a valid duration: {value!r}")
        return value

    @field_validator("query_timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("query_timeout must be positive")
        return value


def load_config_from(path: Optional[str]) -> ServerConfig:
    """Load server configuration from YAML file, then apply environment overrides."""
    data = {}
    if path and os.path.exists(path):
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        logger.info(f"Loaded configuration from: {path}")
    else:
        logger.info("Config file not found, using defaults")

    load_dotenv()
    address = os.environ.get(PROMETHEUS_ADDRESS_ENV)
    if address:
        data["prometheus_address"] = address

    return ServerConfig(**data)
