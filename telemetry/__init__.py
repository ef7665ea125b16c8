"""sophos-telemetry: HTTP aggregation façade over Prometheus."""

__version__ = "1.0.0"
