"""
Telemetry API error types.

Every backend failure collapses into QueryExecutionError; an empty result
for a scoped scalar metric is a MetricNotFoundError and never a server error.
"""


class TelemetryError(Exception):
    """Base class for telemetry errors."""


class QueryExecutionError(TelemetryError):
    """Backend unreachable, timed out, or returned something other than a vector."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"query execution failed: {reason}")


class MetricNotFoundError(TelemetryError):
    """A query scoped to one entity returned no series."""

    def __init__(self, description: str, entity_type: str, entity: str):
        self.description = description
        self.entity_type = entity_type
        self.entity = entity
        super().__init__(f"{description} metrics for {entity_type} {entity} not found")


class InvalidQueryParameter(TelemetryError):
    """A request parameter cannot be substituted into a query."""
