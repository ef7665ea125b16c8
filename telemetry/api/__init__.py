"""HTTP API: Prometheus client, query catalogue, result reshaping and routes."""
