#!/usr/bin/env python3
"""
sophos-telemetry Query Audit Logger

Structured record of every query issued to the backend. Request values are
interpolated into PromQL, so each one is logged with who asked for it.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

from fastapi import Request


class AuditLogger:
    """Centralized audit logging for outbound queries."""

    def __init__(self):
        self.logger = logging.getLogger("telemetry.audit")

    def _log_event(self, event_type: str, details: Dict[str, Any], request: Optional[Request] = None):
        """Log a structured audit event."""
        audit_record = {
            "timestamp": int(time.time()),
            "event_type": event_type,
            "details": details
        }

        # Add request context if available
        if request:
            client_ip = request.client.host if request.client else "unknown"
            audit_record.update({
                "client_ip": client_ip,
                "user_agent": request.headers.get("user-agent", "unknown"),
                "method": request.method,
                "url": str(request.url)
            })

        # Log as JSON for structured parsing
        self.logger.info(json.dumps(audit_record))

    def query_issued(self, kind: str, scope_group: str, entity: Optional[str], range_width: Optional[str],
                     averaged: bool, request: Optional[Request] = None):
        """Log a metric query about to be sent to the backend."""
        self._log_event(
            event_type="query_issued",
            details={
                "kind": kind,
                "scope_group": scope_group,
                "entity": entity,
                "range_width": range_width,
                "averaged": averaged,
            },
            request=request
        )

    def query_failed(self, kind: str, status_code: int, reason: str, request: Optional[Request] = None):
        """Log a query that was answered with an error status."""
        self._log_event(
            event_type="query_failed",
            details={"kind": kind, "status_code": status_code, "reason": reason},
            request=request
        )


# Global audit logger instance
audit_logger = AuditLogger()
