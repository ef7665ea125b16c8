#!/usr/bin/env python3
"""
Telemetry API Schemas - Pydantic Models for Backend Samples and Request Scope
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Sample(BaseModel):
    """One labeled observation of an instant-query vector."""
    model_config = ConfigDict(frozen=True)

    labels: Dict[str, str] = Field(default_factory=dict)
    value: float
    timestamp: Optional[float] = None

    @classmethod
    def from_prometheus(cls, item: Dict[str, Any]) -> "Sample":
        """Build from a vector element: {"metric": {...}, "value": [ts, "v"]}."""
        timestamp, value = item["value"]
        return cls(labels=item["metric"], value=value, timestamp=timestamp)


class MetricRequest(BaseModel):
    """Query parameters shared by every metric endpoint."""
    model_config = ConfigDict(frozen=True)

    scope_group: str = ""
    entity: Optional[str] = None
    range_width: Optional[str] = None
