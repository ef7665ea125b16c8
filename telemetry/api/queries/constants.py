"""
Query constants and label vocabulary.

Centralized label names and defaults shared by the query catalogue,
the builder and the result reshaper.
"""

import re

# Label vocabulary returned by the backend
SOURCE_APP = "source_app"
DESTINATION_APP = "destination_app"
CONTAINER = "container"
ORIGIN_NODE = "origin_node"
DESTINATION_NODE = "destination_node"
NODE_ID = "node_id"

DEFAULT_RANGE_WIDTH = "5m"
DEFAULT_AVERAGE_WINDOW = "1h"
QUERY_TIMEOUT_SECONDS = 10.0

# PromQL duration, e.g. "5m", "1h30m", "500ms"
DURATION_PATTERN = re.compile(r"^(\d+(ms|[smhdwy]))+$")

# RE2 metacharacters escaped inside =~ matchers
REGEX_SPECIALS = frozenset("\\.+*?()|[]{}^$")
