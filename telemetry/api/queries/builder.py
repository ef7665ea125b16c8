"""
Parameterized PromQL query builder.

Renders a catalogue template from an explicit substitution map. Request
values are escaped here, at the one place they enter query text.
"""

import logging
from typing import Dict, Optional

from .catalog import AVERAGED, MetricKind, get_template
from .constants import (
    DEFAULT_AVERAGE_WINDOW, DEFAULT_RANGE_WIDTH, DURATION_PATTERN, REGEX_SPECIALS
)
from ..errors import InvalidQueryParameter

logger = logging.getLogger("telemetry.server")


def escape_label_value(value: str) -> str:
    """Escape a value for use inside a double-quoted PromQL string."""
    return (value.replace("\\", "\\\\")
                 .replace('"', '\\"')
                 .replace("\n", "\\n"))


def escape_regex(value: str) -> str:
    """Escape RE2 metacharacters so the value matches literally in =~ matchers."""
    return "".join(f"\\{c}" if c in REGEX_SPECIALS else c for c in value)


class QueryBuilder:
    """Turns (kind, scope, entity, range width) into PromQL text."""

    def __init__(self, default_range_width: str = DEFAULT_RANGE_WIDTH,
                 average_window: str = DEFAULT_AVERAGE_WINDOW):
        self.default_range_width = default_range_width
        self.average_window = average_window

    def resolve_range_width(self, range_width: Optional[str]) -> str:
        """Apply the default for a missing or empty range width, then validate it."""
        if range_width is None or range_width == "":
            return self.default_range_width
        if not DURATION_PATTERN.fullmatch(range_width):
            raise InvalidQueryParameter(f"invalid range-width: {range_width!r}")
        return range_width

    def substitutions(self, scope_group: str, entity: Optional[str]) -> Dict[str, str]:
        """Escaped values available to selector templates."""
        scope_group = scope_group or ""
        entity = entity or ""
        return {
            "app_group": escape_label_value(scope_group),
            "entity": escape_label_value(entity),
            "container": escape_label_value(f"{scope_group}-{entity}"),
            "container_pattern": escape_label_value(f"{escape_regex(scope_group)}-.*"),
        }

    def build(self, kind: MetricKind, scope_group: str = "", entity: Optional[str] = None,
              range_width: Optional[str] = None, averaged: bool = False) -> str:
        """
        Render the query for one metric kind.

        Args:
            kind: Metric kind from the catalogue
            scope_group: Application group (ignored by node templates)
            entity: App or node name; None or "" selects the all-entities view
            range_width: PromQL duration; defaults when None or ""
            averaged: Wrap the expression in avg_over_time over the average window

        Returns:
            PromQL query text
        """
        template = get_template(kind)
        width = self.resolve_range_width(range_width)
        values = self.substitutions(scope_group, entity)

        selector_template = template.scoped_selector if entity else template.all_selector
        selector = selector_template.substitute(values)
        query = template.expression.substitute(selector=selector, range_width=width)

        if averaged:
            query = AVERAGED.substitute(
                expression=query.strip(),
                average_window=self.average_window,
                range_width=width,
            )

        logger.debug(f"Built {template.kind.value} query (averaged={averaged}): {query.strip()}")
        return query.strip()
