"""
Metric Query Modules

Organized query utilities split by concern:
- constants.py: Label vocabulary and defaults
- catalog.py: Fixed PromQL template per metric kind
- builder.py: Parameter substitution and escaping
- pivot.py: Reshaping sample vectors into JSON maps
"""

from .catalog import CATALOG, MetricKind, QueryTemplate, get_template
from .builder import QueryBuilder, escape_label_value, escape_regex
from .pivot import (
    pivot_all_pairs, pivot_scalar, pivot_single_entity, reshape, single_scalar
)

__all__ = [
    # Catalogue
    'CATALOG',
    'MetricKind',
    'QueryTemplate',
    'get_template',

    # Query building
    'QueryBuilder',
    'escape_label_value',
    'escape_regex',

    # Reshaping
    'pivot_all_pairs',
    'pivot_scalar',
    'pivot_single_entity',
    'reshape',
    'single_scalar',
]
