"""
Result reshaping.

Pure functions that fold a sample vector into the JSON shapes served by
the metric endpoints. Each is a single pass; duplicate keys are
last-write-wins.
"""

from typing import Dict, List, Optional, Union

from ..errors import MetricNotFoundError
from ..schemas import Sample
from .catalog import QueryTemplate

AdjacencyMap = Dict[str, Dict[str, float]]
ScalarMap = Dict[str, float]


def pivot_single_entity(samples: List[Sample], entity: str,
                        source_label: str, destination_label: str) -> ScalarMap:
    """Map the peer on the other side of `entity` to the sample value. Self-pairs are skipped."""
    values: ScalarMap = {}
    for sample in samples:
        source = sample.labels.get(source_label)
        destination = sample.labels.get(destination_label)
        if source == destination:
            continue
        if source == entity:
            values[destination] = sample.value
        elif destination == entity:
            values[source] = sample.value
    return values


def pivot_all_pairs(samples: List[Sample], source_label: str, destination_label: str) -> AdjacencyMap:
    """
    Build a symmetric adjacency map.

    Each sample is stored under [source][destination] and [destination][source];
    a missing pair means nothing was observed in the window, not zero.
    """
    values: AdjacencyMap = {}
    for sample in samples:
        source = sample.labels.get(source_label)
        destination = sample.labels.get(destination_label)
        if source not in values:
            values[source] = {}
        values[source][destination] = sample.value
        if destination not in values:
            values[destination] = {}
        values[destination][source] = sample.value
    return values


def pivot_scalar(samples: List[Sample], label_key: str) -> ScalarMap:
    return {sample.labels.get(label_key): sample.value for sample in samples}


def single_scalar(samples: List[Sample], description: str, entity: str,
                  bare: bool = True, entity_type: str = "app") -> Union[float, ScalarMap]:
    """
    Value of a scalar metric scoped to one entity.

    Raises:
        MetricNotFoundError: the entity has no matching series
    """
    if len(samples) < 1:
        raise MetricNotFoundError(description, entity_type, entity)
    if bare:
        return samples[0].value
    return {entity: samples[0].value}


def reshape(template: QueryTemplate, samples: List[Sample], entity: Optional[str] = None,
            bare_scalar: bool = True) -> Union[float, ScalarMap, AdjacencyMap]:
    """Pick the pivot for a template and request shape."""
    if template.is_pairwise:
        source_label, destination_label = template.pair_labels
        if entity:
            return pivot_single_entity(samples, entity, source_label, destination_label)
        return pivot_all_pairs(samples, source_label, destination_label)

    if entity:
        return single_scalar(samples, template.description, entity, bare=bare_scalar,
                             entity_type=template.entity_type)
    return pivot_scalar(samples, template.scalar_label)
