"""
Aggregation of operationalized metric series.
"""

from typing import Sequence, Union

from ..models.sample import AggregationType


def aggregate(values: Sequence[float], aggregation_type: Union[AggregationType, str]) -> float:
    """
    Fold an accumulated series into a single value.

    An empty series aggregates to 0 for every aggregation type.

    Args:
        values: Values accumulated during the interval
        aggregation_type: An AggregationType or its wire name ("Avg", "Sum", ...)

    Returns:
        The aggregated value

    Raises:
        ValueError: If the aggregation type is unknown
    """
    kind = AggregationType.parse(aggregation_type)

    if kind is AggregationType.SUM:
        return float(sum(values))
    if not values:
        return 0.0
    if kind is AggregationType.AVG:
        return float(sum(values)) / len(values)
    if kind is AggregationType.MIN:
        return float(min(values))
    if kind is AggregationType.MAX:
        return float(max(values))

    raise ValueError(f"Unsupported aggregation type: {kind}")
