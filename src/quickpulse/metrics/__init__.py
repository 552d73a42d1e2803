"""
Metric projection for the live metrics stream.

Turns an aggregated `QuickPulseDataSample` into the metric points,
documents and top-CPU entries of a wire envelope.
"""

from .aggregation import aggregate
from .projection import (
    BUILT_IN_METRICS,
    create_counter_metrics,
    create_default_metrics,
    create_operationalized_metrics,
    project_documents,
    project_metrics,
    project_top_cpu,
    round_metric_value,
)

__all__ = [
    "aggregate",
    "BUILT_IN_METRICS",
    "create_counter_metrics",
    "create_default_metrics",
    "create_operationalized_metrics",
    "project_documents",
    "project_metrics",
    "project_top_cpu",
    "round_metric_value",
]
