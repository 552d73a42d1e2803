"""
Projection of aggregated samples onto wire metrics.

A sample becomes an ordered list of `MetricPoint`s: the nine built-in
metrics first, then one point per raw performance counter, then one point
per operationalized metric. Every value is rounded to four decimal places
because the collector only accepts bounded precision.
"""

import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Callable, List, Optional, Tuple

from ..constants import TOP_CPU_MAX_PROCESSES
from ..models.monitoring import MetricPoint, ProcessCpuData
from ..models.sample import QuickPulseDataSample, TelemetryDocument
from ..validation import ErrorSeverity, handle_error
from .aggregation import aggregate

logger = logging.getLogger(__name__)

_FOUR_PLACES = Decimal("0.0001")
# Wide enough to quantize any finite double to four places.
_ROUNDING_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)

# (wire name, rate attribute, weight attribute or None for weight 1)
BUILT_IN_METRICS: Tuple[Tuple[str, str, Optional[str]], ...] = (
    (r"\ApplicationInsights\Requests/Sec", "ai_requests_per_second", None),
    (r"\ApplicationInsights\Request Duration", "ai_request_duration_ave_in_ms", "ai_requests"),
    (r"\ApplicationInsights\Requests Failed/Sec", "ai_requests_failed_per_second", None),
    (r"\ApplicationInsights\Requests Succeeded/Sec", "ai_requests_succeeded_per_second", None),
    (r"\ApplicationInsights\Dependency Calls/Sec", "ai_dependency_calls_per_second", None),
    (r"\ApplicationInsights\Dependency Call Duration", "ai_dependency_call_duration_ave_in_ms", "ai_dependency_calls"),
    (r"\ApplicationInsights\Dependency Calls Failed/Sec", "ai_dependency_calls_failed_per_second", None),
    (r"\ApplicationInsights\Dependency Calls Succeeded/Sec", "ai_dependency_calls_succeeded_per_second", None),
    (r"\ApplicationInsights\Exceptions/Sec", "ai_exceptions_per_second", None),
)


def round_metric_value(value: float) -> float:
    """
    Round to 4 decimal places, half away from zero.

    Rounding works on the shortest decimal representation of the float, so
    0.12345 becomes 0.1235 even though its binary value is slightly below
    the midpoint. Non-finite values are returned unchanged.

    Examples:
        >>> round_metric_value(0.12344999)
        0.1234
        >>> round_metric_value(-0.00005)
        -0.0001
    """
    value = float(value)
    if not math.isfinite(value):
        return value
    return float(Decimal(repr(value)).quantize(_FOUR_PLACES, context=_ROUNDING_CONTEXT))


def create_default_metrics(sample: QuickPulseDataSample) -> List[MetricPoint]:
    """Build the nine built-in metrics from the sample's pre-aggregated fields."""
    points = []
    for name, value_attr, weight_attr in BUILT_IN_METRICS:
        weight = int(getattr(sample, weight_attr)) if weight_attr else 1
        points.append(
            MetricPoint(name=name, value=round_metric_value(getattr(sample, value_attr)), weight=weight)
        )
    return points


def create_counter_metrics(sample: QuickPulseDataSample) -> List[MetricPoint]:
    """One metric per raw performance counter, in collection order."""
    return [
        MetricPoint(name=name, value=round_metric_value(value), weight=1)
        for name, value in sample.perf_counters.items()
    ]


def create_operationalized_metrics(
    sample: QuickPulseDataSample,
    aggregator: Callable = aggregate,
) -> List[MetricPoint]:
    """
    One metric per operationalized accumulator.

    A metric whose aggregation fails is skipped and logged; the others are
    still emitted.

    Args:
        sample: The sample holding the accumulators
        aggregator: Function folding (values, aggregation_type) into a float

    Returns:
        Metric points for every accumulator that aggregated successfully
    """
    points = []
    for accumulated in sample.metric_accumulators:
        try:
            values = list(accumulated.values)
            points.append(
                MetricPoint(
                    name=accumulated.metric_id,
                    value=round_metric_value(aggregator(values, accumulated.aggregation_type)),
                    weight=len(values),
                )
            )
        except Exception as e:
            handle_error(
                error=e,
                context=f"aggregating operationalized metric '{getattr(accumulated, 'metric_id', '?')}', skipping it",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
    return points


def project_metrics(sample: QuickPulseDataSample) -> List[MetricPoint]:
    """
    Derive the full ordered metric list for a sample.

    Returns:
        Built-in metrics, then performance counters, then operationalized metrics
    """
    metrics = create_default_metrics(sample)
    metrics.extend(create_counter_metrics(sample))
    metrics.extend(create_operationalized_metrics(sample))
    return metrics


def project_documents(sample: QuickPulseDataSample) -> List[TelemetryDocument]:
    """Telemetry documents newest first, for the live feed."""
    return list(reversed(sample.telemetry_documents))


def project_top_cpu(sample: QuickPulseDataSample) -> Optional[List[ProcessCpuData]]:
    """
    Top CPU processes as wire entries, or None when the sample has none.

    At most TOP_CPU_MAX_PROCESSES entries are kept, in the order the sample
    lists them.
    """
    processes = [
        ProcessCpuData(process_name=name, cpu_percentage=percent)
        for name, percent in sample.top_cpu_data[:TOP_CPU_MAX_PROCESSES]
    ]
    return processes or None
