"""
Upstream sample and telemetry document models.

These types are produced by the aggregation engine outside this package.
The reporting client only reads them: `QuickPulseDataSample` carries the
already-aggregated rates for one collection interval, and the telemetry
document classes carry the recent operations surfaced in the live feed.

Document fields carry their wire name in the dataclass field metadata so
the codec can serialize any document kind without special cases.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple, Union


def _wire(name: str, default=None, **kwargs):
    return field(default=default, metadata={"wire": name}, **kwargs)


class AggregationType(Enum):
    """Aggregation declared by an operationalized metric definition."""

    AVG = "Avg"
    SUM = "Sum"
    MIN = "Min"
    MAX = "Max"

    @classmethod
    def parse(cls, value: Union["AggregationType", str]) -> "AggregationType":
        """
        Parse an aggregation type from its wire name.

        Raises:
            ValueError: If the name is not a known aggregation
        """
        if isinstance(value, cls):
            return value
        for member in cls:
            if isinstance(value, str) and value.lower() == member.value.lower():
                return member
        raise ValueError(f"Unknown aggregation type: {value!r}")


@dataclass
class AccumulatedValue:
    """Values accumulated for one operationalized metric during an interval."""

    metric_id: str
    aggregation_type: Union[AggregationType, str]
    values: List[float] = field(default_factory=list)


# --- Telemetry documents ---


@dataclass(frozen=True)
class TelemetryDocument:
    """Fields shared by every live-feed document kind."""

    document_type: ClassVar[str] = ""

    id: Optional[str] = _wire("Id")
    version: str = _wire("Version", "1.0")
    timestamp: Optional[datetime] = _wire("Timestamp")
    document_stream_ids: Tuple[str, ...] = _wire("DocumentStreamIds", ())
    # Custom properties as ordered (key, value) pairs.
    properties: Tuple[Tuple[str, str], ...] = _wire("Properties", ())


@dataclass(frozen=True)
class RequestTelemetryDocument(TelemetryDocument):
    document_type: ClassVar[str] = "Request"

    name: Optional[str] = _wire("Name")
    success: Optional[bool] = _wire("Success")
    duration: Optional[timedelta] = _wire("Duration")
    response_code: Optional[str] = _wire("ResponseCode")
    url: Optional[str] = _wire("Url")


@dataclass(frozen=True)
class DependencyTelemetryDocument(TelemetryDocument):
    document_type: ClassVar[str] = "RemoteDependency"

    name: Optional[str] = _wire("Name")
    target: Optional[str] = _wire("Target")
    success: Optional[bool] = _wire("Success")
    duration: Optional[timedelta] = _wire("Duration")
    result_code: Optional[str] = _wire("ResultCode")
    command_name: Optional[str] = _wire("CommandName")
    dependency_type_name: Optional[str] = _wire("DependencyTypeName")


@dataclass(frozen=True)
class ExceptionTelemetryDocument(TelemetryDocument):
    document_type: ClassVar[str] = "Exception"

    exception: Optional[str] = _wire("Exception")
    exception_message: Optional[str] = _wire("ExceptionMessage")
    exception_type: Optional[str] = _wire("ExceptionType")


@dataclass(frozen=True)
class EventTelemetryDocument(TelemetryDocument):
    document_type: ClassVar[str] = "Event"

    name: Optional[str] = _wire("Name")


@dataclass(frozen=True)
class TraceTelemetryDocument(TelemetryDocument):
    document_type: ClassVar[str] = "Trace"

    message: Optional[str] = _wire("Message")
    severity_level: Optional[str] = _wire("SeverityLevel")


# --- Sample ---


@dataclass
class QuickPulseDataSample:
    """
    Aggregated data for one collection interval.

    Rates are per second over the interval. `ai_requests` and
    `ai_dependency_calls` are the raw counts behind the duration averages and
    become the weights of the duration metrics.
    """

    end_timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Requests
    ai_requests: int = 0
    ai_requests_per_second: float = 0.0
    ai_request_duration_ave_in_ms: float = 0.0
    ai_requests_failed_per_second: float = 0.0
    ai_requests_succeeded_per_second: float = 0.0

    # Dependencies
    ai_dependency_calls: int = 0
    ai_dependency_calls_per_second: float = 0.0
    ai_dependency_call_duration_ave_in_ms: float = 0.0
    ai_dependency_calls_failed_per_second: float = 0.0
    ai_dependency_calls_succeeded_per_second: float = 0.0

    # Exceptions
    ai_exceptions_per_second: float = 0.0

    # Raw performance counters, name -> value, in collection order.
    perf_counters: Dict[str, float] = field(default_factory=dict)
    metric_accumulators: List[AccumulatedValue] = field(default_factory=list)
    # Chronological order, oldest first.
    telemetry_documents: List[TelemetryDocument] = field(default_factory=list)

    top_cpu_data: List[Tuple[str, float]] = field(default_factory=list)
    top_cpu_data_access_denied: bool = False
