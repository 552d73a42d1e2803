"""
Wire-level data models for the live metrics stream.

These dataclasses mirror the envelopes exchanged with the collector. They
are immutable: a `MonitoringDataPoint` is built fresh for every Ping and for
every sample on Submit, serialized once, and then dropped.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

# Schema version stamped on every envelope. The collector uses it to reject
# or adapt to payloads built against a different schema.
CURRENT_INVARIANT_VERSION = 3


@dataclass(frozen=True)
class MetricPoint:
    """
    A single named metric value.

    `weight` is the number of raw observations folded into `value`; the
    collector uses it to re-aggregate correctly across instances.
    """

    name: str
    value: float
    weight: int


@dataclass(frozen=True)
class ProcessCpuData:
    """CPU usage of one of the top CPU-consuming processes."""

    process_name: str
    cpu_percentage: float


@dataclass(frozen=True)
class MonitoringDataPoint:
    """
    One reporting envelope.

    The Ping envelope leaves `instrumentation_key` and `metrics` empty; the
    tenant key travels in the query string instead.
    """

    # Identity
    version: str
    instance: str
    stream_id: str
    machine_name: str
    timestamp: datetime
    is_web_app: bool = False
    invariant_version: int = CURRENT_INVARIANT_VERSION
    instrumentation_key: Optional[str] = None

    # Payload
    metrics: Optional[Tuple[MetricPoint, ...]] = None
    documents: Optional[Tuple[Any, ...]] = None
    top_cpu_processes: Optional[Tuple[ProcessCpuData, ...]] = None
    top_cpu_data_access_denied: bool = False
    collection_configuration_errors: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class CollectionConfigurationInfo:
    """
    Filter and metric configuration pushed down by the collector.

    The client never interprets the configuration. It only caches it and
    compares `etag` values; `raw` keeps the decoded JSON object as received.
    """

    etag: Optional[str]
    metrics: Tuple[Dict[str, Any], ...] = ()
    document_streams: Tuple[Dict[str, Any], ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)


class SubscriptionState(Enum):
    """
    Outcome of one Ping or Submit exchange.

    INDETERMINATE means the exchange failed or the response could not be
    read. Callers must treat it as "no change, try again later", never as
    NOT_SUBSCRIBED.
    """

    SUBSCRIBED = "subscribed"
    NOT_SUBSCRIBED = "not_subscribed"
    INDETERMINATE = "indeterminate"

    @property
    def is_subscribed(self) -> Optional[bool]:
        """Tri-state boolean view: True, False, or None when indeterminate."""
        if self is SubscriptionState.SUBSCRIBED:
            return True
        if self is SubscriptionState.NOT_SUBSCRIBED:
            return False
        return None


@dataclass(frozen=True)
class ExchangeResult:
    """Subscription state plus any configuration update from one exchange."""

    state: SubscriptionState
    configuration: Optional[CollectionConfigurationInfo] = None

    @classmethod
    def indeterminate(cls) -> "ExchangeResult":
        return cls(SubscriptionState.INDETERMINATE, None)

