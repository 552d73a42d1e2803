"""
Data models for the live metrics reporting client.

Configuration Models:
- Collector endpoint and timeout
- Stream identity reported on every exchange
- Logging settings

Wire Models:
- Monitoring envelopes, metric points and top-CPU entries
- Collector configuration and its ETag
- Subscription state and exchange results

Sample Models:
- Aggregated samples and operationalized metric accumulators
- Telemetry documents surfaced in the live feed
"""

# Configuration models
from .config import AppConfig, IdentityConfig, LoggingConfig, ServiceConfig

# Wire models
from .monitoring import (
    CURRENT_INVARIANT_VERSION,
    CollectionConfigurationInfo,
    ExchangeResult,
    MetricPoint,
    MonitoringDataPoint,
    ProcessCpuData,
    SubscriptionState,
)

# Sample models
from .sample import (
    AccumulatedValue,
    AggregationType,
    DependencyTelemetryDocument,
    EventTelemetryDocument,
    ExceptionTelemetryDocument,
    QuickPulseDataSample,
    RequestTelemetryDocument,
    TelemetryDocument,
    TraceTelemetryDocument,
)

__all__ = [
    # Configuration
    "AppConfig",
    "IdentityConfig",
    "LoggingConfig",
    "ServiceConfig",
    # Wire
    "CURRENT_INVARIANT_VERSION",
    "CollectionConfigurationInfo",
    "ExchangeResult",
    "MetricPoint",
    "MonitoringDataPoint",
    "ProcessCpuData",
    "SubscriptionState",
    # Samples
    "AccumulatedValue",
    "AggregationType",
    "DependencyTelemetryDocument",
    "EventTelemetryDocument",
    "ExceptionTelemetryDocument",
    "QuickPulseDataSample",
    "RequestTelemetryDocument",
    "TelemetryDocument",
    "TraceTelemetryDocument",
]
