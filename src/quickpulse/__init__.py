"""
QuickPulse: reporting client for a live metrics telemetry stream.

The client periodically asks a remote collector whether it wants live data
from this process (Ping) and, while subscribed, streams aggregated samples to
it (Submit). The collector can push filter and metric configuration back; an
ETag exchanged on every call keeps unchanged configuration from being sent
again.

The package is organized into:
- config: Configuration loading and validation
- models: Wire envelopes, samples and configuration structures
- validation: Input validation and error handling
- codec: JSON wire format
- metrics: Projection of samples onto wire metrics
- transport: Single-request HTTP transport
- service: The Ping/Submit reporting protocol
- system: Clock and top-CPU process snapshots

Usage:
    from quickpulse import create_service_client, SubscriptionState
    client = create_service_client()
    result = client.ping(ikey, datetime.now(timezone.utc), etag)
    if result.state is SubscriptionState.SUBSCRIBED:
        result = client.submit_samples(samples, ikey, etag)
"""

__version__ = "1.0.0"

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .service import QuickPulseServiceClient, create_service_client
from .transport import HttpTransport
from .logging_setup import configure_logging

# Model classes for external use
from .models import (
    AccumulatedValue,
    AggregationType,
    AppConfig,
    CollectionConfigurationInfo,
    ExchangeResult,
    MetricPoint,
    MonitoringDataPoint,
    ProcessCpuData,
    QuickPulseDataSample,
    SubscriptionState,
    TelemetryDocument,
)

# Validation utilities
from .validation import EnvelopeDecodeError, ValidationError

# System utilities
from .system import Clock, TopCpuCollector

__all__ = [
    "__version__",
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "QuickPulseServiceClient",
    "create_service_client",
    "HttpTransport",
    "configure_logging",
    # Models
    "AccumulatedValue",
    "AggregationType",
    "AppConfig",
    "CollectionConfigurationInfo",
    "ExchangeResult",
    "MetricPoint",
    "MonitoringDataPoint",
    "ProcessCpuData",
    "QuickPulseDataSample",
    "SubscriptionState",
    "TelemetryDocument",
    # Validation
    "EnvelopeDecodeError",
    "ValidationError",
    # System utilities
    "Clock",
    "TopCpuCollector",
]
