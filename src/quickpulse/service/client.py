"""
Ping/Submit reporting protocol for the live metrics collector.

The caller owns the cadence and the cached configuration ETag:

- while not subscribed it calls `ping` at a slow cadence;
- while subscribed it calls `submit_samples` at a fast cadence, and falls
  back to pinging whenever a call reports NOT_SUBSCRIBED or INDETERMINATE.

Each call is self-contained. The client keeps only read-only identity and
never retains samples or configuration between calls. The collector sends a
configuration body only when its ETag differs from the one the caller holds,
so the common exchange stays small.
"""

import logging
from datetime import datetime
from typing import BinaryIO, Iterable, Optional, Sequence
from urllib.parse import quote

from ..codec import read_configuration, write_data_point, write_data_points
from ..constants import (
    CONFIGURATION_ETAG_HEADER,
    PING_PATH,
    SUBMIT_PATH,
    SUBSCRIBED_HEADER,
)
from ..metrics import project_documents, project_metrics, project_top_cpu
from ..models.monitoring import (
    CollectionConfigurationInfo,
    ExchangeResult,
    MonitoringDataPoint,
    SubscriptionState,
)
from ..models.sample import QuickPulseDataSample
from ..system.clock import ensure_utc
from ..transport import CollectorResponse, HttpTransport
from ..validation import ErrorSeverity, handle_error, handle_service_error

logger = logging.getLogger(__name__)


def parse_subscribed_header(value: Optional[str]) -> SubscriptionState:
    """
    Interpret the subscribed response header.

    Accepts "true"/"false" in any case with surrounding whitespace. A missing
    or unparsable header is INDETERMINATE, never NOT_SUBSCRIBED, so a
    formatting glitch cannot switch a valid subscription off.
    """
    if value is None:
        return SubscriptionState.INDETERMINATE
    normalized = value.strip().lower()
    if normalized == "true":
        return SubscriptionState.SUBSCRIBED
    if normalized == "false":
        return SubscriptionState.NOT_SUBSCRIBED
    return SubscriptionState.INDETERMINATE


def _query_path(path: str, instrumentation_key: Optional[str]) -> str:
    return f"{path}?ikey={quote(instrumentation_key or '', safe='')}"


class QuickPulseServiceClient:
    """
    Client for the live metrics service.

    Both verbs return an `ExchangeResult` and never raise.
    """

    def __init__(
        self,
        transport: HttpTransport,
        version: str,
        is_web_app: bool = False,
    ):
        """
        Args:
            transport: Transport carrying the service URI and stream identity
            version: Version string stamped on every envelope
            is_web_app: Whether the host process is a hosted web application
        """
        self.transport = transport
        self.version = version
        self.is_web_app = is_web_app

    @property
    def service_uri(self) -> str:
        return self.transport.service_uri

    # --- Verbs ---

    def ping(
        self,
        instrumentation_key: str,
        timestamp: datetime,
        configuration_etag: Optional[str],
    ) -> ExchangeResult:
        """
        Ask the collector whether it wants live data from this stream.

        Args:
            instrumentation_key: Tenant key, sent in the query string only
            timestamp: Time reported in the envelope
            configuration_etag: ETag of the configuration the caller holds

        Returns:
            Subscription state and a new configuration if the collector sent one
        """
        try:
            point = self.build_ping_data_point(timestamp)
            response = self.transport.send(
                "POST",
                _query_path(PING_PATH, instrumentation_key),
                True,
                configuration_etag,
                lambda stream: write_data_point(point, stream),
            )
            return self.process_response(response, configuration_etag)
        except Exception as e:
            handle_service_error(e, "ping", severity=ErrorSeverity.ERROR, logger=logger)
            return ExchangeResult.indeterminate()

    def submit_samples(
        self,
        samples: Iterable[QuickPulseDataSample],
        instrumentation_key: str,
        configuration_etag: Optional[str],
        collection_configuration_errors: Optional[Sequence[str]] = None,
    ) -> ExchangeResult:
        """
        Send aggregated samples to the collector.

        Args:
            samples: Samples to report, one envelope each, in order
            instrumentation_key: Tenant key, sent in the query string and the envelopes
            configuration_etag: ETag of the configuration the caller holds
            collection_configuration_errors: Problems found while applying the
                current configuration, surfaced to the operator by the collector

        Returns:
            Subscription state and a new configuration if the collector sent one
        """
        try:
            samples = list(samples)

            def write_samples(stream: BinaryIO) -> None:
                points = [
                    self.build_sample_data_point(sample, instrumentation_key, collection_configuration_errors)
                    for sample in samples
                ]
                write_data_points(points, stream)

            response = self.transport.send(
                "POST",
                _query_path(SUBMIT_PATH, instrumentation_key),
                False,
                configuration_etag,
                write_samples,
            )
            return self.process_response(response, configuration_etag)
        except Exception as e:
            handle_service_error(e, "submitting samples", severity=ErrorSeverity.ERROR, logger=logger)
            return ExchangeResult.indeterminate()

    # --- Envelopes ---

    def build_ping_data_point(self, timestamp: datetime) -> MonitoringDataPoint:
        """Minimal identity envelope for Ping; the tenant key is left out."""
        return MonitoringDataPoint(
            version=self.version,
            instance=self.transport.instance_name,
            stream_id=self.transport.stream_id,
            machine_name=self.transport.machine_name,
            timestamp=ensure_utc(timestamp),
            is_web_app=self.is_web_app,
        )

    def build_sample_data_point(
        self,
        sample: QuickPulseDataSample,
        instrumentation_key: str,
        collection_configuration_errors: Optional[Sequence[str]] = None,
    ) -> MonitoringDataPoint:
        """Full envelope for one sample."""
        top_cpu = project_top_cpu(sample)
        errors = collection_configuration_errors
        return MonitoringDataPoint(
            version=self.version,
            instrumentation_key=instrumentation_key,
            instance=self.transport.instance_name,
            stream_id=self.transport.stream_id,
            machine_name=self.transport.machine_name,
            timestamp=ensure_utc(sample.end_timestamp),
            is_web_app=self.is_web_app,
            metrics=tuple(project_metrics(sample)),
            documents=tuple(project_documents(sample)),
            top_cpu_processes=tuple(top_cpu) if top_cpu is not None else None,
            top_cpu_data_access_denied=sample.top_cpu_data_access_denied,
            collection_configuration_errors=tuple(errors) if errors is not None else None,
        )

    # --- Responses ---

    def process_response(
        self,
        response: Optional[CollectorResponse],
        configuration_etag: Optional[str],
    ) -> ExchangeResult:
        """
        Turn a collector response into an exchange result.

        The configuration body is only read when the collector reports the
        stream as subscribed and its ETag differs from the caller's. A body
        that cannot be read or decoded leaves the subscription state intact.
        """
        if response is None:
            return ExchangeResult.indeterminate()

        with response:
            return self._interpret_response(response, configuration_etag)

    def _interpret_response(
        self,
        response: CollectorResponse,
        configuration_etag: Optional[str],
    ) -> ExchangeResult:
        state = parse_subscribed_header(response.headers.get(SUBSCRIBED_HEADER))
        if state is SubscriptionState.INDETERMINATE:
            logger.debug(f"Unreadable {SUBSCRIBED_HEADER} header: {response.headers.get(SUBSCRIBED_HEADER)!r}")
            return ExchangeResult.indeterminate()

        latest_etag = response.headers.get(CONFIGURATION_ETAG_HEADER, "")

        configuration: Optional[CollectionConfigurationInfo] = None
        if state is SubscriptionState.SUBSCRIBED and latest_etag != configuration_etag:
            logger.info(f"Collector configuration changed: {configuration_etag!r} -> {latest_etag!r}")
            try:
                configuration = read_configuration(response.read_body())
            except Exception as e:
                handle_error(
                    error=e,
                    context="reading collector configuration, keeping the cached one",
                    severity=ErrorSeverity.WARNING,
                    reraise=False,
                    logger=logger,
                )

        return ExchangeResult(state, configuration)
