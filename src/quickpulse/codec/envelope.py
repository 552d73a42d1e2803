"""
JSON wire codec for monitoring envelopes and collector configuration.

Envelopes are written to whatever binary stream the caller supplies; the
transport hands in an in-memory buffer so the request carries a
Content-Length. Field names, the `/Date(<ms>)/` timestamp form and the
`PT<seconds>S` duration form follow the data-contract JSON layout the
collector expects. Optional fields that are unset are left out of the JSON
object.
"""

import codecs
import dataclasses
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, BinaryIO, Dict, Iterable, List, Optional, Union

from ..models.monitoring import (
    CollectionConfigurationInfo,
    MetricPoint,
    MonitoringDataPoint,
    ProcessCpuData,
)
from ..models.sample import TelemetryDocument
from ..system.clock import ensure_utc
from ..validation import EnvelopeDecodeError

logger = logging.getLogger(__name__)

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_utf8_writer = codecs.getwriter("utf-8")


# --- Value formatting ---


def format_timestamp(value: datetime) -> str:
    """Format a datetime as a data-contract JSON date: /Date(<ms since epoch>)/."""
    millis = (ensure_utc(value) - _UNIX_EPOCH) // timedelta(milliseconds=1)
    return f"/Date({millis})/"


def format_duration(value: timedelta) -> str:
    """Format a timedelta as an ISO 8601 duration in seconds, e.g. PT0.25S."""
    seconds = value.total_seconds()
    sign = "-" if seconds < 0 else ""
    text = f"{abs(seconds):.7f}".rstrip("0").rstrip(".")
    return f"{sign}PT{text}S"


def _wire_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (list, tuple)):
        return [_wire_value(item) for item in value]
    return value


def _compact(mapping: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in mapping.items() if value is not None}


# --- Encoding ---


def metric_to_wire(metric: MetricPoint) -> Dict[str, Any]:
    return {"Name": metric.name, "Value": metric.value, "Weight": metric.weight}


def process_cpu_to_wire(process: ProcessCpuData) -> Dict[str, Any]:
    return {"ProcessName": process.process_name, "CpuPercentage": process.cpu_percentage}


def document_to_wire(document: TelemetryDocument) -> Dict[str, Any]:
    """
    Encode any telemetry document kind.

    Each dataclass field declares its wire name in its metadata; the
    document kind itself is written as `DocumentType`.
    """
    wire: Dict[str, Any] = {"DocumentType": document.document_type}
    for doc_field in dataclasses.fields(document):
        wire_name = doc_field.metadata.get("wire")
        if not wire_name:
            continue
        value = getattr(document, doc_field.name)
        if doc_field.name == "properties":
            value = [{"Key": key, "Value": item} for key, item in value]
        wire[wire_name] = _wire_value(value)
    return _compact(wire)


def data_point_to_wire(point: MonitoringDataPoint) -> Dict[str, Any]:
    """Encode a monitoring envelope as a JSON-ready dict."""
    wire = {
        "Version": point.version,
        "InvariantVersion": point.invariant_version,
        "InstrumentationKey": point.instrumentation_key,
        "Instance": point.instance,
        "StreamId": point.stream_id,
        "MachineName": point.machine_name,
        "Timestamp": format_timestamp(point.timestamp),
        "IsWebApp": point.is_web_app,
        "Metrics": None,
        "Documents": None,
        "TopCpuProcesses": None,
        "TopCpuDataAccessDenied": point.top_cpu_data_access_denied,
        "CollectionConfigurationErrors": None,
    }
    if point.metrics is not None:
        wire["Metrics"] = [metric_to_wire(metric) for metric in point.metrics]
    if point.documents is not None:
        wire["Documents"] = [document_to_wire(document) for document in point.documents]
    if point.top_cpu_processes is not None:
        wire["TopCpuProcesses"] = [process_cpu_to_wire(process) for process in point.top_cpu_processes]
    if point.collection_configuration_errors is not None:
        wire["CollectionConfigurationErrors"] = list(point.collection_configuration_errors)
    return _compact(wire)


def write_data_point(point: MonitoringDataPoint, stream: BinaryIO) -> None:
    """Serialize a single envelope (the Ping body) to a binary stream."""
    json.dump(data_point_to_wire(point), _utf8_writer(stream), separators=(",", ":"))


def write_data_points(points: Iterable[MonitoringDataPoint], stream: BinaryIO) -> None:
    """Serialize a JSON array of envelopes (the Submit body) to a binary stream."""
    payload = [data_point_to_wire(point) for point in points]
    json.dump(payload, _utf8_writer(stream), separators=(",", ":"))


# --- Decoding ---


def _read_object_list(raw: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise EnvelopeDecodeError(f"'{key}' must be a list of objects, got {type(value).__name__}")
    return value


def read_configuration(body: Union[bytes, str]) -> Optional[CollectionConfigurationInfo]:
    """
    Decode a collector configuration from a response body.

    Args:
        body: Raw response body

    Returns:
        The decoded configuration, or None if the body is JSON null

    Raises:
        EnvelopeDecodeError: If the body is not valid JSON or has the wrong shape
    """
    raw_body = body if isinstance(body, bytes) else None
    try:
        text = body.decode("utf-8-sig") if isinstance(body, bytes) else body
        raw = json.loads(text)
    except (UnicodeDecodeError, ValueError) as e:
        raise EnvelopeDecodeError(f"Configuration body is not valid JSON: {e}", body=raw_body) from e

    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise EnvelopeDecodeError(
            f"Configuration body must be a JSON object, got {type(raw).__name__}", body=raw_body
        )

    etag = raw.get("ETag")
    if etag is not None and not isinstance(etag, str):
        raise EnvelopeDecodeError(f"'ETag' must be a string, got {type(etag).__name__}", body=raw_body)

    configuration = CollectionConfigurationInfo(
        etag=etag,
        metrics=tuple(_read_object_list(raw, "Metrics")),
        document_streams=tuple(_read_object_list(raw, "DocumentStreams")),
        raw=raw,
    )
    logger.debug(
        f"Decoded configuration etag={etag!r} with {len(configuration.metrics)} metrics "
        f"and {len(configuration.document_streams)} document streams"
    )
    return configuration
