"""
HTTP transport to the live metrics collector.

`HttpTransport.send` is the failure-containment boundary of the package: it
performs exactly one request and turns every failure (DNS, connect, timeout,
non-2xx status, or an error while writing the body) into ``None``. Telemetry
must never fault the host application, so nothing is raised from here.

Each call gets one deadline, `timeout` seconds after it starts. Writing the
body, connecting and receiving the headers use up the same budget, and the
response body is only read on demand through `CollectorResponse.read_body`,
which stops once the deadline has passed.
"""

import io
import logging
import time
from typing import BinaryIO, Callable, Dict, Optional

import requests

from ..constants import (
    CONFIGURATION_ETAG_HEADER,
    DEFAULT_TIMEOUT_SECONDS,
    INSTANCE_NAME_HEADER,
    MACHINE_NAME_HEADER,
    RESPONSE_READ_CHUNK_SIZE,
    STREAM_ID_HEADER,
    TRANSMISSION_TIME_HEADER,
)
from ..system.clock import Clock, to_ticks
from ..validation import handle_service_error

logger = logging.getLogger(__name__)

BodyWriter = Callable[[BinaryIO], None]


def join_service_uri(base_uri: str, relative_path: str) -> str:
    """Join a base URI and a relative path with exactly one '/' between them."""
    return f"{base_uri.rstrip('/')}/{relative_path.lstrip('/')}"


def _remaining(deadline: float) -> float:
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise requests.Timeout("Call deadline passed before the request was sent")
    return remaining


class CollectorResponse:
    """
    A successful collector response whose body has not been read yet.

    Headers are available immediately. The body is fetched by `read_body`,
    within what is left of the deadline of the call that produced it. Close
    the response (or use it as a context manager) once done with it.
    """

    def __init__(self, response: requests.Response, deadline: float):
        self.response = response
        self.deadline = deadline

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self):
        return self.response.headers

    def read_body(self) -> bytes:
        """
        Read the whole response body.

        Returns:
            The body bytes, with any content encoding removed

        Raises:
            requests.Timeout: If the deadline passes before the body is complete
        """
        chunks = []
        while True:
            if time.monotonic() >= self.deadline:
                raise requests.Timeout(
                    f"Response body incomplete at the call deadline ({sum(len(c) for c in chunks)} bytes read)"
                )
            # read1 returns whatever has arrived instead of waiting for a full chunk.
            chunk = self.response.raw.read1(RESPONSE_READ_CHUNK_SIZE, decode_content=True)
            if not chunk:
                return b"".join(chunks)
            chunks.append(chunk)

    def close(self) -> None:
        self.response.close()

    def __enter__(self) -> "CollectorResponse":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class HttpTransport:
    """
    Sends single requests to the collector with the protocol headers attached.

    Identity (instance name, stream id, machine name), the base URI and the
    timeout are fixed at construction and only read afterwards, so one
    transport may serve concurrent calls.
    """

    def __init__(
        self,
        service_uri: str,
        instance_name: str,
        stream_id: str,
        machine_name: str,
        clock: Optional[Clock] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            service_uri: Base URI of the collector service
            instance_name: Name of this instance, sent on Ping
            stream_id: Identifier of this stream, sent on Ping
            machine_name: Host name, sent on Ping
            clock: Source of the transmission time, defaults to the wall clock
            timeout: Deadline for a whole call, response body included, in seconds
            session: requests session to reuse; a new one is created if omitted
        """
        self.service_uri = service_uri
        self.instance_name = instance_name
        self.stream_id = stream_id
        self.machine_name = machine_name
        self.clock = clock or Clock()
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_headers(self, include_identity_headers: bool, configuration_etag: Optional[str]) -> Dict[str, str]:
        """Protocol headers for one request."""
        headers = {
            TRANSMISSION_TIME_HEADER: str(to_ticks(self.clock.utc_now())),
            CONFIGURATION_ETAG_HEADER: configuration_etag or "",
        }
        if include_identity_headers:
            headers[INSTANCE_NAME_HEADER] = self.instance_name
            headers[STREAM_ID_HEADER] = self.stream_id
            headers[MACHINE_NAME_HEADER] = self.machine_name
        return headers

    def send(
        self,
        verb: str,
        relative_path: str,
        include_identity_headers: bool,
        configuration_etag: Optional[str],
        write_body: Optional[BodyWriter] = None,
    ) -> Optional[CollectorResponse]:
        """
        Perform one request against the collector.

        Args:
            verb: HTTP method, e.g. "POST"
            relative_path: Path and query relative to the service URI
            include_identity_headers: Attach instance/stream/machine headers (Ping)
            configuration_etag: ETag of the configuration the caller holds
            write_body: Callback that writes the request body to a binary stream

        Returns:
            The response on a 2xx status with its body still unread, otherwise None
        """
        request_uri = join_service_uri(self.service_uri, relative_path)
        deadline = time.monotonic() + self.timeout

        try:
            headers = self.build_headers(include_identity_headers, configuration_etag)

            body = None
            if write_body is not None:
                # Serialized up front so the request carries a Content-Length.
                stream = io.BytesIO()
                write_body(stream)
                body = stream.getvalue()
                headers["Content-Type"] = "application/json; charset=utf-8"

            response = self.session.request(
                verb,
                request_uri,
                data=body,
                headers=headers,
                timeout=_remaining(deadline),
                stream=True,
            )
            try:
                response.raise_for_status()
            except requests.HTTPError:
                response.close()
                raise
            logger.debug(f"{verb} {request_uri}: HTTP {response.status_code}")
            return CollectorResponse(response, deadline)
        except Exception as e:
            handle_service_error(e, f"{verb} {request_uri}", logger=logger)

        return None
