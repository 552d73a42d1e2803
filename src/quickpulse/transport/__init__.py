"""
HTTP transport for the live metrics collector.
"""

from .http import BodyWriter, CollectorResponse, HttpTransport, join_service_uri

__all__ = [
    "BodyWriter",
    "CollectorResponse",
    "HttpTransport",
    "join_service_uri",
]
