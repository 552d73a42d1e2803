"""
Reporting protocol for the live metrics collector.
"""

from .client import QuickPulseServiceClient, parse_subscribed_header
from .factory import create_service_client

__all__ = [
    "QuickPulseServiceClient",
    "parse_subscribed_header",
    "create_service_client",
]
