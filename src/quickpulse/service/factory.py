"""
Construction of a service client from the loaded configuration.
"""

import logging
from typing import Optional

import requests

from ..config import get_config
from ..models.config import AppConfig
from ..system.clock import Clock
from ..transport import HttpTransport
from .client import QuickPulseServiceClient

logger = logging.getLogger(__name__)


def create_service_client(
    config: Optional[AppConfig] = None,
    session: Optional[requests.Session] = None,
    clock: Optional[Clock] = None,
) -> QuickPulseServiceClient:
    """
    Build a QuickPulseServiceClient.

    Args:
        config: Application configuration; the global configuration is loaded if omitted
        session: requests session to reuse across calls
        clock: Time source for transmission timestamps

    Returns:
        A client bound to the configured endpoint and stream identity
    """
    app_config = config or get_config()
    service = app_config.service
    identity = app_config.identity

    transport = HttpTransport(
        service_uri=service.endpoint,
        instance_name=identity.instance_name,
        stream_id=identity.stream_id,
        machine_name=identity.machine_name,
        clock=clock,
        timeout=service.timeout_seconds,
        session=session,
    )
    logger.info(
        f"Live metrics client for {service.endpoint} "
        f"(instance={identity.instance_name}, stream={identity.stream_id}, timeout={service.timeout_seconds}s)"
    )
    return QuickPulseServiceClient(
        transport=transport,
        version=identity.version,
        is_web_app=identity.is_web_app,
    )
