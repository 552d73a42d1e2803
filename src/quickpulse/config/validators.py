"""
Configuration validation utilities.

Turns the raw TOML tables into validated configuration dataclasses. Blank
identity settings are resolved here: instance and machine names default to
the host name, the stream id to a random UUID, and the version to the
package version.
"""

import logging
import socket
import uuid
from typing import Any, Dict

from ..constants import DEFAULT_SERVICE_ENDPOINT, DEFAULT_TIMEOUT_SECONDS
from ..models.config import AppConfig, IdentityConfig, LoggingConfig, ServiceConfig
from ..validation import (
    ValidationError,
    validate_bool,
    validate_enum_choice,
    validate_optional_string,
    validate_positive_float,
    validate_service_url,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _table(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    table = config_data.get(name, {})
    if not isinstance(table, dict):
        raise ValidationError(f"[{name}] must be a table", field_name=name, value=table)
    return table


def validate_service_config(service_data: Dict[str, Any]) -> ServiceConfig:
    """
    Validate the `[service]` table.

    Raises:
        ValidationError: If the endpoint or timeout is invalid
    """
    endpoint = validate_service_url(
        service_data.get("endpoint", DEFAULT_SERVICE_ENDPOINT),
        field_name="service.endpoint",
    )

    timeout_seconds = validate_positive_float(
        service_data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
        min_value=0.001,  # 1ms minimum
        max_value=60.0,
        field_name="service.timeout_seconds",
    )

    return ServiceConfig(endpoint=endpoint, timeout_seconds=timeout_seconds)


def validate_identity_config(identity_data: Dict[str, Any]) -> IdentityConfig:
    """
    Validate the `[identity]` table, filling blank values.

    Raises:
        ValidationError: If a value has the wrong type
    """
    from .. import __version__

    host_name = socket.gethostname()

    instance_name = validate_optional_string(
        identity_data.get("instance_name"), field_name="identity.instance_name"
    ) or host_name
    machine_name = validate_optional_string(
        identity_data.get("machine_name"), field_name="identity.machine_name"
    ) or host_name
    stream_id = validate_optional_string(
        identity_data.get("stream_id"), field_name="identity.stream_id"
    ) or uuid.uuid4().hex
    version = validate_optional_string(
        identity_data.get("version"), field_name="identity.version"
    ) or f"quickpulse-python:{__version__}"

    is_web_app = validate_bool(
        identity_data.get("is_web_app", False), field_name="identity.is_web_app"
    )

    return IdentityConfig(
        instance_name=instance_name,
        machine_name=machine_name,
        stream_id=stream_id,
        version=version,
        is_web_app=is_web_app,
    )


def validate_logging_config(logging_data: Dict[str, Any]) -> LoggingConfig:
    """Validate the `[logging]` table."""
    level = validate_enum_choice(
        logging_data.get("level", "INFO"),
        valid_choices=LOG_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )
    return LoggingConfig(level=level)


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate and create an AppConfig from raw configuration data.

    Args:
        config_data: Parsed config.toml contents

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If validation fails
    """
    app_config = AppConfig(
        service=validate_service_config(_table(config_data, "service")),
        identity=validate_identity_config(_table(config_data, "identity")),
        logging=validate_logging_config(_table(config_data, "logging")),
    )
    logger.debug(f"Validated configuration: {app_config}")
    return app_config
