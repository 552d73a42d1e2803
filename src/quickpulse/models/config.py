"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`:
the collector endpoint, the stream identity reported on every exchange, and
logging settings.
"""

from dataclasses import dataclass, field


@dataclass
class ServiceConfig:
    """
    Collector endpoint settings, loaded from the `[service]` table.
    """

    # Base URI of the live metrics service; relative paths are joined onto it.
    endpoint: str
    # Upper bound for a single Ping or Submit round-trip, in seconds.
    timeout_seconds: float = 3.0


@dataclass
class IdentityConfig:
    """
    Identity of this stream, loaded from the `[identity]` table.

    Blank values in the file are resolved by the validators (host name,
    random stream id, package version) so these fields are always filled.
    """

    instance_name: str
    machine_name: str
    stream_id: str
    version: str
    # Whether the host process is a hosted web application.
    is_web_app: bool = False


@dataclass
class LoggingConfig:
    """Logging settings, loaded from the `[logging]` table."""

    level: str = "INFO"


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    service: ServiceConfig
    identity: IdentityConfig
    logging: LoggingConfig = field(default_factory=LoggingConfig)
