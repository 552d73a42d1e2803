"""
Validation and error handling for the quickpulse package.

This module provides input validation for configuration and the error
handling helpers used at every failure-containment boundary.
"""

from .exceptions import (
    EnvelopeDecodeError,
    ErrorSeverity,
    ValidationError,
    handle_config_error,
    handle_error,
    handle_service_error,
)

from .validators import (
    validate_bool,
    validate_enum_choice,
    validate_optional_string,
    validate_positive_float,
    validate_service_url,
)

__all__ = [
    # Core functionality
    "EnvelopeDecodeError",
    "ErrorSeverity",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_service_error",
    # Validators
    "validate_bool",
    "validate_enum_choice",
    "validate_optional_string",
    "validate_positive_float",
    "validate_service_url",
]
