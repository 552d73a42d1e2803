"""
Simplified validation functions.

Validators used by the configuration layer. Each returns the normalized
value or raises `ValidationError` naming the offending field.
"""

from typing import Any, List, Optional
from urllib.parse import urlparse

from .exceptions import ValidationError


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a positive float.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        valid_choices: List of valid choices
        field_name: Name of the field being validated
        case_sensitive: Whether comparison should be case sensitive

    Returns:
        The matching choice as spelled in `valid_choices`

    Raises:
        ValidationError: If value is not in valid choices
    """
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {type(value).__name__}",
            field_name=field_name,
            value=value
        )

    for choice in valid_choices:
        if value == choice or (not case_sensitive and value.lower() == choice.lower()):
            return choice

    raise ValidationError(
        f"{field_name} must be one of {valid_choices}, got '{value}'",
        field_name=field_name,
        value=value
    )


def validate_bool(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean (TOML true/false)."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a boolean",
            field_name=field_name,
            value=value
        )
    return value


def validate_optional_string(value: Any, field_name: str = "value") -> str:
    """
    Validate an optional string setting.

    Returns:
        The stripped string; empty when the setting is absent or blank
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {type(value).__name__}",
            field_name=field_name,
            value=value
        )
    return value.strip()


def validate_service_url(value: Any, field_name: str = "url") -> str:
    """
    Validate an absolute http(s) service URL.

    Args:
        value: URL string to validate
        field_name: Name of the field being validated

    Returns:
        The URL, unchanged

    Raises:
        ValidationError: If the URL is not absolute or not http/https
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=value
        )

    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(
            f"{field_name} must be an absolute http(s) URL, got '{value}'",
            field_name=field_name,
            value=value
        )
    return value.strip()
