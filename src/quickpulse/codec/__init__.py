"""
Wire envelope codec for the live metrics stream.
"""

from .envelope import (
    data_point_to_wire,
    document_to_wire,
    format_duration,
    format_timestamp,
    read_configuration,
    write_data_point,
    write_data_points,
)

__all__ = [
    "data_point_to_wire",
    "document_to_wire",
    "format_duration",
    "format_timestamp",
    "read_configuration",
    "write_data_point",
    "write_data_points",
]
