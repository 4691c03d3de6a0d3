"""Utility helpers shared by the report core and its presentation layers."""

from testboard.utils.formatting import (
    format_duration,
    format_timestamp,
    status_bucket,
    status_icon_key,
)

__all__ = [
    "format_duration",
    "format_timestamp",
    "status_bucket",
    "status_icon_key",
]
