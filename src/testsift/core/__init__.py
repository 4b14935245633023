"""Core module exports."""

from testsift.core.errors import (
    ArgumentError,
    ConfigError,
    ErrorCode,
    InternalError,
    ScanError,
    SiftError,
)
from testsift.core.logging import (
    configure_logging,
    get_logger,
    get_tracer,
    is_trace_enabled,
)

__all__ = [
    # Errors
    "SiftError",
    "ArgumentError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "ScanError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_tracer",
    "is_trace_enabled",
]
