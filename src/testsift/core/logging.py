"""Structured logging plus the configuration trace stream.

Supports:
- Separate console vs file log levels
- Console or JSON rendering per output
- A diagnostic trace stream on stdout, enabled by TESTSIFT_CONFIGURATION_TRACE,
  rendered as "timestamp | thread | TRACE | component | message"
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from testsift.config.models import LoggingConfig

TRACE_ENV_VAR = "TESTSIFT_CONFIGURATION_TRACE"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Trace lines are emitted at DEBUG, so filtering at CRITICAL silences them
_TRACE_DISABLED_LEVEL = logging.CRITICAL


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog. Pass config for multi-output, or use simple params.

    Args:
        config: Logging configuration with outputs
        json_format: Use JSON format for simple setup
        level: Default log level
    """
    from testsift.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    default_level = _LEVEL_MAP.get(config.level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Don't cache - allows reconfiguration and respects level changes
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)

    for output in config.outputs:
        output_level = _LEVEL_MAP.get((output.level or config.level).upper(), default_level)
        is_console = output.destination in ("stderr", "stdout")

        if output.format == "json":
            formatter = structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=shared_processors,
            )
        else:
            formatter = structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(
                    colors=is_console and sys.stderr.isatty(),
                    pad_event_to=0,
                    pad_level=False,
                ),
                foreign_pre_chain=shared_processors,
            )

        handler = _create_handler(output.destination)
        handler.setLevel(output_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def _create_handler(destination: str) -> logging.Handler:
    """Create handler for stderr, stdout, or file path."""
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]


# =============================================================================
# Trace stream
# =============================================================================


def is_trace_enabled() -> bool:
    return os.environ.get(TRACE_ENV_VAR, "").strip().lower() == "true"


def _render_trace_line(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> str:
    return " | ".join(
        (
            # milliseconds: "2024-01-31 12:00:00.123"
            str(event_dict.get("timestamp", ""))[:23],
            str(event_dict.get("thread_name", "")),
            "TRACE",
            str(event_dict.get("component", "")),
            str(event_dict.get("event", "")),
        )
    )


def get_tracer(component: str, *, enabled: bool | None = None) -> Any:
    """Return a logger that writes trace lines to stdout when tracing is on.

    Trace calls use ``debug`` and are no-ops when tracing is off, so call
    sites can trace unconditionally.
    """
    if enabled is None:
        enabled = is_trace_enabled()
    return structlog.wrap_logger(
        structlog.PrintLogger(sys.stdout),
        processors=[
            structlog.processors.CallsiteParameterAdder(
                [structlog.processors.CallsiteParameter.THREAD_NAME]
            ),
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S.%f", key="timestamp"),
            _render_trace_line,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if enabled else _TRACE_DISABLED_LEVEL
        ),
        component=component,
    )
