"""Configuration bootstrap: locate, parse and load the properties file.

Resolution order:
1. Explicit override (``override`` argument, else TESTSIFT_PROPERTIES)
2. Upward search for ``testsift.properties`` from the working directory to
   the filesystem root; first readable regular file wins
3. Nothing found: an empty store, no error

The process-wide store is created lazily by get_configuration() and lives for
the rest of the process. Consumers should accept a store as an argument;
get_configuration() is for entry points only.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any

from testsift.config.constants import PROPERTIES_FILENAME, PROPERTIES_FILENAME_KEY
from testsift.config.properties import load_properties
from testsift.config.settings import load_settings
from testsift.config.store import ConfigurationStore
from testsift.core.errors import ConfigError
from testsift.core.logging import get_logger, get_tracer

log = get_logger(__name__)

_instance: ConfigurationStore | None = None
_instance_lock = threading.Lock()


def find_properties_file(
    start: Path | None = None,
    filename: str = PROPERTIES_FILENAME,
    *,
    tracer: Any = None,
) -> Path | None:
    """Search ``start`` and each parent directory for ``filename``.

    Returns the absolute path of the first readable regular file, or None
    once the filesystem root has been checked.
    """
    tracer = tracer or get_tracer(__name__)
    current = (start or Path.cwd()).absolute()
    current = Path(os.path.normpath(current))

    while True:
        tracer.debug(f"searching path [{current.as_posix().rstrip('/')}/]")
        candidate = current / filename
        if candidate.is_file() and os.access(candidate, os.R_OK):
            tracer.debug(f"found [{candidate}]")
            return candidate

        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_configuration(
    start: Path | None = None,
    override: str | Path | None = None,
    *,
    trace: bool | None = None,
) -> ConfigurationStore:
    """Build a store from the bootstrap properties file.

    Args:
        start: Directory the upward search starts from (default: cwd).
        override: Explicit properties path. Falls back to TESTSIFT_PROPERTIES.
        trace: Force tracing on/off. Falls back to TESTSIFT_CONFIGURATION_TRACE.

    Returns:
        A new store; empty when no properties file exists.

    Raises:
        ConfigError: When the chosen file cannot be read or decoded.
    """
    settings = load_settings()
    if trace is None:
        trace = settings.configuration_trace
    tracer = get_tracer(__name__, enabled=trace)
    tracer.debug("load_configuration()")

    if override is None:
        override = settings.properties

    path: Path | None
    if override is not None and str(override).strip():
        path = Path(str(override).strip()).absolute()
    else:
        path = find_properties_file(start, tracer=tracer)

    store = ConfigurationStore()
    if path is None:
        tracer.debug("no configuration properties file found")
        log.debug("properties_not_found", start=str(start or Path.cwd()))
        return store

    tracer.debug(f"loading [{path}]")
    try:
        entries = load_properties(path)
    except (OSError, ValueError) as e:
        # UnicodeDecodeError is a ValueError
        raise ConfigError.load_failed(str(path), str(e)) from e
    tracer.debug(f"loaded [{path}]")

    for key, value in entries.items():
        if key.strip():
            store.put(key, value)
    store.put(PROPERTIES_FILENAME_KEY, str(path))
    log.debug("properties_loaded", path=str(path), count=store.size())

    tracer.debug("configuration properties ...")
    for key, value in store.items():
        tracer.debug(f"configuration property [{key}] = [{value}]")

    return store


def get_configuration() -> ConfigurationStore:
    """Return the process-wide store, loading it on first access."""
    global _instance
    if _instance is None:
        with _instance_lock:
            if _instance is None:
                _instance = load_configuration()
    return _instance
