"""Config module exports."""

from testsift.config.loader import (
    find_properties_file,
    get_configuration,
    load_configuration,
)
from testsift.config.models import LoggingConfig, LogOutputConfig
from testsift.config.parameters import ConfigurationParameters
from testsift.config.settings import EngineSettings, load_settings
from testsift.config.store import ConfigurationStore

__all__ = [
    "ConfigurationStore",
    "ConfigurationParameters",
    "EngineSettings",
    "LoggingConfig",
    "LogOutputConfig",
    "find_properties_file",
    "get_configuration",
    "load_configuration",
    "load_settings",
]
