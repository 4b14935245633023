"""Process-level engine settings read from the environment.

These are the inputs that bootstrap the configuration store itself, so they
cannot live in the properties file:

    TESTSIFT_PROPERTIES=/abs/path/testsift.properties
    TESTSIFT_CONFIGURATION_TRACE=true
    TESTSIFT_CLASSPATH=src:tests:vendor/fixtures.zip
    TESTSIFT_LOG_LEVEL=DEBUG
"""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from testsift.config.models import LogLevel
from testsift.core.errors import ConfigError


class EngineSettings(BaseSettings):
    """Environment-driven settings. Env vars: TESTSIFT_<FIELD>."""

    model_config = SettingsConfigDict(
        env_prefix="TESTSIFT_",
        case_sensitive=False,
        extra="ignore",
    )

    properties: str | None = Field(
        default=None,
        description="Explicit properties file path. Skips the upward directory search.",
    )
    configuration_trace: bool = Field(
        default=False,
        description="Write configuration trace lines to stdout.",
    )
    classpath: str | None = Field(
        default=None,
        description="os.pathsep-separated classpath roots. Defaults to sys.path.",
    )
    log_level: LogLevel = Field(default="INFO")

    @field_validator("configuration_trace", mode="before")
    @classmethod
    def _only_literal_true(cls, v: object) -> object:
        # Anything other than "true" (any case) leaves tracing off
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v


def load_settings() -> EngineSettings:
    """Read EngineSettings from the environment.

    Raises:
        ConfigError: When an environment value fails validation.
    """
    try:
        return EngineSettings()
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
