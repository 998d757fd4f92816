"""
Configuration data models for serverless-compat.

These models capture every environment variable the launcher core reads,
resolved once into a single validated object via Pydantic.
"""

import os
from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Numeric severities for DD_LOG_LEVEL names. Lower admits more output.
LOG_LEVELS: dict[str, int] = {
    "trace": 20,
    "debug": 20,
    "info": 30,
    "warn": 40,
    "error": 50,
    "critical": 50,
    "off": 100,
}

DEFAULT_LOG_LEVEL = "info"

# Environment variable names
LOG_LEVEL_ENV = "DD_LOG_LEVEL"
TRACE_PIPE_ENV = "DD_TRACE_WINDOWS_PIPE_NAME"
DOGSTATSD_PIPE_ENV = "DD_DOGSTATSD_WINDOWS_PIPE_NAME"
PIPE_ADDRESS_ENV = "DD_SERVERLESS_PIPE_ADDRESS"
TRACE_PIPE_ALIAS_ENV = "DD_TRACE_PIPE_NAME"
DOGSTATSD_PIPE_ALIAS_ENV = "DD_DOGSTATSD_PIPE_NAME"


def resolve_log_threshold(value: Optional[str]) -> int:
    """
    Map a DD_LOG_LEVEL value to its numeric threshold.

    Matching is case-insensitive. Unknown or missing values fall back to
    the info threshold without complaint, since the logger that would
    report the problem does not exist yet.

    Example:
        >>> resolve_log_threshold("WARN")
        40
        >>> resolve_log_threshold("verbose")
        30
    """
    key = (value or DEFAULT_LOG_LEVEL).strip().lower()
    return LOG_LEVELS.get(key, LOG_LEVELS[DEFAULT_LOG_LEVEL])


class CompatConfig(BaseModel):
    """
    Process-wide settings for the compatibility layer launcher.

    Resolved once at startup and handed to the logger and the channel
    namer, instead of each reading ambient state ad hoc.
    """

    model_config = ConfigDict(frozen=True)

    log_level: Optional[str] = Field(
        default=None,
        description="Raw DD_LOG_LEVEL value (unvalidated, defaults to info)",
    )
    trace_pipe_name: Optional[str] = Field(
        default=None,
        description="Trace channel base-name override",
    )
    dogstatsd_pipe_name: Optional[str] = Field(
        default=None,
        description="DogStatsD channel base-name override",
    )
    pipe_address: Optional[str] = Field(
        default=None,
        description="Pre-set full channel address (\\\\.\\pipe\\<name>)",
    )
    trace_pipe_alias: Optional[str] = Field(
        default=None,
        description="Pre-set plain trace pipe name read by non-Windows clients",
    )
    dogstatsd_pipe_alias: Optional[str] = Field(
        default=None,
        description="Pre-set plain DogStatsD pipe name read by non-Windows clients",
    )

    @field_validator(
        "log_level",
        "trace_pipe_name",
        "dogstatsd_pipe_name",
        "pipe_address",
        "trace_pipe_alias",
        "dogstatsd_pipe_alias",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Strip surrounding whitespace; empty values count as unset."""
        if v is None:
            return None
        return str(v).strip() or None

    @property
    def log_threshold(self) -> int:
        """Numeric threshold for the configured log level."""
        return resolve_log_threshold(self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CompatConfig":
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Validated CompatConfig
        """
        if environ is None:
            environ = os.environ

        return cls(
            log_level=environ.get(LOG_LEVEL_ENV),
            trace_pipe_name=environ.get(TRACE_PIPE_ENV),
            dogstatsd_pipe_name=environ.get(DOGSTATSD_PIPE_ENV),
            pipe_address=environ.get(PIPE_ADDRESS_ENV),
            trace_pipe_alias=environ.get(TRACE_PIPE_ALIAS_ENV),
            dogstatsd_pipe_alias=environ.get(DOGSTATSD_PIPE_ALIAS_ENV),
        )
