"""
Configuration models and loading.

This module provides the Pydantic settings model for serverless-compat,
its resolve-once loader, and app settings file reading.
"""

from .env import LAUNCHER_ENV_VARS, app_environ, read_app_settings
from .loader import clear_cache, load_app_config, load_config
from .models import (
    DEFAULT_LOG_LEVEL,
    DOGSTATSD_PIPE_ALIAS_ENV,
    DOGSTATSD_PIPE_ENV,
    LOG_LEVEL_ENV,
    LOG_LEVELS,
    PIPE_ADDRESS_ENV,
    TRACE_PIPE_ALIAS_ENV,
    TRACE_PIPE_ENV,
    CompatConfig,
    resolve_log_threshold,
)

__all__ = [
    # Models
    "CompatConfig",
    "resolve_log_threshold",
    "DEFAULT_LOG_LEVEL",
    "LOG_LEVELS",
    # Environment variable names
    "LOG_LEVEL_ENV",
    "TRACE_PIPE_ENV",
    "DOGSTATSD_PIPE_ENV",
    "PIPE_ADDRESS_ENV",
    "TRACE_PIPE_ALIAS_ENV",
    "DOGSTATSD_PIPE_ALIAS_ENV",
    # Loader functions
    "clear_cache",
    "load_app_config",
    "load_config",
    "app_environ",
    "read_app_settings",
    "LAUNCHER_ENV_VARS",
]
