"""
Configuration loading with a resolve-once cache.

The launcher reads its settings from the process environment exactly once;
later reads return the same object until the cache is cleared explicitly
(tests, or a deliberate re-initialisation).
"""

import os
from collections.abc import Mapping
from pathlib import Path

from .env import app_environ
from .models import CompatConfig

# Global cache to avoid re-reading the environment per call
_config_cache: CompatConfig | None = None


def load_config(
    environ: Mapping[str, str] | None = None,
    use_cache: bool = True,
) -> CompatConfig:
    """
    Load configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated CompatConfig instance

    Example:
        >>> config = load_config()
        >>> config.log_threshold
        30
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    config = CompatConfig.from_env(os.environ if environ is None else environ)

    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when the environment is reloaded on purpose.
    """
    global _config_cache
    _config_cache = None


def load_app_config(env_file: Path | None = None) -> CompatConfig:
    """
    Load configuration as an app with the given settings file would see it.

    Without a file this is the cached process-wide configuration. With one,
    the file is layered over os.environ and the result is not cached.

    Raises:
        FileNotFoundError: If env_file does not exist
    """
    if env_file is None:
        return load_config()
    return CompatConfig.from_env(app_environ(env_file))
