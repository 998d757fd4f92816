"""App settings files.

A function app's settings are often kept in a dotenv file next to the
deployment. These helpers read such a file so the CLI can show the channel
the launcher would negotiate for that app without exporting anything:

    serverless-compat pipe --env-file app.env

Only the DD_* variables the launcher reads are taken from the file; values
in the file win over the current process environment, which is never
modified.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values

from .models import (
    DOGSTATSD_PIPE_ALIAS_ENV,
    DOGSTATSD_PIPE_ENV,
    LOG_LEVEL_ENV,
    PIPE_ADDRESS_ENV,
    TRACE_PIPE_ALIAS_ENV,
    TRACE_PIPE_ENV,
)

# Variables the launcher core reads
LAUNCHER_ENV_VARS = (
    LOG_LEVEL_ENV,
    TRACE_PIPE_ENV,
    DOGSTATSD_PIPE_ENV,
    PIPE_ADDRESS_ENV,
    TRACE_PIPE_ALIAS_ENV,
    DOGSTATSD_PIPE_ALIAS_ENV,
)


def read_app_settings(path: Path) -> dict[str, str]:
    """
    Read the launcher variables from a dotenv file.

    Keys declared without a value (``KEY`` alone on a line) count as set to
    the empty string, so they clear the process value.

    Args:
        path: Settings file

    Returns:
        Launcher variable name to value, for the variables the file sets

    Raises:
        FileNotFoundError: If path does not exist
    """
    if not path.is_file():
        raise FileNotFoundError(f"App settings file not found: {path}")

    values = dotenv_values(path)
    return {
        name: values[name] or ""
        for name in LAUNCHER_ENV_VARS
        if name in values
    }


def app_environ(
    path: Path | None,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Build the environment a launcher would see for an app.

    Args:
        path: Settings file, or None to use base unchanged
        base: Starting environment (defaults to os.environ)

    Returns:
        A copy of base with the file's launcher variables applied
    """
    environ = dict(os.environ if base is None else base)
    if path is not None:
        environ.update(read_app_settings(path))
    return environ


__all__ = ["LAUNCHER_ENV_VARS", "app_environ", "read_app_settings"]
