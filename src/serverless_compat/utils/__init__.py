"""Utility modules for serverless-compat."""

from .log import CompatLogger, FormattedError, create_logger, log

__all__ = [
    "CompatLogger",
    "FormattedError",
    "create_logger",
    "log",
]
