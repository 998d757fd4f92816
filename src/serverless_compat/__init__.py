"""
serverless-compat - Datadog Serverless Compatibility Layer launcher core

Prepares the environment the compatibility layer binary inherits inside
serverless function runtimes: a unique named-pipe channel and call-site
aware logging.
"""

__version__ = "0.1.0"

from serverless_compat.core.config.models import CompatConfig
from serverless_compat.core.pipes import ChannelIdentity, configure_channel
from serverless_compat.utils.log import create_logger, log

__all__ = [
    "ChannelIdentity",
    "CompatConfig",
    "configure_channel",
    "create_logger",
    "log",
    "__version__",
]
