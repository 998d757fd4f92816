"""
Named-pipe channel negotiation for the compatibility layer binary.

Modules:
    models: ChannelIdentity and Windows named-pipe limits
    namer: Base-name resolution, length governance, conflict reporting
        and publication to the environment

Example Usage:
    >>> from serverless_compat.core.pipes import configure_channel
    >>> from serverless_compat.utils.log import log
    >>>
    >>> # Before spawning the binary
    >>> configure_channel(log)
    >>> os.environ["DD_SERVERLESS_PIPE_ADDRESS"]
    '\\\\.\\pipe\\DD_SERVERLESS_COMPAT_...'
"""

from serverless_compat.core.pipes.models import (
    DEFAULT_BASE_NAME,
    MAX_PIPE_NAME_LENGTH,
    PIPE_ADDRESS_PREFIX,
    PIPE_NAME_LIMIT,
    ChannelIdentity,
)
from serverless_compat.core.pipes.namer import (
    NAME_ENV_VARS,
    build_channel_env,
    build_channel_identity,
    configure_channel,
    extract_pipe_name,
    format_pipe_address,
    generate_instance_token,
    max_base_length,
    negotiate_channel,
    publish_channel_identity,
    resolve_base_name,
)

__all__ = [
    # Models
    "ChannelIdentity",
    "DEFAULT_BASE_NAME",
    "MAX_PIPE_NAME_LENGTH",
    "PIPE_ADDRESS_PREFIX",
    "PIPE_NAME_LIMIT",
    # Namer
    "NAME_ENV_VARS",
    "build_channel_env",
    "build_channel_identity",
    "configure_channel",
    "extract_pipe_name",
    "format_pipe_address",
    "generate_instance_token",
    "max_base_length",
    "negotiate_channel",
    "publish_channel_identity",
    "resolve_base_name",
]
