"""
Named-pipe channel negotiation.

Derives a collision-free, length-bounded pipe name for each process start,
reconciles it with whatever the operator already set, and publishes it in
every environment variable the tracer, DogStatsD client and compatibility
layer binary read.
"""

from __future__ import annotations

import os
import re
import uuid
from collections.abc import Callable, MutableMapping

from serverless_compat.core.config.models import (
    DOGSTATSD_PIPE_ALIAS_ENV,
    DOGSTATSD_PIPE_ENV,
    PIPE_ADDRESS_ENV,
    TRACE_PIPE_ALIAS_ENV,
    TRACE_PIPE_ENV,
    CompatConfig,
)
from serverless_compat.core.pipes.models import (
    DEFAULT_BASE_NAME,
    MAX_PIPE_NAME_LENGTH,
    PIPE_ADDRESS_PREFIX,
    PIPE_NAME_LIMIT,
    SOURCE_DEFAULT,
    TOKEN_SEPARATOR,
    ChannelIdentity,
)
from serverless_compat.utils.log import Logger

# \\.\pipe\ or \\?\pipe\, any case
_PIPE_PREFIX_RE = re.compile(r"^\\\\[.?]\\pipe\\", re.IGNORECASE)

# Variables that receive the plain channel name
NAME_ENV_VARS = (
    TRACE_PIPE_ENV,
    TRACE_PIPE_ALIAS_ENV,
    DOGSTATSD_PIPE_ENV,
    DOGSTATSD_PIPE_ALIAS_ENV,
)


def generate_instance_token() -> str:
    """Return a fresh per-process token."""
    return str(uuid.uuid4())


def extract_pipe_name(address: str | None) -> str | None:
    r"""
    Strip the named-pipe prefix from a full pipe address.

    Both the \\.\pipe\ and \\?\pipe\ forms are recognised, in any case.

    Args:
        address: Full pipe address

    Returns:
        The pipe name, or None if nothing remains. Values without the
        prefix are returned as-is.
    """
    if address is None:
        return None
    name = _PIPE_PREFIX_RE.sub("", address.strip(), count=1)
    return name or None


def format_pipe_address(channel_name: str) -> str:
    """Return the addressable pipe path for a channel name."""
    return f"{PIPE_ADDRESS_PREFIX}{channel_name}"


def resolve_base_name(config: CompatConfig) -> tuple[str, str]:
    """
    Pick the base name using the override priority chain.

    Priority (first non-empty wins):
        1. DD_TRACE_WINDOWS_PIPE_NAME
        2. DD_DOGSTATSD_WINDOWS_PIPE_NAME
        3. Name extracted from DD_SERVERLESS_PIPE_ADDRESS
        4. DEFAULT_BASE_NAME

    Args:
        config: Resolved configuration

    Returns:
        Tuple of (base_name, source variable or "default")
    """
    if config.trace_pipe_name:
        return config.trace_pipe_name, TRACE_PIPE_ENV
    if config.dogstatsd_pipe_name:
        return config.dogstatsd_pipe_name, DOGSTATSD_PIPE_ENV
    if extracted := extract_pipe_name(config.pipe_address):
        return extracted, PIPE_ADDRESS_ENV
    return DEFAULT_BASE_NAME, SOURCE_DEFAULT


def max_base_length(instance_token: str) -> int:
    """
    Longest base name that still fits next to the token.

    For a UUID token this is 256 - 9 - 36 - 1 = 210.
    """
    return MAX_PIPE_NAME_LENGTH - len(instance_token) - len(TOKEN_SEPARATOR)


def build_channel_identity(
    base_name: str,
    instance_token: str,
    source: str = SOURCE_DEFAULT,
) -> ChannelIdentity:
    """
    Apply length governance and assemble the channel identity.

    The base name is cut from the right to max_base_length(); the token is
    always appended whole.

    Args:
        base_name: Resolved base name
        instance_token: Fresh token for this process start
        source: Which input supplied the base name

    Returns:
        ChannelIdentity whose channel_name fits the pipe limit
    """
    cap = max(max_base_length(instance_token), 0)
    truncated = base_name[:cap]
    channel_name = f"{truncated}{TOKEN_SEPARATOR}{instance_token}"
    return ChannelIdentity(
        base_name=truncated,
        instance_token=instance_token,
        channel_name=channel_name,
        channel_address=format_pipe_address(channel_name),
        source=source,
        original_base_length=len(base_name),
    )


def publish_channel_identity(
    identity: ChannelIdentity,
    environ: MutableMapping[str, str],
) -> dict[str, str]:
    """
    Write the identity into every consumer-facing variable.

    Args:
        identity: Channel identity to publish
        environ: Mapping to write to (usually os.environ)

    Returns:
        The variables that were written
    """
    published = {name: identity.channel_name for name in NAME_ENV_VARS}
    published[PIPE_ADDRESS_ENV] = identity.channel_address
    for key, value in published.items():
        environ[key] = value
    return published


def _warn_conflicts(
    identity: ChannelIdentity,
    config: CompatConfig,
    logger: Logger,
) -> None:
    if config.pipe_address and config.pipe_address != identity.channel_address:
        logger.warn(
            f"{PIPE_ADDRESS_ENV} ({config.pipe_address}) differs from computed pipe "
            f"address ({identity.channel_address}). Using computed pipe address "
            "with GUID suffix."
        )

    aliases = (
        (TRACE_PIPE_ALIAS_ENV, config.trace_pipe_alias),
        (DOGSTATSD_PIPE_ALIAS_ENV, config.dogstatsd_pipe_alias),
    )
    for env_name, preset in aliases:
        if preset and preset != identity.channel_name:
            logger.warn(
                f"{env_name} ({preset}) differs from computed pipe name "
                f"({identity.channel_name}). Using computed pipe name with GUID suffix."
            )


def negotiate_channel(
    logger: Logger,
    config: CompatConfig,
    token_factory: Callable[[], str] | None = None,
) -> ChannelIdentity:
    """
    Resolve, bound and reconcile the channel identity, logging as it goes.

    Does not touch the environment; see configure_channel.

    Args:
        logger: Logger for debug and warning output
        config: Configuration snapshot to negotiate against
        token_factory: Token source (defaults to uuid4)

    Returns:
        The negotiated ChannelIdentity
    """
    token = (token_factory or generate_instance_token)()
    base_name, source = resolve_base_name(config)
    identity = build_channel_identity(base_name, token, source=source)

    if identity.truncated:
        logger.warn(
            f"Pipe base name is too long ({identity.original_base_length} chars). "
            f"Truncating to {len(identity.base_name)} chars to fit within "
            f"{PIPE_NAME_LIMIT} character limit with GUID."
        )

    _warn_conflicts(identity, config, logger)
    return identity


def configure_channel(
    logger: Logger,
    *,
    config: CompatConfig | None = None,
    environ: MutableMapping[str, str] | None = None,
    token_factory: Callable[[], str] | None = None,
) -> None:
    """
    Negotiate the pipe name and publish it to the process environment.

    Call once, before spawning the compatibility layer binary, so that the
    binary inherits the name. Never raises: unexpected failures are
    reported through logger.error.

    Args:
        logger: Logger for debug, warning and error output
        config: Configuration snapshot (read fresh from environ if None)
        environ: Mapping to publish into (defaults to os.environ)
        token_factory: Token source (defaults to uuid4)

    Example:
        >>> configure_channel(log)
        >>> os.environ["DD_TRACE_PIPE_NAME"]
        'DD_SERVERLESS_COMPAT_2f1c...'
    """
    if environ is None:
        environ = os.environ

    try:
        if config is None:
            config = CompatConfig.from_env(environ)

        identity = negotiate_channel(logger, config, token_factory)
        publish_channel_identity(identity, environ)

        logger.debug(f"Configured pipe name: {identity.channel_name}")
        logger.debug(f"Configured pipe address: {identity.channel_address}")
    except Exception as e:
        logger.error(f"Failed to configure pipe names: {e}")


def build_channel_env(
    logger: Logger,
    *,
    config: CompatConfig | None = None,
    token_factory: Callable[[], str] | None = None,
) -> dict[str, str]:
    """
    Negotiate the pipe name without mutating os.environ.

    Args:
        logger: Logger for debug and warning output
        config: Configuration snapshot (read from os.environ if None)
        token_factory: Token source (defaults to uuid4)

    Returns:
        The variables configure_channel would publish
    """
    if config is None:
        config = CompatConfig.from_env(os.environ)

    identity = negotiate_channel(logger, config, token_factory)
    return publish_channel_identity(identity, {})


__all__ = [
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
