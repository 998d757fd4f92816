"""
Data models for named-pipe channel negotiation.

Defines the channel identity the launcher publishes to the compatibility
layer binary, plus the Windows named-pipe limits it must respect.
"""

from __future__ import annotations

from dataclasses import dataclass

# \\.\pipe\ plus the pipe name may not exceed 256 characters
PIPE_NAME_LIMIT = 256
PIPE_ADDRESS_PREFIX = "\\\\.\\pipe\\"
MAX_PIPE_NAME_LENGTH = PIPE_NAME_LIMIT - len(PIPE_ADDRESS_PREFIX)

DEFAULT_BASE_NAME = "DD_SERVERLESS_COMPAT"
TOKEN_SEPARATOR = "_"

# Names of the inputs that can win base-name resolution
SOURCE_DEFAULT = "default"


@dataclass(frozen=True)
class ChannelIdentity:
    """
    Negotiated identity of the IPC channel for one process start.

    Attributes:
        base_name: Operator-influenced prefix, after length governance
        instance_token: Fresh unique token (a UUID), never truncated
        channel_name: "{base_name}_{instance_token}"
        channel_address: Addressable pipe path embedding channel_name
        source: Which input supplied the base name
        original_base_length: Length of the base name before truncation
    """

    base_name: str
    instance_token: str
    channel_name: str
    channel_address: str
    source: str = SOURCE_DEFAULT
    original_base_length: int = 0

    @property
    def truncated(self) -> bool:
        """Whether the base name was shortened to fit the pipe limit."""
        return self.original_base_length > len(self.base_name)


__all__ = [
    "ChannelIdentity",
    "DEFAULT_BASE_NAME",
    "MAX_PIPE_NAME_LENGTH",
    "PIPE_ADDRESS_PREFIX",
    "PIPE_NAME_LIMIT",
    "SOURCE_DEFAULT",
    "TOKEN_SEPARATOR",
]
