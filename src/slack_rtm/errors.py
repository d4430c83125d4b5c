"""Exception types for slack-rtm."""

from __future__ import annotations


class SlackRtmError(Exception):
    """Base exception for slack-rtm."""


class ConfigurationError(SlackRtmError):
    """Base exception for configuration and startup validation errors."""


class TokenNotConfiguredError(ConfigurationError):
    """Raised when an API token is required but missing."""


class HandshakeError(SlackRtmError):
    """Raised when the RTM handshake does not produce a websocket endpoint."""


class ConnectTimeoutError(HandshakeError):
    """Raised when the handshake request times out while connecting."""

    def __init__(self, message: str = "Timed out while connecting to the Slack RTM API") -> None:
        super().__init__(message)


class NameResolutionError(HandshakeError):
    """Raised when the API host name cannot be resolved."""

    def __init__(self, message: str = "Could not connect to the Slack RTM API") -> None:
        super().__init__(message)


class MalformedEntityError(SlackRtmError):
    """Raised when a bootstrap entity has no `id`."""


class FrameDecodeError(SlackRtmError):
    """Raised when an inbound frame is not a JSON object."""

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(message)
        self.raw = raw


class UnknownEntityError(SlackRtmError, LookupError):
    """Raised when a reverse lookup is given an id the session does not know."""


class ChannelNotFoundError(SlackRtmError, ValueError):
    """Raised when a `#name` destination does not match any channel."""
