"""Exceptions raised by the studio server."""


class StudioError(Exception):
    """Base exception for studio server errors."""
    pass


class InvalidContextError(StudioError):
    """Raised when a bidding or play context is malformed."""
    pass


class MissingCredentialError(StudioError):
    """Raised when a completion client is built without an API key."""
    pass


class AssistantNotConfiguredError(StudioError):
    """Raised when the data assistant is used without an API key."""
    pass


class RemoteDecisionError(StudioError):
    """Base exception for a failed chat-completion call."""

    def __init__(self, message: str, status: int = None):
        self.status = status
        super().__init__(message)


class NetworkError(RemoteDecisionError):
    """The request never got an HTTP response (connection, timeout)."""
    pass


class QuotaError(RemoteDecisionError):
    """The endpoint refused the request because of rate or quota limits."""
    pass


class UpstreamError(RemoteDecisionError):
    """The endpoint answered with an error status or an unusable body."""
    pass
