"""Application-level exception types for a2ui-chat."""

from __future__ import annotations


class A2UIChatError(Exception):
    """Base exception for a2ui-chat."""


class ConfigurationError(A2UIChatError):
    """Raised when settings fail startup validation."""


class TransportError(A2UIChatError):
    """Raised when the agent request fails or returns a non-success status."""

    def __init__(self, message: str = "agent request failed", *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProtocolError(TransportError):
    """Raised when a success envelope carries no usable result."""


class CompletionError(A2UIChatError):
    """Raised when a completion sink receives a second terminal write."""
