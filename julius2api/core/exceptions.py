"""Core exceptions for the relay."""

from typing import Optional


class RelayError(Exception):
    """Base exception for relay errors.

    Every subclass carries the HTTP status the request fails with; the
    message is returned to the client as plain text.
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(RelayError):
    """Raised when the bearer credential is missing or does not match."""

    status_code = 401

    def __init__(self, message: str = "Access Denied") -> None:
        super().__init__(message)


class MethodNotSupported(RelayError):
    """Raised for non-POST requests on the completions path."""

    status_code = 405

    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(message)


class MalformedRequest(RelayError):
    """Raised when the inbound request body cannot be decoded."""

    status_code = 400


class UpstreamUnavailable(RelayError):
    """Raised when the backend cannot be reached or the transport fails."""


class UpstreamProtocolError(RelayError):
    """Raised when the backend answers with something we cannot use."""

    def __init__(self, message: str, upstream_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class RequestEncodingError(RelayError):
    """Raised when the outbound request body cannot be serialized."""


class ResponseWriteError(RelayError):
    """Raised when the client goes away while frames are being written."""


class ConfigurationError(RelayError):
    """Raised when there's an issue with the configuration."""
    pass
