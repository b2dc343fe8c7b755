"""Core module initialization."""

from .exceptions import (
    ConfigurationError,
    MalformedRequest,
    MethodNotSupported,
    RelayError,
    RequestEncodingError,
    ResponseWriteError,
    Unauthenticated,
    UpstreamProtocolError,
    UpstreamUnavailable,
)
from .models import DEFAULT_BACKEND_MODEL, MODEL_ALIASES, resolve_model
from .sse import (
    DONE_SENTINEL,
    build_completion,
    build_stream_chunks,
    format_sse_frame,
    iter_sse_frames,
    split_into_chunks,
)
from .upstream import (
    BROWSER_HEADERS,
    UpstreamSession,
    acquire_session,
    aggregate_lines,
    build_chat_body,
    build_chat_headers,
    iter_records,
    send_message,
)

__all__ = [
    "BROWSER_HEADERS",
    "ConfigurationError",
    "DEFAULT_BACKEND_MODEL",
    "DONE_SENTINEL",
    "MODEL_ALIASES",
    "MalformedRequest",
    "MethodNotSupported",
    "RelayError",
    "RequestEncodingError",
    "ResponseWriteError",
    "Unauthenticated",
    "UpstreamProtocolError",
    "UpstreamSession",
    "UpstreamUnavailable",
    "acquire_session",
    "aggregate_lines",
    "build_chat_body",
    "build_chat_headers",
    "build_completion",
    "build_stream_chunks",
    "format_sse_frame",
    "iter_records",
    "iter_sse_frames",
    "resolve_model",
    "send_message",
    "split_into_chunks",
]
