"""API module for the relay."""

from .routes import LIVENESS_PAYLOAD, chat_completions, parse_chat_request, service_status

__all__ = [
    "LIVENESS_PAYLOAD",
    "chat_completions",
    "parse_chat_request",
    "service_status",
]
