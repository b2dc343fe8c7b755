"""API routes for the relay."""

from .chat import chat_completions, parse_chat_request
from .status import LIVENESS_PAYLOAD, service_status

__all__ = [
    "LIVENESS_PAYLOAD",
    "chat_completions",
    "parse_chat_request",
    "service_status",
]
