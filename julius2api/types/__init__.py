"""Type definitions for the relay."""

from .chat import (
    AssistantMessage,
    ChatCompletion,
    ChatCompletionChunk,
    ChatMessage,
    ChatRequest,
    Choice,
    ChunkChoice,
    Delta,
    JuliusChatBody,
    JuliusMessage,
    JuliusSessionPayload,
)

__all__ = [
    "AssistantMessage",
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChatMessage",
    "ChatRequest",
    "Choice",
    "ChunkChoice",
    "Delta",
    "JuliusChatBody",
    "JuliusMessage",
    "JuliusSessionPayload",
]
