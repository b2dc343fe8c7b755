"""Types for the chat payloads on both sides of the relay.

This module defines type schemas for:
- OpenAI-compatible types: the inbound request and the completion
  objects and stream chunks sent back to the client
- Julius types: the request body sent to the playground backend and the
  records it streams back
"""

from typing import Any, Optional
from typing_extensions import TypedDict


# =============================================================================
# OpenAI-Compatible Types
# =============================================================================


class ChatMessage(TypedDict, total=False):
    """A message in a chat conversation (OpenAI format).

    Attributes:
        role: The role of the message author (system, user, assistant...).
        content: The message text. Clients may also send a list of
            content parts; only text parts are kept.
    """
    role: str
    content: Any


class ChatRequest(TypedDict, total=False):
    """The subset of an OpenAI chat completion request the relay reads.

    Attributes:
        messages: Conversation so far. Only the last entry goes upstream.
        model: Client-facing model identifier.
        stream: Whether to answer as an SSE stream.
    """
    messages: list[ChatMessage]
    model: str
    stream: bool


class AssistantMessage(TypedDict):
    role: str
    content: str


class Choice(TypedDict):
    """A single non-streaming completion choice."""
    index: int
    message: AssistantMessage
    finish_reason: str


class ChatCompletion(TypedDict):
    """A non-streaming chat completion response (OpenAI format)."""
    id: str
    object: str
    created: int
    model: str
    choices: list[Choice]


class Delta(TypedDict, total=False):
    """Incremental content in a stream chunk.

    The role announcement carries ``role`` and an empty ``content``;
    content chunks carry ``content`` only.
    """
    role: str
    content: str


class ChunkChoice(TypedDict):
    index: int
    delta: Delta
    finish_reason: Optional[str]


class ChatCompletionChunk(TypedDict):
    """A single streaming chunk (OpenAI ``chat.completion.chunk``)."""
    id: str
    object: str
    created: int
    model: str
    choices: list[ChunkChoice]


# =============================================================================
# Julius Types
# =============================================================================


class JuliusMessage(TypedDict):
    content: str
    role: str


class JuliusChatBody(TypedDict):
    """Request body for the playground chat endpoint.

    Everything except ``message`` and ``selectedModels`` is a fixed
    operational flag.
    """
    message: JuliusMessage
    provider: str
    chat_mode: str
    client_version: str
    theme: str
    new_images: None
    new_attachments: None
    dataframe_format: str
    selectedModels: list[str]


class JuliusSessionPayload(TypedDict, total=False):
    """Body of the temp user id endpoint."""
    status: str
    temp_user_id: str
