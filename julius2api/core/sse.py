"""Completion objects and synthetic SSE streams built from a finished answer.

The upstream answer is fully known before anything is sent, so streaming
is a replay: the text is cut into fixed-size slices and each slice is
sent as one ``chat.completion.chunk``.
"""

import json
import time
import uuid
from typing import AsyncIterator, Awaitable, Callable, Iterable, Optional, Union

from ..types import ChatCompletion, ChatCompletionChunk, Delta
from .exceptions import ResponseWriteError


DEFAULT_CHUNK_SIZE = 50
DONE_SENTINEL = "[DONE]"

Frame = Union[ChatCompletionChunk, str]


def new_completion_id() -> str:
    return f"chatcmpl-{uuid.uuid4().hex}"


def current_timestamp() -> int:
    return int(time.time())


def split_into_chunks(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split text into slices of ``chunk_size`` code points.

    The last slice may be shorter. Empty text yields no slices.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return [text[i:i + chunk_size] for i in range(0, len(text), chunk_size)]


def build_completion(
    answer: str, model: str, completion_id: str, created: int
) -> ChatCompletion:
    """Build a non-streaming ``chat.completion`` object."""
    return {
        "id": completion_id,
        "object": "chat.completion",
        "created": created,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": answer},
                "finish_reason": "stop",
            }
        ],
    }


def _chunk(
    delta: Delta,
    model: str,
    completion_id: str,
    created: int,
    finish_reason: Optional[str] = None,
) -> ChatCompletionChunk:
    return {
        "id": completion_id,
        "object": "chat.completion.chunk",
        "created": created,
        "model": model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }


def build_stream_chunks(
    answer: str,
    model: str,
    completion_id: str,
    created: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[Frame]:
    """Build the full frame sequence for a synthetic stream.

    Order: one role announcement, one frame per slice of ``answer`` (only
    the last carries ``finish_reason="stop"``), then ``DONE_SENTINEL``.
    """
    frames: list[Frame] = [
        _chunk({"role": "assistant", "content": ""}, model, completion_id, created)
    ]
    slices = split_into_chunks(answer, chunk_size)
    last = len(slices) - 1
    for i, piece in enumerate(slices):
        frames.append(
            _chunk(
                {"content": piece},
                model,
                completion_id,
                created,
                finish_reason="stop" if i == last else None,
            )
        )
    frames.append(DONE_SENTINEL)
    return frames


def format_sse_frame(frame: Frame) -> bytes:
    """Render one frame as an SSE ``data:`` event."""
    if isinstance(frame, str):
        data = frame
    else:
        data = json.dumps(frame, ensure_ascii=False)
    return f"data: {data}\n\n".encode("utf-8")


async def iter_sse_frames(
    frames: Iterable[Frame],
    disconnect_checker: Optional[Callable[[], Awaitable[bool]]] = None,
) -> AsyncIterator[bytes]:
    """Yield encoded frames, stopping with ResponseWriteError once the client is gone."""
    for sent, frame in enumerate(frames):
        if disconnect_checker is not None and await disconnect_checker():
            raise ResponseWriteError(f"client disconnected after {sent} frame(s)")
        yield format_sse_frame(frame)
