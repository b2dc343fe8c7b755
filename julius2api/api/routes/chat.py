"""OpenAI-compatible chat completions endpoint backed by the Julius playground."""

import json
import logging
from typing import Any, Mapping

from fastapi import Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from ...auth import require_bearer_token
from ...core import (
    MalformedRequest,
    MethodNotSupported,
    ResponseWriteError,
    acquire_session,
    build_completion,
    build_stream_chunks,
    iter_sse_frames,
    resolve_model,
    send_message,
)
from ...core.sse import current_timestamp, new_completion_id
from ...types import ChatMessage

logger = logging.getLogger("julius2api")

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def message_text(message: ChatMessage) -> str:
    """Extract the plain text of a message.

    A list of content parts is flattened to its text parts, in order.
    """
    content = message.get("content")
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for part in content:
            if isinstance(part, Mapping) and part.get("type") == "text":
                text = part.get("text")
                if isinstance(text, str):
                    texts.append(text)
        return "".join(texts)
    raise MalformedRequest("message content must be a string or a list of content parts")


def parse_chat_request(body: bytes) -> tuple[str, Any, bool]:
    """Decode a chat completion request.

    Returns:
        The last message's text, the client model identifier and the
        stream flag. Earlier messages are accepted but not forwarded.

    Raises:
        MalformedRequest: The body is not a usable chat request.
    """
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedRequest(str(exc)) from exc

    if not isinstance(payload, Mapping):
        raise MalformedRequest("request body must be a JSON object")

    messages = payload.get("messages")
    if not isinstance(messages, list) or not messages:
        raise MalformedRequest("messages must be a non-empty array")
    last = messages[-1]
    if not isinstance(last, Mapping):
        raise MalformedRequest("each message must be an object")

    model = payload.get("model")
    if model is not None and not isinstance(model, str):
        raise MalformedRequest("model must be a string")

    stream = payload.get("stream")
    if stream is None:
        stream = False
    elif not isinstance(stream, bool):
        raise MalformedRequest("stream must be a boolean")

    return message_text(last), model, stream


async def chat_completions(request: Request) -> Response:
    """Chat completions endpoint - OpenAI compatible.

    POST /v1/chat/completions
    """
    await require_bearer_token(request)
    if request.method != "POST":
        logger.warning("Rejected %s on %s", request.method, request.url.path)
        raise MethodNotSupported()

    settings = request.app.state.settings
    body = await request.body()
    text, client_model, is_stream = parse_chat_request(body)
    backend_model = resolve_model(client_model)
    logger.info(
        "Processing request for model %s -> %s, stream=%s",
        client_model,
        backend_model,
        is_stream,
    )

    session = await acquire_session(settings)
    answer = await send_message(session, text, backend_model, settings)

    completion_id = new_completion_id()
    created = current_timestamp()

    if not is_stream:
        return JSONResponse(build_completion(answer, backend_model, completion_id, created))

    frames = build_stream_chunks(
        answer, backend_model, completion_id, created, settings.chunk_size
    )
    logger.debug("Streaming %d frame(s) for %s", len(frames), completion_id)

    async def iterator():
        try:
            async for data in iter_sse_frames(frames, request.is_disconnected):
                yield data
        except ResponseWriteError as exc:
            logger.warning("Stopped streaming %s: %s", completion_id, exc.message)

    return StreamingResponse(
        iterator(), media_type="text/event-stream", headers=STREAM_HEADERS
    )
