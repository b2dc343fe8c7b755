"""Client for the Julius playground backend.

Two calls make up one relay request:
- acquire_session: fetch a temporary user id that identifies us upstream
- send_message: post the last user message and drain the newline-delimited
  JSON reply into a single answer string
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator, Mapping

import httpx

from ..types import JuliusChatBody
from .exceptions import RequestEncodingError, UpstreamProtocolError, UpstreamUnavailable
from .upstream_transport import transport_for

if TYPE_CHECKING:
    from ..config_loader import RelaySettings

logger = logging.getLogger("julius2api")

CLIENT_VERSION = "20240130"

# The playground only answers clients that look like its own web app.
BROWSER_HEADERS: Mapping[str, str] = {
    "Content-Type": "application/json",
    "Platform": "web",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
    ),
    "interactive-charts": "true",
    "use-dict": "true",
    "Gcs": "true",
    "Is-Native": "false",
    "sec-ch-ua-platform": "Windows",
    "Accept": "*/*",
    "Sec-Fetch-Site": "same-site",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Dest": "empty",
}

_SECRET_HEADERS = {"is-demo", "authorization"}


@dataclass(frozen=True)
class UpstreamSession:
    """Identity for a single relay request.

    The token comes from the session endpoint; the conversation id is
    minted locally and never reused.
    """

    token: str
    conversation_id: str = field(default_factory=lambda: str(uuid.uuid4()))


def mask_secret(value: str) -> str:
    """Keep only a short prefix of a secret for log output."""
    if len(value) <= 8:
        return "****"
    return value[:4] + "****"


def safe_headers_for_log(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: mask_secret(value) if key.lower() in _SECRET_HEADERS else value
        for key, value in headers.items()
    }


def format_httpx_error(exc: httpx.HTTPError, url: str) -> str:
    """Produce a short user-facing description of an httpx error."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)
    parts.append(f"url={url}")
    return "; ".join(parts)


def _client(url: str, settings: RelaySettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.upstream_timeout),
        transport=transport_for(url),
        follow_redirects=True,
    )


async def acquire_session(settings: RelaySettings) -> UpstreamSession:
    """Fetch a temporary user id from the session endpoint.

    Raises:
        UpstreamUnavailable: The call could not be completed.
        UpstreamProtocolError: The body is not JSON or lacks ``temp_user_id``.
    """
    url = settings.session_url
    logger.debug("Requesting upstream session from %s", url)
    try:
        async with _client(url, settings) as client:
            resp = await client.get(url, headers={"Accept": "application/json"})
    except httpx.HTTPError as exc:
        logger.error("Session request failed: %s", format_httpx_error(exc, url))
        raise UpstreamUnavailable(f"session request failed: {exc}") from exc

    if resp.status_code >= 400:
        raise UpstreamProtocolError(
            f"session endpoint returned status {resp.status_code}",
            upstream_status=resp.status_code,
        )

    try:
        payload = resp.json()
    except ValueError as exc:
        raise UpstreamProtocolError(f"invalid session response: {exc}") from exc

    token = payload.get("temp_user_id") if isinstance(payload, dict) else None
    if not isinstance(token, str) or not token:
        raise UpstreamProtocolError("session response missing temp_user_id")

    session = UpstreamSession(token=token)
    logger.info(
        "Acquired upstream session %s (conversation %s)",
        mask_secret(token),
        session.conversation_id,
    )
    return session


def build_chat_body(message: str, backend_model: str) -> JuliusChatBody:
    """Build the playground request body for a single user message."""
    return {
        "message": {"content": message, "role": "user"},
        "provider": "default",
        "chat_mode": "auto",
        "client_version": CLIENT_VERSION,
        "theme": "dark",
        "new_images": None,
        "new_attachments": None,
        "dataframe_format": "json",
        "selectedModels": [backend_model],
    }


def build_chat_headers(session: UpstreamSession) -> dict[str, str]:
    headers = dict(BROWSER_HEADERS)
    headers["is-demo"] = session.token
    headers["conversation-id"] = session.conversation_id
    return headers


def encode_chat_body(body: Mapping[str, Any]) -> bytes:
    try:
        return json.dumps(body, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise RequestEncodingError(f"failed to encode upstream request: {exc}") from exc


async def iter_records(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Split decoded body text into records on ``\\n`` only.

    Unicode line separators (U+2028, U+2029, U+0085) may appear raw inside
    JSON strings, so ``str.splitlines`` would cut valid records apart. A
    trailing ``\\r`` is dropped; an unterminated final record is yielded.
    """
    buffer = ""
    async for chunk in chunks:
        buffer += chunk
        *complete, buffer = buffer.split("\n")
        for line in complete:
            yield line[:-1] if line.endswith("\r") else line
    if buffer:
        yield buffer[:-1] if buffer.endswith("\r") else buffer


async def aggregate_lines(lines: AsyncIterator[str]) -> str:
    """Concatenate the ``content`` fragments of a newline-delimited JSON stream.

    Lines that are not JSON objects are skipped; transport errors from
    the iterator propagate untouched.
    """
    parts: list[str] = []
    skipped = 0
    async for line in lines:
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            skipped += 1
            continue
        if not isinstance(record, dict):
            skipped += 1
            continue
        content = record.get("content")
        if isinstance(content, str):
            parts.append(content)

    if skipped:
        # Malformed lines are tolerated; surface the count for telemetry.
        logger.debug("Skipped %d undecodable upstream line(s)", skipped)
    return "".join(parts)


async def send_message(
    session: UpstreamSession,
    message: str,
    backend_model: str,
    settings: RelaySettings,
) -> str:
    """Send one message upstream and return the full aggregated answer.

    Raises:
        RequestEncodingError: The outbound body could not be serialized.
        UpstreamUnavailable: Transport failure, including mid-stream reads.
        UpstreamProtocolError: The chat endpoint answered with an error status.
    """
    url = settings.chat_url
    content = encode_chat_body(build_chat_body(message, backend_model))
    headers = build_chat_headers(session)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Upstream chat headers: %s", safe_headers_for_log(headers))

    try:
        async with _client(url, settings) as client:
            async with client.stream("POST", url, headers=headers, content=content) as resp:
                if resp.status_code >= 400:
                    await resp.aread()
                    raise UpstreamProtocolError(
                        f"chat endpoint returned status {resp.status_code}",
                        upstream_status=resp.status_code,
                    )
                answer = await aggregate_lines(iter_records(resp.aiter_text()))
    except httpx.HTTPError as exc:
        logger.error("Chat request failed: %s", format_httpx_error(exc, url))
        raise UpstreamUnavailable(f"chat request failed: {exc}") from exc

    logger.info(
        "Received %d characters from upstream model %s", len(answer), backend_model
    )
    return answer
