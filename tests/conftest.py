"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generator, Optional

import httpx
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from julius2api.config_loader import RelaySettings  # noqa: E402

UPSTREAM_URL = "http://julius.test"
SESSION_TOKEN = "temp-user-0123456789"


# =============================================================================
# Fake Julius upstream
# =============================================================================


class ChunkedStream(httpx.AsyncByteStream):
    """Body stream delivered in pieces, optionally failing like a reset socket."""

    def __init__(self, chunks: list[bytes], fail: bool = False) -> None:
        self._chunks = chunks
        self._fail = fail

    async def __aiter__(self):
        for chunk in self._chunks:
            yield chunk
        if self._fail:
            raise httpx.ReadError("connection reset by peer")


@dataclass
class FakeJulius:
    """Deterministic stand-in for the playground session and chat endpoints.

    Attributes:
        records: Lines streamed back by the chat endpoint. Dicts are
            JSON-encoded, strings are sent verbatim.
        session_payload: JSON body of the session endpoint.
        session_status: HTTP status of the session endpoint.
        chat_status: HTTP status of the chat endpoint.
        fail_session: Raise a connect error for the session call.
        fail_chat: Raise a connect error for the chat call.
        break_chat_stream: Reset the chat body after the records.
        line_ending: Terminator written after every record.
        chunk_bytes: Deliver the chat body in pieces of this many bytes,
            which may cut a multibyte character in two.
        requests: Every request received, in order.
    """

    records: list[Any] = field(default_factory=list)
    session_payload: Any = field(
        default_factory=lambda: {"status": "success", "temp_user_id": SESSION_TOKEN}
    )
    session_status: int = 200
    chat_status: int = 200
    fail_session: bool = False
    fail_chat: bool = False
    break_chat_stream: bool = False
    line_ending: str = "\n"
    chunk_bytes: Optional[int] = None
    requests: list[httpx.Request] = field(default_factory=list)

    def set_answer(self, answer: str, pieces: int = 3) -> None:
        """Stream ``answer`` back split over roughly ``pieces`` records."""
        step = max(1, len(answer) // pieces)
        self.records = [
            {"content": answer[i:i + step], "role": "assistant"}
            for i in range(0, len(answer), step)
        ]

    def chat_body(self) -> bytes:
        lines = [
            record if isinstance(record, str) else json.dumps(record, ensure_ascii=False)
            for record in self.records
        ]
        return "".join(line + self.line_ending for line in lines).encode("utf-8")

    @property
    def chat_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/chat/message"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/api/temp_user_id":
            if self.fail_session:
                raise httpx.ConnectError("connection refused", request=request)
            if isinstance(self.session_payload, (bytes, str)):
                return httpx.Response(self.session_status, content=self.session_payload)
            return httpx.Response(self.session_status, json=self.session_payload)
        if path == "/api/chat/message":
            if self.fail_chat:
                raise httpx.ConnectError("connection refused", request=request)
            body = self.chat_body()
            if self.break_chat_stream or self.chunk_bytes:
                size = self.chunk_bytes or len(body) or 1
                pieces = [body[i:i + size] for i in range(0, len(body), size)]
                return httpx.Response(
                    self.chat_status,
                    stream=ChunkedStream(pieces, fail=self.break_chat_stream),
                )
            return httpx.Response(self.chat_status, content=body)
        return httpx.Response(404, json={"detail": "Not Found"})


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clear_transport_registry() -> Generator[None, None, None]:
    """Clear upstream transport registry after test.

    Use this fixture in tests that register fake transports.
    """
    from julius2api.core.upstream_transport import reset_upstream_transports

    yield
    reset_upstream_transports()


@pytest.fixture
def settings() -> RelaySettings:
    return RelaySettings(upstream_base_url=UPSTREAM_URL)


@pytest.fixture
def fake_julius(clear_transport_registry) -> FakeJulius:
    """Register a FakeJulius for UPSTREAM_URL and return it."""
    from julius2api.core.upstream_transport import install_upstream_transport

    fake = FakeJulius()
    install_upstream_transport(UPSTREAM_URL, httpx.MockTransport(fake.handler))
    return fake


def parse_sse_frames(body: str) -> list[Any]:
    """Split an SSE body into decoded frames; ``[DONE]`` stays a string."""
    frames: list[Any] = []
    for event in body.split("\n\n"):
        if not event:
            continue
        assert event.startswith("data: "), event
        data = event[len("data: "):]
        frames.append(data if data == "[DONE]" else json.loads(data))
    return frames
