"""Bearer token check for inbound requests."""

from __future__ import annotations

import hmac
import logging
from typing import Mapping

from fastapi import Request

from ..core.exceptions import Unauthenticated

logger = logging.getLogger("julius2api")

BEARER_PREFIX = "Bearer "


def authorize(headers: Mapping[str, str], expected_token: str | None) -> bool:
    """Return whether a request with these headers may proceed.

    Without an expected token every request is allowed. Otherwise the
    Authorization header, minus a literal ``Bearer `` prefix, must equal
    the expected token exactly.
    """
    if not expected_token:
        return True

    provided = headers.get("authorization") or headers.get("Authorization")
    if not provided:
        return False
    if provided.startswith(BEARER_PREFIX):
        provided = provided[len(BEARER_PREFIX):]
    return hmac.compare_digest(provided.encode("utf-8"), expected_token.encode("utf-8"))


async def require_bearer_token(request: Request) -> None:
    """Enforce the configured bearer token before a route does any work.

    Raises:
        Unauthenticated: 401 for a missing or mismatched token.
    """
    settings = request.app.state.settings
    if authorize(request.headers, settings.auth_token):
        return
    logger.warning(
        "Request rejected: missing or invalid bearer token for %s %s",
        request.method,
        request.url.path,
    )
    raise Unauthenticated()
