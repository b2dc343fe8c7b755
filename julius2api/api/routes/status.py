"""Liveness payload served on every path other than the completions route."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from ...auth import require_bearer_token

logger = logging.getLogger("julius2api")

LIVENESS_PAYLOAD = {
    "status": "Julius2Api Service Running...",
    "message": "MoLoveSze...",
}


async def service_status(request: Request) -> JSONResponse:
    """Any method, any path except /v1/chat/completions."""
    await require_bearer_token(request)
    logger.debug("Liveness request %s %s", request.method, request.url.path)
    return JSONResponse(dict(LIVENESS_PAYLOAD))
