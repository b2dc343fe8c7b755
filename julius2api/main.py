"""Main FastAPI application for the julius2api relay."""

import logging
import socket
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .api.routes import chat_completions, service_status
from .config_loader import RelaySettings, load_settings
from .core import RelayError
from .core.models import MODEL_ALIASES
from .logging import setup_logging

logger = logging.getLogger("julius2api")

COMPLETIONS_PATH = "/v1/chat/completions"


async def relay_error_handler(request: Request, exc: RelayError) -> PlainTextResponse:
    """Render relay errors as plain text with their HTTP status."""
    if exc.status_code >= 500:
        logger.error(
            "Error processing %s %s: %s", request.method, request.url.path, exc.message
        )
    else:
        logger.info(
            "Rejected %s %s with %d: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def create_app(settings: Optional[RelaySettings] = None) -> FastAPI:
    """Factory function to create the FastAPI application.

    Args:
        settings: Relay settings. Loaded from the config file and
            environment when omitted.

    Returns:
        The configured FastAPI application instance.
    """
    if settings is None:
        settings = load_settings()

    # Every path is served by the relay, so the generated docs are off
    app = FastAPI(title="julius2api", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.add_exception_handler(RelayError, relay_error_handler)

    # Plain routes without a method list accept any verb, TRACE and custom
    # ones included; the completions route must precede the catch-all
    app.add_route(COMPLETIONS_PATH, chat_completions)
    app.add_route("/{path:path}", service_status)

    logger.info("FastAPI application created")
    logger.info("Upstream: %s", settings.upstream_base_url)
    logger.info("Bearer auth enabled: %s", settings.auth_enabled)
    logger.info("Model aliases: %s", ", ".join(sorted(MODEL_ALIASES)))
    return app


def main() -> None:
    """Run the relay with uvicorn on the configured address."""
    import uvicorn

    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("Configured bind address %s:%s", settings.host, settings.port)
    if settings.host == "0.0.0.0":
        hostname = socket.gethostname()
        logger.info("Reachable on local network at http://%s:%s", hostname, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


_settings = load_settings()
setup_logging(_settings.log_level)
app = create_app(_settings)

__all__ = ["app", "create_app", "main", "relay_error_handler"]


if __name__ == "__main__":
    main()
