"""julius2api - OpenAI-compatible relay for the Julius playground

Exposes /v1/chat/completions, forwards the last message of each request to
the Julius playground chat backend and answers with an OpenAI-style
completion or a synthetic SSE stream.

This module provides:
- create_app: FastAPI application factory
- RelaySettings / load_settings: immutable process configuration
- The translation core: model aliases, upstream client, stream synthesizer

Example:
    >>> from julius2api.main import app
    >>> import uvicorn
    >>> uvicorn.run(app, host="0.0.0.0", port=8000)
"""

from .config_loader import RelaySettings, load_config, load_settings
from .core import RelayError, resolve_model
from .logging import setup_logging
from .main import app, create_app

__all__ = [
    "app",
    "create_app",
    "load_config",
    "load_settings",
    "RelayError",
    "RelaySettings",
    "resolve_model",
    "setup_logging",
]
