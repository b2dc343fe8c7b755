"""In-process replacements for the Julius playground.

Outbound clients ask ``transport_for(url)`` which transport to use; tests
install an ``httpx.MockTransport`` for the playground origin so the
session and chat calls never leave the process.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

logger = logging.getLogger("julius2api")

_INSTALLED: dict[tuple[str, str, Optional[int]], httpx.AsyncBaseTransport] = {}


def _origin(url: str | httpx.URL) -> tuple[str, str, Optional[int]]:
    parsed = httpx.URL(url)
    return parsed.scheme, parsed.host, parsed.port


def install_upstream_transport(base_url: str, transport: httpx.AsyncBaseTransport) -> None:
    """Route every call to ``base_url``'s origin through ``transport``."""
    scheme, host, port = _origin(base_url)
    if not host:
        raise ValueError(f"upstream base url has no host: {base_url!r}")
    _INSTALLED[(scheme, host, port)] = transport
    logger.debug("Installed in-process transport for %s://%s", scheme, host)


def reset_upstream_transports() -> None:
    _INSTALLED.clear()


def transport_for(url: str) -> Optional[httpx.AsyncBaseTransport]:
    """Return the installed transport for ``url``'s origin, or None for the network."""
    if not url:
        return None
    return _INSTALLED.get(_origin(url))
