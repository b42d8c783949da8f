"""
Shared httpx plumbing for the Treolan clients.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from treolan_proxy.integrations.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)


def build_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout_seconds)


async def send(client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """Issue one request, turning transport failures into UpstreamUnavailableError."""
    try:
        return await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        logger.error("Timeout calling %s %s", method, url)
        raise UpstreamUnavailableError(f"Treolan request timed out: {method} {url}") from e
    except httpx.RequestError as e:
        logger.error("Request error calling %s %s: %s", method, url, e)
        raise UpstreamUnavailableError(f"Treolan request failed: {method} {url}: {e}") from e
