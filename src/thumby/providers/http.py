"""
HTTP helpers shared by the provider clients.

Every helper maps transport failures (no response at all) to NetworkError
and bad responses to MetadataError, so callers can tell "offline" apart
from "not a video".
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from thumby.exceptions import MetadataError, NetworkError, VideoNotFoundError

logger = logging.getLogger(__name__)


async def _get(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
    timeout: float | None = None,
) -> httpx.Response:
    kwargs: dict[str, Any] = {"params": params}
    if timeout is not None:
        kwargs["timeout"] = timeout
    try:
        response = await client.get(url, **kwargs)
    except httpx.TransportError as e:
        raise NetworkError(f"Request to {url} failed: {e}", url=url) from e
    except httpx.HTTPError as e:
        raise MetadataError(f"Request to {url} failed: {e}") from e

    logger.debug("GET %s -> %s", response.request.url, response.status_code)

    if response.status_code == 404:
        raise VideoNotFoundError(f"Not found: {url}", http_code=404)
    if not response.is_success:
        raise MetadataError(
            f"Unexpected status {response.status_code} from {url}",
            http_code=response.status_code,
        )
    return response


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """GET a JSON object.

    Raises:
        NetworkError: If no response arrived.
        MetadataError: On non-2xx status or a body that is not a JSON object.
    """
    response = await _get(client, url, params)
    try:
        data = response.json()
    except ValueError as e:
        raise MetadataError(f"Invalid JSON from {url}: {e}") from e
    if not isinstance(data, dict):
        raise MetadataError(f"Expected a JSON object from {url}")
    return data


async def get_text(client: httpx.AsyncClient, url: str) -> str:
    """GET a text body (HTML page)."""
    response = await _get(client, url)
    return response.text


async def get_bytes(
    client: httpx.AsyncClient, url: str, timeout: float | None = None
) -> bytes:
    """GET a binary body (thumbnail image)."""
    response = await _get(client, url, timeout=timeout)
    return response.content
