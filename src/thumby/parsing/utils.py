"""
URL classification and video ID extraction utilities.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from thumby.config.providers import Provider
from thumby.exceptions import MetadataError
from thumby.models.video_url import VideoURL

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

_URL_LINE_RE = re.compile(r"^(?:https?://|www\.)\S+$", re.IGNORECASE)


async def classify_url(url: str, client: httpx.AsyncClient) -> VideoURL:
    """Classify a URL, resolving Vimeo vanity links over the network.

    This is the only classification path that may touch the network: a
    non-numeric Vimeo token costs exactly one oEmbed request, every other
    URL costs none.

    Args:
        url: Raw URL as written by the user
        client: Shared HTTP client

    Returns:
        VideoURL; video_id stays empty if a vanity link cannot be resolved.

    Raises:
        NetworkError: If the vanity lookup got no response.
    """
    video = VideoURL.parse(url)
    if video.provider is not Provider.VIMEO or not video.vanity:
        return video

    from thumby.providers.registry import get_provider

    vimeo = get_provider(Provider.VIMEO)
    try:
        video_id = await vimeo.resolve_video_id(video.url, client)
    except MetadataError as e:
        logger.info(f"Could not resolve Vimeo link {video.url}: {e}")
        return video

    return video.model_copy(update={"video_id": video_id})


def extract_video_id(url: str) -> str:
    """Extract video ID from URL without network access.

    Args:
        url: Video URL

    Returns:
        Extracted video ID, or "" if the URL is not recognized
    """
    return VideoURL.parse(url).video_id


def extract_playlist_id(url: str) -> str | None:
    """Extract YouTube playlist ID from URL (list= parameter).

    Args:
        url: Video URL

    Returns:
        Playlist ID or None if not found
    """
    match = re.search(r"[?&]list=([a-zA-Z0-9_-]+)", url)
    return match.group(1) if match else None


def get_provider_for_url(url: str) -> str | None:
    """Get the provider name for a URL, or None if unknown.

    Args:
        url: Video URL

    Returns:
        Provider name (e.g., "YouTube") or None
    """
    video = VideoURL.parse(url)
    return video.provider.display_name if video.is_known_provider else None


def is_url_line(line: str) -> bool:
    """Check whether a block line holds a bare URL."""
    return bool(_URL_LINE_RE.match(line.strip()))
