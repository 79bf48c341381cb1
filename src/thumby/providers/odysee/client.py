"""
thumby.providers.odysee.client - OdyseeProvider implementation.

Odysee publishes no oEmbed endpoint, so metadata comes from the schema.org
VideoObject that the video page embeds as JSON-LD. This depends on
third-party markup: every field is read defensively and a page without a
usable block raises MetadataError.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup

from thumby.config.defaults import ODYSEE_BASE_URL
from thumby.config.providers import Provider
from thumby.exceptions import MetadataError
from thumby.providers.base import StructuredDataSource, VideoProvider
from thumby.providers.capabilities import PROVIDER_INFO, ProviderInfo
from thumby.providers.http import get_text

if TYPE_CHECKING:
    import httpx

    from thumby.models.metadata import ResolvedMetadata
    from thumby.models.video_url import VideoURL

logger = logging.getLogger(__name__)

_CHANNEL_RE = re.compile(r"odysee\.com/(@[^/?#]+)")


def _page_url(url: str) -> str:
    if url.startswith(("http://", "https://")):
        return url
    return "https://" + url


def _channel_url(url: str) -> str:
    match = _CHANNEL_RE.search(url)
    return f"{ODYSEE_BASE_URL}/{match.group(1)}" if match else ""


def _first(value: Any) -> Any:
    """Unwrap single-element-or-list fields."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def extract_video_object(html: str) -> dict[str, Any] | None:
    """Find the JSON-LD record describing the video in a page.

    Args:
        html: Raw page HTML.

    Returns:
        The first JSON-LD object that has a "name", or None.
    """
    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script", type="application/ld+json"):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.debug(f"Skipping malformed JSON-LD block: {e}")
            continue

        candidates = data if isinstance(data, list) else [data]
        for candidate in candidates:
            if isinstance(candidate, dict) and candidate.get("name"):
                return candidate
    return None


class OdyseeProvider(VideoProvider, StructuredDataSource):
    """Odysee metadata provider (JSON-LD page scrape)."""

    @property
    def info(self) -> ProviderInfo:
        return PROVIDER_INFO[Provider.ODYSEE]

    async def fetch_structured_data(
        self, video: VideoURL, client: httpx.AsyncClient
    ) -> ResolvedMetadata:
        html = await get_text(client, _page_url(video.url))
        record = extract_video_object(html)
        if record is None:
            raise MetadataError(f"No structured data on {video.url}")

        author = _first(record.get("author"))
        if isinstance(author, dict):
            author_name = author.get("name")
            author_url = author.get("url") or _channel_url(video.url)
        else:
            author_name = author
            author_url = _channel_url(video.url)

        thumbnail = _first(record.get("thumbnailUrl"))
        if thumbnail is None:
            # Older pages nest the image as an ImageObject
            image = _first(record.get("thumbnail"))
            thumbnail = image.get("url") if isinstance(image, dict) else image

        return self.build_metadata(
            video,
            title=record.get("name"),
            author=author_name,
            author_url=author_url,
            thumbnail=thumbnail,
        )
