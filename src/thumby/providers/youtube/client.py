"""
thumby.providers.youtube.client - YouTubeProvider implementation.

Resolves metadata through YouTube's oEmbed endpoint and, when oEmbed refuses
a video (embedding disabled, age gate) and an API key is configured, through
the YouTube Data API v3.

The thumbnail is never taken from a response: oEmbed returns a letterboxed
4:3 image, so the fixed 16:9 "mqdefault" variant is built from the video ID.

Example:
    >>> provider = YouTubeProvider()
    >>> async with httpx.AsyncClient() as client:
    ...     meta = await provider.fetch_oembed(VideoURL.parse(url), client)
    >>> print(meta.title)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from thumby.config.defaults import (
    NOOP_AUTHOR_URL,
    YOUTUBE_API_CHANNELS_URL,
    YOUTUBE_API_VIDEOS_URL,
    YOUTUBE_CHANNEL_URL,
    YOUTUBE_THUMBNAIL_URL,
)
from thumby.config.providers import Provider
from thumby.exceptions import MetadataError, NetworkError, VideoNotFoundError
from thumby.providers.base import DataApiSource, OEmbedSource, VideoProvider
from thumby.providers.capabilities import PROVIDER_INFO, ProviderInfo
from thumby.providers.http import get_json

if TYPE_CHECKING:
    import httpx

    from thumby.models.metadata import ResolvedMetadata
    from thumby.models.video_url import VideoURL

logger = logging.getLogger(__name__)


def thumbnail_url(video_id: str) -> str:
    """Build the fixed-name thumbnail URL for a video."""
    return YOUTUBE_THUMBNAIL_URL.format(video_id=video_id)


def _first_item(data: dict[str, Any]) -> dict[str, Any] | None:
    items = data.get("items")
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


class YouTubeProvider(VideoProvider, OEmbedSource, DataApiSource):
    """YouTube metadata provider (oEmbed + Data API backup)."""

    @property
    def info(self) -> ProviderInfo:
        return PROVIDER_INFO[Provider.YOUTUBE]

    async def fetch_oembed(
        self, video: VideoURL, client: httpx.AsyncClient
    ) -> ResolvedMetadata:
        """Resolve title and author via oEmbed.

        The request is built from the original URL so that shorts/live links
        resolve exactly as the user wrote them.
        """
        data = await self.request_oembed(video.url, client, format="json")
        return self.build_oembed_metadata(video, data)

    def fixed_thumbnail(self, video: VideoURL) -> str:
        return thumbnail_url(video.video_id)

    async def fetch_data_api(
        self, video: VideoURL, client: httpx.AsyncClient, api_key: str
    ) -> ResolvedMetadata:
        """Resolve title and channel via the Data API.

        Two calls: videos (title, channel title, channel ID), then channels
        for the public custom URL. A failure of the second call only costs
        the author link, which falls back to a no-op link.

        Raises:
            NetworkError: If the videos call got no response.
            VideoNotFoundError: If the API knows no such video.
            MetadataError: If the videos call was refused.
        """
        data = await get_json(
            client,
            YOUTUBE_API_VIDEOS_URL,
            params={"part": "snippet", "id": video.video_id, "key": api_key},
        )
        item = _first_item(data)
        if item is None:
            raise VideoNotFoundError(f"YouTube API has no video {video.video_id}")

        snippet = item.get("snippet") or {}
        author_url = await self._channel_url(client, snippet.get("channelId"), api_key)

        return self.build_metadata(
            video,
            title=snippet.get("title"),
            author=snippet.get("channelTitle"),
            author_url=author_url,
            thumbnail=thumbnail_url(video.video_id),
        )

    async def _channel_url(
        self, client: httpx.AsyncClient, channel_id: Any, api_key: str
    ) -> str:
        """Look up a channel's public custom URL, defaulting to a no-op link."""
        if not isinstance(channel_id, str) or not channel_id:
            return NOOP_AUTHOR_URL

        try:
            data = await get_json(
                client,
                YOUTUBE_API_CHANNELS_URL,
                params={"part": "snippet", "id": channel_id, "key": api_key},
            )
        except (NetworkError, MetadataError) as e:
            logger.info(f"Channel lookup failed for {channel_id}: {e}")
            return NOOP_AUTHOR_URL

        item = _first_item(data)
        custom_url = ((item or {}).get("snippet") or {}).get("customUrl")
        if not isinstance(custom_url, str) or not custom_url:
            return NOOP_AUTHOR_URL
        return YOUTUBE_CHANNEL_URL.format(custom_url=custom_url)
