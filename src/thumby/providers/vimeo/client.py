"""
thumby.providers.vimeo.client - VimeoProvider implementation.

Vimeo's oEmbed response is used as-is, thumbnail included. The same endpoint
also turns vanity links (vimeo.com/<name>) into the numeric video ID.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from thumby.config.providers import Provider
from thumby.providers.base import OEmbedSource, VideoProvider
from thumby.providers.capabilities import PROVIDER_INFO, ProviderInfo

if TYPE_CHECKING:
    import httpx

    from thumby.models.metadata import ResolvedMetadata
    from thumby.models.video_url import VideoURL

logger = logging.getLogger(__name__)


class VimeoProvider(VideoProvider, OEmbedSource):
    """Vimeo metadata provider (oEmbed only)."""

    @property
    def info(self) -> ProviderInfo:
        return PROVIDER_INFO[Provider.VIMEO]

    async def fetch_oembed(
        self, video: VideoURL, client: httpx.AsyncClient
    ) -> ResolvedMetadata:
        data = await self.request_oembed(video.url, client)
        return self.build_oembed_metadata(video, data)

    async def resolve_video_id(self, url: str, client: httpx.AsyncClient) -> str:
        """Resolve a vanity URL to its numeric video ID.

        Returns:
            The numeric ID as a string, or "" if the response carries none.

        Raises:
            NetworkError: If no response arrived.
            MetadataError: If the endpoint refused the URL.
        """
        data = await self.request_oembed(url, client)
        video_id = data.get("video_id")
        if isinstance(video_id, bool) or not isinstance(video_id, (int, str)):
            return ""
        video_id = str(video_id)
        if not video_id.isdigit():
            logger.debug(f"Vimeo returned non-numeric video_id {video_id!r} for {url}")
            return ""
        return video_id
