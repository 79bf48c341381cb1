"""
thumby.providers.base - Abstract base class and protocols for video providers.

This module defines the contracts every video host client implements. A
provider declares its retrieval tiers through ProviderInfo.capabilities and
implements the matching protocol for each tier.

Classes:
    VideoProvider: Abstract base class for all video providers.

Protocols:
    OEmbedSource: Discovery-metadata (oEmbed) lookups.
    DataApiSource: Credentialed data API lookups (backup tier).
    StructuredDataSource: JSON-LD extraction from the video page.

Example:
    >>> class MyProvider(VideoProvider, OEmbedSource):
    ...     @property
    ...     def info(self) -> ProviderInfo:
    ...         return ProviderInfo(provider=..., capabilities=frozenset({Capability.OEMBED}))
    ...     async def fetch_oembed(self, video, client):
    ...         ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from thumby.config.defaults import NOOP_AUTHOR_URL
from thumby.exceptions import MetadataError
from thumby.models.metadata import ResolvedMetadata
from thumby.providers.http import get_json

if TYPE_CHECKING:
    import httpx

    from thumby.models.video_url import VideoURL
    from thumby.providers.capabilities import ProviderInfo


class VideoProvider(ABC):
    """Abstract base class for all video providers."""

    @property
    @abstractmethod
    def info(self) -> ProviderInfo:
        """Return provider capabilities."""
        ...

    @staticmethod
    def build_metadata(
        video: VideoURL,
        *,
        title: Any,
        author: Any,
        author_url: Any,
        thumbnail: Any,
    ) -> ResolvedMetadata:
        """Build a ResolvedMetadata from loosely-typed response fields.

        found is True only when title, author and thumbnail are all present,
        which is the minimum needed to draw a card.
        """
        fields = {
            "title": title,
            "author": author,
            "author_url": author_url,
            "thumbnail": thumbnail,
        }
        cleaned = {k: v.strip() if isinstance(v, str) else "" for k, v in fields.items()}
        found = all(cleaned[k] for k in ("title", "author", "thumbnail"))
        if found and not cleaned["author_url"]:
            cleaned["author_url"] = NOOP_AUTHOR_URL
        return ResolvedMetadata(url=video.url, found=found, **cleaned)

    def fixed_thumbnail(self, video: VideoURL) -> str | None:
        """Thumbnail built from the video ID, used when info.oembed_thumbnail
        is False. Providers without one return None."""
        return None

    async def request_oembed(
        self, url: str, client: httpx.AsyncClient, **params: Any
    ) -> dict[str, Any]:
        """GET the provider's oEmbed endpoint (info.oembed_url) for url.

        Raises:
            NetworkError: If no response arrived.
            MetadataError: If the provider has no endpoint or refused the URL.
        """
        endpoint = self.info.oembed_url
        if endpoint is None:
            raise MetadataError(f"{self.info.name} has no oEmbed endpoint")
        return await get_json(client, endpoint, params={**params, "url": url})

    def build_oembed_metadata(
        self, video: VideoURL, data: dict[str, Any]
    ) -> ResolvedMetadata:
        """Build metadata from an oEmbed response.

        The response thumbnail is used only when info.oembed_thumbnail says
        it is usable; otherwise fixed_thumbnail() supplies it.
        """
        if self.info.oembed_thumbnail:
            thumbnail = data.get("thumbnail_url")
        else:
            thumbnail = self.fixed_thumbnail(video)
        return self.build_metadata(
            video,
            title=data.get("title"),
            author=data.get("author_name"),
            author_url=data.get("author_url"),
            thumbnail=thumbnail,
        )


@runtime_checkable
class OEmbedSource(Protocol):
    """Protocol for providers with a discovery-metadata endpoint.

    Implemented by:
    - youtube: https://www.youtube.com/oembed
    - vimeo: https://vimeo.com/api/oembed.json
    """

    async def fetch_oembed(
        self, video: VideoURL, client: httpx.AsyncClient
    ) -> ResolvedMetadata:
        """Resolve metadata through the provider's oEmbed endpoint.

        Raises:
            NetworkError: If no response arrived.
            MetadataError: If the endpoint refused the URL.
        """
        ...


@runtime_checkable
class DataApiSource(Protocol):
    """Protocol for providers with a credentialed data API.

    Implemented by:
    - youtube: YouTube Data API v3 (videos + channels)
    """

    async def fetch_data_api(
        self, video: VideoURL, client: httpx.AsyncClient, api_key: str
    ) -> ResolvedMetadata:
        """Resolve metadata through the provider's data API.

        Raises:
            NetworkError: If no response arrived.
            MetadataError: If the API refused the request.
        """
        ...


@runtime_checkable
class StructuredDataSource(Protocol):
    """Protocol for providers whose page embeds a JSON-LD VideoObject.

    Implemented by:
    - odysee: <script type="application/ld+json"> on the video page
    """

    async def fetch_structured_data(
        self, video: VideoURL, client: httpx.AsyncClient
    ) -> ResolvedMetadata:
        """Resolve metadata by scraping the video page.

        Raises:
            NetworkError: If no response arrived.
            MetadataError: If the page has no usable structured data.
        """
        ...
