"""
Tiered metadata retrieval.

Tiers run in a fixed order and each one only for providers that declare the
matching capability:

1. OEMBED - discovery-metadata endpoint (YouTube, Vimeo)
2. DATA_API - credentialed backup API (YouTube, needs youtube_api_key),
   tried only when oEmbed did not produce a card
3. STRUCTURED_SCRAPE - JSON-LD on the video page (Odysee)

A NetworkError at any tier ends the walk with network_error=True. Refusals
(MetadataError) move on to the next tier; when none is left the result is
not found.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from thumby.exceptions import MetadataError, NetworkError
from thumby.models.metadata import ResolvedMetadata
from thumby.providers.base import DataApiSource, OEmbedSource, StructuredDataSource
from thumby.providers.capabilities import Capability
from thumby.providers.registry import get_provider
from thumby.utils.logging import log_timed

if TYPE_CHECKING:
    import httpx

    from thumby.config.loader import ThumbyConfig
    from thumby.models.video_url import VideoURL
    from thumby.providers.base import VideoProvider

logger = logging.getLogger(__name__)


async def _run_tiers(
    provider: VideoProvider,
    video: VideoURL,
    config: ThumbyConfig,
    client: httpx.AsyncClient,
) -> ResolvedMetadata | None:
    """Walk the provider's tiers; return the first found record.

    Raises:
        NetworkError: From any tier.
    """
    info = provider.info

    if info.can(Capability.OEMBED) and isinstance(provider, OEmbedSource):
        try:
            result = await provider.fetch_oembed(video, client)
            if result.found:
                return result
            logger.info(f"oEmbed response for {video} is incomplete")
        except MetadataError as e:
            logger.info(f"oEmbed refused {video}: {e}")

    if info.can(Capability.DATA_API) and isinstance(provider, DataApiSource):
        if config.youtube_api_key:
            try:
                result = await provider.fetch_data_api(
                    video, client, config.youtube_api_key
                )
                if result.found:
                    return result
            except MetadataError as e:
                logger.info(f"{info.name} data API refused {video}: {e}")
        else:
            logger.debug(f"No API key configured, skipping {info.name} data API")

    if info.can(Capability.STRUCTURED_SCRAPE) and isinstance(
        provider, StructuredDataSource
    ):
        try:
            result = await provider.fetch_structured_data(video, client)
            if result.found:
                return result
        except MetadataError as e:
            logger.info(f"No structured data for {video}: {e}")

    return None


async def fetch_metadata(
    video: VideoURL,
    config: ThumbyConfig,
    client: httpx.AsyncClient,
) -> ResolvedMetadata:
    """Resolve metadata for a classified URL.

    Args:
        video: Classified URL
        config: Resolved configuration (API key)
        client: Shared HTTP client

    Returns:
        ResolvedMetadata with found set, network_error set, or neither.
        Never raises for provider failures.
    """
    if not video.video_id:
        return ResolvedMetadata.not_found(video.url)

    provider = get_provider(video.provider)
    if provider is None:
        return ResolvedMetadata.not_found(video.url)

    start = time.monotonic()
    try:
        result = await _run_tiers(provider, video, config, client)
    except NetworkError as e:
        logger.warning(f"Network error resolving {video}: {e}")
        return ResolvedMetadata.offline(video.url)
    finally:
        log_timed(f"Metadata lookup for {video}", start)

    if result is None:
        logger.info(f"No metadata found for {video}")
        return ResolvedMetadata.not_found(video.url)
    return result
