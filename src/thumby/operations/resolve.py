"""
Block resolution - turns the text of one video block into a rendered card.

For each block:

1. Try the stored cache block. A valid one costs no network traffic.
2. Otherwise classify the URL and fetch metadata from the provider.
3. Save the thumbnail locally when save_images is on.
4. Write the cache block back when store_info is on and an editor is given.
5. Render a card, a warning, or a bare link.

Writing a block back re-renders it, so step 1 must accept whatever step 4
wrote. Write-back only happens for blocks that re-parse, and at most once
per (document, block) for the lifetime of a resolver.

Every failure stays inside its block: resolve_many never lets one block
abort another.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import httpx

from thumby.cache.block import (
    block_url,
    is_cache_block,
    parse_block,
    parse_block_lenient,
    serialize_block,
)
from thumby.cache.images import ImageCache
from thumby.config.defaults import CANNOT_FIND_VIDEO, MULTIPLE_URLS
from thumby.exceptions import CacheError, NetworkError
from thumby.models.video_url import VideoURL
from thumby.operations.fetch_metadata import fetch_metadata
from thumby.parsing.timestamps import parse_timestamp
from thumby.parsing.utils import classify_url, extract_playlist_id, is_url_line
from thumby.utils.logging import log_timed

if TYPE_CHECKING:
    from thumby.config.loader import ThumbyConfig
    from thumby.host.base import (
        BlockContext,
        CardRenderer,
        Editor,
        Notifier,
        Storage,
    )
    from thumby.models.metadata import ResolvedMetadata

logger = logging.getLogger(__name__)

PLAYLIST_LABEL = "In playlist"


class ResolutionKind(Enum):
    """What was rendered for a block."""

    CARD = "card"
    WARNING = "warning"
    LINK = "link"


@dataclass
class Resolution:
    """Outcome of resolving one block.

    Attributes:
        kind: What was rendered
        url: URL line of the block
        metadata: Metadata behind a card, None otherwise
        message: Warning text for WARNING
        timestamp: Timestamp badge text, "" if none
        playlist_id: Playlist the URL points into, if any
        offline: The provider could not be reached
        written: A cache block was written back
    """

    kind: ResolutionKind
    url: str
    metadata: ResolvedMetadata | None = None
    message: str = ""
    timestamp: str = ""
    playlist_id: str | None = None
    offline: bool = False
    written: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "url": self.url,
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "message": self.message,
            "timestamp": self.timestamp,
            "playlist_id": self.playlist_id,
            "offline": self.offline,
            "written": self.written,
        }


def _count_url_lines(source: str) -> int:
    return sum(1 for line in source.splitlines() if is_url_line(line))


class BlockResolver:
    """Resolves video blocks against one configuration and storage.

    Args:
        config: Resolved configuration
        storage: Host storage collaborator
        editor: Receives cache write-backs; without one nothing is written
        notifier: Receives one-time user warnings
        client: Shared HTTP client; one is created (and closed by aclose)
            when omitted

    Example:
        >>> async with BlockResolver(config, storage, editor=doc) as resolver:
        ...     await resolver.resolve(source, ctx, renderer)
    """

    def __init__(
        self,
        config: ThumbyConfig,
        storage: Storage,
        editor: Editor | None = None,
        notifier: Notifier | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.storage = storage
        self.editor = editor
        self.notifier = notifier
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=config.request_timeout, follow_redirects=True
        )
        self.image_cache = ImageCache(storage, config, self.client, notifier)
        self._written: set[tuple[str, int]] = set()

    async def __aenter__(self) -> BlockResolver:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def resolve(
        self, source: str, ctx: BlockContext, renderer: CardRenderer
    ) -> Resolution:
        """Resolve one block and render the result.

        Args:
            source: Raw block text (a URL line or a cache block)
            ctx: Location of the block
            renderer: Receives the card, warning, or link

        Returns:
            Resolution describing what was rendered
        """
        start = time.monotonic()
        url = block_url(source)
        if not url:
            return self._warn(url, CANNOT_FIND_VIDEO, renderer)

        video = VideoURL.parse(url)
        metadata = self._read_cache(source, video, ctx)

        if metadata is None:
            if not is_cache_block(source) and _count_url_lines(source) > 1:
                return self._warn(url, MULTIPLE_URLS, renderer)

            try:
                video = await classify_url(url, self.client)
            except NetworkError as e:
                logger.warning(f"Could not classify {url}: {e}")
                return self._offline(source, url, renderer)

            if not video.video_id:
                logger.info(f"Unrecognized video URL: {url}")
                renderer.link(url, url)
                return Resolution(ResolutionKind.LINK, url)

            metadata = await fetch_metadata(video, self.config, self.client)
            if metadata.network_error:
                return self._offline(source, url, renderer)
            if not metadata.found:
                return self._warn(url, CANNOT_FIND_VIDEO, renderer)

        if self.config.save_images and not metadata.image_localized:
            local = await self.image_cache.cache_thumbnail(
                metadata, video, ctx.source_path
            )
            if local != metadata.thumbnail:
                metadata = metadata.with_local_thumbnail(local)

        written = False
        if self.config.store_info and self.editor is not None:
            written = self._write_back(source, ctx, metadata)

        resolution = self._render_card(metadata, renderer)
        resolution.written = written
        log_timed(f"Resolved block at {ctx.source_path}:{ctx.line_start}", start)
        return resolution

    async def resolve_many(
        self,
        blocks: list[tuple[str, BlockContext]],
        renderer_factory,
    ) -> list[Resolution | BaseException]:
        """Resolve several blocks concurrently.

        Args:
            blocks: (source, ctx) pairs
            renderer_factory: Called with each ctx to get its renderer

        Returns:
            One Resolution per block, in input order; an unexpected error
            inside a block is returned in its place instead of raised.
        """
        tasks = [
            self.resolve(source, ctx, renderer_factory(ctx)) for source, ctx in blocks
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for (_, ctx), result in zip(blocks, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(
                    f"Failed to resolve block at {ctx.source_path}:{ctx.line_start}: "
                    f"{result}"
                )
        return results

    def _read_cache(
        self, source: str, video: VideoURL, ctx: BlockContext
    ) -> ResolvedMetadata | None:
        existing = None
        if self.config.save_images:
            existing = self.image_cache.existing_path(video, ctx.source_path)

        cached = parse_block(
            source,
            save_images=self.config.save_images,
            storage=self.storage,
            existing_image=existing,
        )
        if not cached.from_cache:
            return None
        logger.debug(f"Cache hit for {cached.url}")
        return cached

    def _write_back(
        self, source: str, ctx: BlockContext, metadata: ResolvedMetadata
    ) -> bool:
        key = (ctx.source_path, ctx.line_start)
        if key in self._written:
            return False

        try:
            block = serialize_block(metadata)
        except CacheError as e:
            logger.info(f"Not storing metadata for {metadata.url}: {e}")
            return False

        if block == source.strip():
            return False

        reparsed = parse_block(
            block,
            save_images=self.config.save_images,
            storage=self.storage,
            existing_image=metadata.thumbnail if metadata.image_localized else None,
        )
        if not reparsed.from_cache:
            logger.info(f"Not storing metadata for {metadata.url}: block would not re-parse")
            return False

        self._written.add(key)
        self.editor.replace_range(ctx.line_start, ctx.line_end, block)
        logger.debug(f"Stored metadata for {metadata.url} in {ctx.source_path}")
        return True

    def _offline(self, source: str, url: str, renderer: CardRenderer) -> Resolution:
        cached = parse_block_lenient(source)
        if cached.found:
            logger.info(f"Provider unreachable, rendering stored metadata for {url}")
            resolution = self._render_card(cached, renderer)
            resolution.offline = True
            return resolution

        renderer.link(url, url)
        return Resolution(ResolutionKind.LINK, url, offline=True)

    def _warn(self, url: str, message: str, renderer: CardRenderer) -> Resolution:
        renderer.warning(message)
        return Resolution(ResolutionKind.WARNING, url, message=message)

    def _render_card(
        self, metadata: ResolvedMetadata, renderer: CardRenderer
    ) -> Resolution:
        renderer.image(metadata.thumbnail)
        renderer.text(metadata.title, "title")
        renderer.link(metadata.author, metadata.author_url)

        playlist_id = extract_playlist_id(metadata.url)
        if playlist_id:
            renderer.text(PLAYLIST_LABEL, "playlist")

        timestamp = parse_timestamp(metadata.url)
        if timestamp:
            renderer.text(timestamp, "timestamp")

        return Resolution(
            ResolutionKind.CARD,
            metadata.url,
            metadata=metadata,
            timestamp=timestamp,
            playlist_id=playlist_id,
        )
