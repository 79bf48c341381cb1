"""
Thumbnail image cache.

Saved thumbnails are named after the video, so the target path for a video
is deterministic under a given location policy and an existing file is
reused without any network traffic.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from thumby.config.defaults import (
    IMAGE_EXTENSION,
    MISSING_IMAGE_FOLDER,
    NOTICE_DURATION_MS,
    THUMBNAIL_TIMEOUT,
)
from thumby.config.loader import ImageLocation
from thumby.exceptions import (
    ConfigurationError,
    MetadataError,
    NetworkError,
    StorageError,
)
from thumby.models.metadata import is_remote
from thumby.providers.http import get_bytes

if TYPE_CHECKING:
    import httpx

    from thumby.config.loader import ThumbyConfig
    from thumby.host.base import Notifier, Storage
    from thumby.models.metadata import ResolvedMetadata
    from thumby.models.video_url import VideoURL

logger = logging.getLogger(__name__)

# " 1", " 2", ... appended by the host when an attachment name is taken
_DISAMBIGUATION_RE = re.compile(r" \d+(" + re.escape(IMAGE_EXTENSION) + r")$")


class ImageCache:
    """Saves remote thumbnails into storage.

    Args:
        storage: Host storage collaborator
        config: Resolved configuration (location policy and folder)
        client: Shared HTTP client
        notifier: Receives the missing-folder warning; optional
    """

    def __init__(
        self,
        storage: Storage,
        config: ThumbyConfig,
        client: httpx.AsyncClient,
        notifier: Notifier | None = None,
    ):
        self.storage = storage
        self.config = config
        self.client = client
        self.notifier = notifier
        self._warned_folders: set[str] = set()

    def target_path(self, video: VideoURL, source_path: str) -> str:
        """Compute where the thumbnail of video is saved.

        Raises:
            ConfigurationError: If the folder policy is selected and the
                configured folder does not exist.
        """
        filename = f"{video.cache_key}{IMAGE_EXTENSION}"

        if self.config.image_location is ImageLocation.SPECIFIED_FOLDER:
            folder = self.config.image_folder.strip().strip("/")
            if not folder or not self.storage.exists(folder):
                raise ConfigurationError(
                    MISSING_IMAGE_FOLDER.format(folder=folder or "(not set)"),
                    details={"folder": folder},
                )
            return f"{folder}/{filename}"

        path = self.storage.available_attachment_path(filename, source_path)
        return _DISAMBIGUATION_RE.sub(r"\1", path)

    def existing_path(self, video: VideoURL, source_path: str) -> str | None:
        """Return the saved thumbnail of video if there is one.

        Never touches the network.
        """
        if not video.video_id:
            return None
        try:
            path = self.target_path(video, source_path)
        except ConfigurationError:
            return None
        return path if self.storage.exists(path) else None

    async def cache_thumbnail(
        self,
        metadata: ResolvedMetadata,
        video: VideoURL,
        source_path: str,
    ) -> str:
        """Save the thumbnail of metadata locally.

        Args:
            metadata: Resolved metadata with a remote thumbnail
            video: Classified URL, used for naming
            source_path: Document the block lives in

        Returns:
            The local path, or metadata.thumbnail unchanged when the image
            cannot be saved.
        """
        remote = metadata.thumbnail
        if not is_remote(remote) or not video.video_id:
            return remote

        try:
            target = self.target_path(video, source_path)
        except ConfigurationError as e:
            self._warn_missing_folder(e)
            return remote

        if self.storage.exists(target):
            logger.debug(f"Thumbnail already saved at {target}")
            return target

        try:
            data = await get_bytes(self.client, remote, timeout=THUMBNAIL_TIMEOUT)
            self.storage.write_binary(target, data)
        except (NetworkError, MetadataError, StorageError) as e:
            logger.warning(f"Could not save thumbnail for {video}: {e}")
            return remote

        logger.info(f"Saved thumbnail for {video} to {target}")
        return target

    def _warn_missing_folder(self, error: ConfigurationError) -> None:
        folder = error.details.get("folder", "")
        if folder in self._warned_folders:
            return
        self._warned_folders.add(folder)
        logger.warning(error.message)
        if self.notifier is not None:
            self.notifier.notify(error.message, NOTICE_DURATION_MS)
