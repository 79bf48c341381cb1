"""
Cache block codec.

A cache block is the fixed 5-line text that replaces a bare URL inside a
video block once its metadata has been resolved:

    https://www.youtube.com/watch?v=hCc0OsyMbQk
    Title: <title>
    Author: <author>
    Thumbnail: <local-path-or-remote-url>
    AuthorUrl: <author-url>

Line 1 carries no key. Lines 2-5 use the keys above, in that order. Values
may contain ": " themselves because only the first separator on a line is
significant.

Writing a block back into a document triggers a new render pass, so every
block serialize_block produces must be accepted by parse_block. Values are
collapsed to a single line and stripped on the way out to keep that true.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from thumby.exceptions import CacheError
from thumby.models.metadata import ResolvedMetadata, is_remote
from thumby.utils.formatting import single_line

if TYPE_CHECKING:
    from thumby.host.base import Storage

logger = logging.getLogger(__name__)

FIELD_KEYS = ("Title", "Author", "Thumbnail", "AuthorUrl")
SEPARATOR = ": "
BLOCK_LINES = 1 + len(FIELD_KEYS)


def _clean(value: str) -> str:
    return single_line(value or "").strip()


def serialize_block(metadata: ResolvedMetadata) -> str:
    """Serialize resolved metadata into a cache block.

    Args:
        metadata: Metadata to store

    Returns:
        The 5-line block, without a trailing newline

    Raises:
        CacheError: If any value is empty once cleaned; such a block could
            never be parsed back.
    """
    values = [
        _clean(metadata.url),
        _clean(metadata.title),
        _clean(metadata.author),
        _clean(metadata.thumbnail),
        _clean(metadata.author_url),
    ]
    if not all(values):
        empty = [
            name
            for name, value in zip(("Url", *FIELD_KEYS), values, strict=True)
            if not value
        ]
        raise CacheError(
            f"Cannot store metadata with empty fields: {', '.join(empty)}",
            details={"url": metadata.url},
        )

    lines = [values[0]]
    lines.extend(
        f"{key}{SEPARATOR}{value}"
        for key, value in zip(FIELD_KEYS, values[1:], strict=True)
    )
    return "\n".join(lines)


def _split_block(text: str) -> list[str]:
    """Apply the structural rules and return the five values.

    Raises:
        CacheError: On a wrong line count, a missing separator, an unexpected
            key, or an empty value.
    """
    lines = text.strip().splitlines()
    if len(lines) != BLOCK_LINES:
        raise CacheError(f"Expected {BLOCK_LINES} lines, got {len(lines)}")

    values = [lines[0].strip()]
    for expected, line in zip(FIELD_KEYS, lines[1:], strict=True):
        key, sep, value = line.partition(SEPARATOR)
        if not sep:
            raise CacheError(f"Missing '{SEPARATOR}' separator in line {line!r}")
        if key.strip() != expected:
            raise CacheError(f"Expected key {expected!r}, got {key.strip()!r}")
        values.append(value.strip())

    if not all(values):
        raise CacheError("Cache block has empty fields")
    return values


def _check_policy(
    thumbnail: str,
    save_images: bool,
    storage: Storage | None,
    existing_image: str | None,
) -> None:
    """Reject blocks whose thumbnail disagrees with the image policy.

    Raises:
        CacheError: On a policy mismatch or a dangling local path.
    """
    if is_remote(thumbnail):
        if save_images and not existing_image:
            raise CacheError("Remote thumbnail stored while image saving is on")
        return

    if not save_images:
        raise CacheError("Local thumbnail stored while image saving is off")
    if storage is None or not storage.exists(thumbnail):
        raise CacheError(f"Stored thumbnail does not exist: {thumbnail}")


def parse_block(
    text: str,
    *,
    save_images: bool = False,
    storage: Storage | None = None,
    existing_image: str | None = None,
) -> ResolvedMetadata:
    """Parse a cache block.

    Args:
        text: Raw block text
        save_images: Whether thumbnails are saved locally
        storage: Used to check that a stored local thumbnail still exists;
            without one, local thumbnails are treated as missing
        existing_image: Local image already saved for this video, if any

    Returns:
        ResolvedMetadata with from_cache=True, or an empty record (found and
        from_cache both False) when the block is malformed or stale. The
        caller re-fetches in that case.
    """
    try:
        url, title, author, thumbnail, author_url = _split_block(text)
        _check_policy(thumbnail, save_images, storage, existing_image)
    except CacheError as e:
        logger.debug(f"Rejected cache block: {e}")
        return ResolvedMetadata.not_found(block_url(text))

    return ResolvedMetadata(
        url=url,
        title=title,
        author=author,
        thumbnail=thumbnail,
        author_url=author_url,
        found=True,
        from_cache=True,
        image_localized=not is_remote(thumbnail),
    )


def parse_block_lenient(text: str) -> ResolvedMetadata:
    """Parse a cache block applying the structural rules only.

    Used when the provider cannot be reached: a stale but well-formed block
    still renders better than a bare link.
    """
    try:
        url, title, author, thumbnail, author_url = _split_block(text)
    except CacheError:
        return ResolvedMetadata.not_found(block_url(text))

    return ResolvedMetadata(
        url=url,
        title=title,
        author=author,
        thumbnail=thumbnail,
        author_url=author_url,
        found=True,
        from_cache=True,
        image_localized=not is_remote(thumbnail),
    )


def is_cache_block(text: str) -> bool:
    """Check whether text is structurally a cache block."""
    try:
        _split_block(text)
    except CacheError:
        return False
    return True


def block_url(text: str) -> str:
    """Return the first non-blank line of a block, stripped."""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def strip_block(text: str) -> str:
    """Reduce a block to its URL line."""
    return block_url(text)
