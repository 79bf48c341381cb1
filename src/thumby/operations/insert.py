"""
Editor commands: insert a video block from the clipboard, strip stored info.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from thumby.cache.block import is_cache_block, strip_block
from thumby.config.defaults import BLOCK_LANGUAGE, INVALID_CLIPBOARD, NOTICE_DURATION_MS
from thumby.models.video_url import VideoURL

if TYPE_CHECKING:
    from thumby.host.base import BlockContext, Clipboard, Editor, Notifier

logger = logging.getLogger(__name__)


def wrap_block(url: str) -> str:
    """Wrap a URL in a video code fence."""
    return f"```{BLOCK_LANGUAGE}\n{url}\n```"


def build_video_block(clipboard: Clipboard, notifier: Notifier) -> str | None:
    """Build a video block from the clipboard contents.

    Args:
        clipboard: Source of the URL
        notifier: Told when the clipboard holds no supported URL

    Returns:
        The fenced block, or None if the clipboard is not a supported URL
    """
    url = clipboard.read_text().strip()
    video = VideoURL.parse(url)
    # A Vimeo vanity link has no ID yet but is still insertable
    if not url or "\n" in url or not (video.video_id or video.vanity):
        logger.info(f"Clipboard is not a supported video URL: {url[:80]!r}")
        notifier.notify(INVALID_CLIPBOARD, NOTICE_DURATION_MS)
        return None
    return wrap_block(url)


def remove_stored_info(source: str, ctx: BlockContext, editor: Editor) -> bool:
    """Reduce a cache block back to its URL line.

    Returns:
        True if the block was rewritten
    """
    if not is_cache_block(source):
        return False
    editor.replace_range(ctx.line_start, ctx.line_end, strip_block(source))
    return True
