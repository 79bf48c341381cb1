"""
Start-time extraction from video URLs.

Providers disagree on how a start offset is written: YouTube uses "1h2m3s",
"90s" or a bare "90"; some share links emit a raw seconds total that still
carries the "s" suffix ("t=320s"). All of these land in the same grammar.
"""

from __future__ import annotations

import re

from thumby.utils.formatting import format_clock

# Marker priority: the first separator found (in this order) is used
_MARKERS = ("?t=", "&t=", "#t=")

# Slots: hours, minutes, seconds, bare seconds
_TIME_RE = re.compile(r"[?&#]t=(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?(\d+)?")


def _find_marker(url: str) -> int:
    for marker in _MARKERS:
        index = url.find(marker)
        if index != -1:
            return index
    return -1


def parse_start_seconds(url: str) -> int | None:
    """Parse the start offset of a URL in whole seconds.

    Args:
        url: Full video URL string.

    Returns:
        Total seconds, or None if the URL carries no usable t= marker.
    """
    index = _find_marker(url)
    if index == -1:
        return None

    match = _TIME_RE.match(url, index)
    if not match or not any(match.groups()):
        return None

    hours, minutes, seconds, bare = (int(v or 0) for v in match.groups())

    # A seconds slot above 59 is a raw total that landed in the wrong slot
    if seconds > 59:
        return seconds
    return hours * 3600 + minutes * 60 + seconds + bare


def parse_timestamp(url: str) -> str:
    """Parse the start offset of a URL into a display string.

    Supports:
      - Compact duration: "?t=1h2m3s", "&t=2m30s"
      - Pure seconds: "?t=90", "#t=320"
      - Seconds total with suffix: "&t=65s"

    Args:
        url: Full video URL string.

    Returns:
        "MM:SS" or "H:MM:SS", or "" when there is no timestamp (callers omit
        the badge rather than treating this as an error).
    """
    seconds = parse_start_seconds(url)
    if seconds is None:
        return ""
    return format_clock(seconds)
