"""
URL and timestamp parsing utilities.
"""

from thumby.parsing.timestamps import parse_start_seconds, parse_timestamp
from thumby.parsing.utils import (
    classify_url,
    extract_playlist_id,
    extract_video_id,
    get_provider_for_url,
    is_url_line,
)

__all__ = [
    "classify_url",
    "extract_video_id",
    "extract_playlist_id",
    "get_provider_for_url",
    "is_url_line",
    "parse_timestamp",
    "parse_start_seconds",
]
