"""
Data models for thumby.

Provides the Pydantic VideoURL classifier model and the ResolvedMetadata
dataclass that flows from fetch/cache to rendering.
"""

from thumby.models.metadata import ResolvedMetadata, is_remote
from thumby.models.video_url import VideoURL

__all__ = [
    "ResolvedMetadata",
    "VideoURL",
    "is_remote",
]
