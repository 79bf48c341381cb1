"""
Operations for resolving video blocks.
"""

from thumby.operations.fetch_metadata import fetch_metadata
from thumby.operations.insert import build_video_block, remove_stored_info, wrap_block
from thumby.operations.resolve import BlockResolver, Resolution, ResolutionKind

__all__ = [
    "fetch_metadata",
    "BlockResolver",
    "Resolution",
    "ResolutionKind",
    "build_video_block",
    "remove_stored_info",
    "wrap_block",
]
