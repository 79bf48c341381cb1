"""
Cache block codec and local thumbnail storage.
"""

from thumby.cache.block import (
    is_cache_block,
    parse_block,
    parse_block_lenient,
    serialize_block,
    strip_block,
)
from thumby.cache.images import ImageCache
from thumby.cache.storage import LocalStorage

__all__ = [
    "serialize_block",
    "parse_block",
    "parse_block_lenient",
    "is_cache_block",
    "strip_block",
    "ImageCache",
    "LocalStorage",
]
