"""
thumby.providers - Video host clients.

Each supported host has a client implementing VideoProvider plus one protocol
per retrieval tier it supports (see capabilities.py).
"""

from thumby.providers.base import (
    DataApiSource,
    OEmbedSource,
    StructuredDataSource,
    VideoProvider,
)
from thumby.providers.capabilities import PROVIDER_INFO, Capability, ProviderInfo
from thumby.providers.registry import clear_cache, get_provider, list_all

__all__ = [
    "VideoProvider",
    "OEmbedSource",
    "DataApiSource",
    "StructuredDataSource",
    "Capability",
    "ProviderInfo",
    "PROVIDER_INFO",
    "get_provider",
    "list_all",
    "clear_cache",
]
