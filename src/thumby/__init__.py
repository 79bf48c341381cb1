"""
thumby - Video thumbnail cards for notes.

Turns a bare video URL (YouTube, Vimeo, Odysee) into a card:
1. Classify the URL and extract the video ID
2. Resolve title, author and thumbnail (oEmbed, data API, or page scrape)
3. Optionally save the thumbnail locally
4. Optionally store the metadata next to the URL so later renders work offline
"""

# Cache codec
from thumby.cache.block import parse_block, serialize_block, strip_block

# Config
from thumby.config.loader import ThumbyConfig, get_config
from thumby.config.providers import (
    Provider,
    get_provider_count,
    list_supported_providers,
)

# Exceptions
from thumby.exceptions import (
    CacheError,
    ConfigurationError,
    MetadataError,
    NetworkError,
    StorageError,
    ThumbyError,
    VideoNotFoundError,
)

# Models
from thumby.models.metadata import ResolvedMetadata
from thumby.models.video_url import VideoURL

# Core operations
from thumby.operations.fetch_metadata import fetch_metadata
from thumby.operations.resolve import BlockResolver, Resolution, ResolutionKind

# Parsing utilities
from thumby.parsing.timestamps import parse_timestamp
from thumby.parsing.utils import (
    classify_url,
    extract_playlist_id,
    extract_video_id,
    get_provider_for_url,
)

__version__ = "0.3.0"

__all__ = [
    # Core functions
    "BlockResolver",
    "Resolution",
    "ResolutionKind",
    "fetch_metadata",
    "serialize_block",
    "parse_block",
    "strip_block",
    # Models
    "ResolvedMetadata",
    "VideoURL",
    # Config
    "ThumbyConfig",
    "get_config",
    "Provider",
    "list_supported_providers",
    "get_provider_count",
    # URL utilities
    "classify_url",
    "extract_video_id",
    "extract_playlist_id",
    "get_provider_for_url",
    "parse_timestamp",
    # Exceptions
    "ThumbyError",
    "NetworkError",
    "MetadataError",
    "VideoNotFoundError",
    "CacheError",
    "StorageError",
    "ConfigurationError",
]
