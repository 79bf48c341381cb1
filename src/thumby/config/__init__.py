"""
Configuration for thumby.

Contains the provider registry, fixed endpoints and messages, and the
layered settings loader.
"""

from thumby.config.loader import (
    ConfigSource,
    ConfigValidationResult,
    ImageLocation,
    ThumbyConfig,
    clear_config_cache,
    get_config,
    validate_config,
)
from thumby.config.providers import (
    PROVIDER_PATTERNS,
    Provider,
    ProviderPattern,
    get_provider_count,
    list_supported_providers,
)

__all__ = [
    "PROVIDER_PATTERNS",
    "Provider",
    "ProviderPattern",
    "get_provider_count",
    "list_supported_providers",
    # Config loader
    "ThumbyConfig",
    "ConfigSource",
    "ConfigValidationResult",
    "ImageLocation",
    "get_config",
    "clear_config_cache",
    "validate_config",
]
