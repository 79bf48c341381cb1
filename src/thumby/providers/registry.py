"""
thumby.providers.registry - Provider lookup and instance management.

Maps each supported Provider to its client class. Clients are stateless,
so one cached instance per provider is shared by all concurrent resolutions.

Functions:
    get_provider: Get the client for a provider, or None for UNKNOWN.
    list_all: List all providers that have a client.
    clear_cache: Clear the provider instance cache.

Example:
    >>> from thumby.providers.registry import get_provider
    >>> provider = get_provider(Provider.VIMEO)
    >>> provider.info.name
    'Vimeo'
"""

from __future__ import annotations

import logging
from importlib import import_module
from typing import TYPE_CHECKING

from thumby.config.providers import Provider

if TYPE_CHECKING:
    from thumby.providers.base import VideoProvider

logger = logging.getLogger(__name__)


# Provider -> (module path, class name)
PROVIDER_MODULES: dict[Provider, tuple[str, str]] = {
    Provider.YOUTUBE: ("thumby.providers.youtube", "YouTubeProvider"),
    Provider.VIMEO: ("thumby.providers.vimeo", "VimeoProvider"),
    Provider.ODYSEE: ("thumby.providers.odysee", "OdyseeProvider"),
}

_cache: dict[Provider, VideoProvider] = {}


def get_provider(provider: Provider) -> VideoProvider | None:
    """Get the client for a provider.

    Args:
        provider: Provider enum member.

    Returns:
        Cached VideoProvider instance, or None if the provider has no
        client (Provider.UNKNOWN).
    """
    if provider in _cache:
        return _cache[provider]

    if provider not in PROVIDER_MODULES:
        return None

    module_path, class_name = PROVIDER_MODULES[provider]
    module = import_module(module_path)
    instance = getattr(module, class_name)()
    logger.debug(f"Loaded provider client {class_name}")
    _cache[provider] = instance
    return instance


def list_all() -> list[Provider]:
    """List all providers that have a client."""
    return list(PROVIDER_MODULES)


def clear_cache() -> None:
    """Clear the provider instance cache."""
    _cache.clear()
