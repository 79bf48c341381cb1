"""
thumby.providers.capabilities - Capability definitions per video host.

This module declares which retrieval tiers each provider supports. The
metadata fetcher walks the tiers in a fixed order and only calls the ones a
provider declares, so adding a provider never touches the other tiers.

Classes:
    Capability: Enum of retrieval tiers (OEMBED, DATA_API, STRUCTURED_SCRAPE).
    ProviderInfo: Immutable metadata about a provider's capabilities.

Example:
    >>> from thumby.providers.capabilities import PROVIDER_INFO, Capability
    >>> from thumby.config.providers import Provider
    >>> PROVIDER_INFO[Provider.YOUTUBE].can(Capability.OEMBED)
    True
    >>> PROVIDER_INFO[Provider.ODYSEE].can(Capability.OEMBED)
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from thumby.config.defaults import VIMEO_OEMBED_URL, YOUTUBE_OEMBED_URL
from thumby.config.providers import Provider


class Capability(Enum):
    """Metadata retrieval tiers a provider can offer.

    Attributes:
        OEMBED: Standard discovery-metadata protocol endpoint.
        DATA_API: Credentialed provider data API (backup tier).
        STRUCTURED_SCRAPE: JSON-LD block embedded in the video page.
    """

    OEMBED = auto()
    DATA_API = auto()
    STRUCTURED_SCRAPE = auto()


@dataclass(frozen=True)
class ProviderInfo:
    """Immutable provider metadata and capabilities.

    Attributes:
        provider: Provider this info describes.
        capabilities: Frozenset of Capability enums this provider supports.
        oembed_url: oEmbed endpoint, None when the provider has none.
        oembed_thumbnail: Whether the oEmbed thumbnail_url is usable as-is.
    """

    provider: Provider
    capabilities: frozenset[Capability]
    oembed_url: str | None = None
    oembed_thumbnail: bool = True

    @property
    def name(self) -> str:
        return self.provider.display_name

    def can(self, capability: Capability) -> bool:
        """Check if provider has a specific capability."""
        return capability in self.capabilities


PROVIDER_INFO: dict[Provider, ProviderInfo] = {
    Provider.YOUTUBE: ProviderInfo(
        provider=Provider.YOUTUBE,
        capabilities=frozenset({Capability.OEMBED, Capability.DATA_API}),
        oembed_url=YOUTUBE_OEMBED_URL,
        oembed_thumbnail=False,  # Letterboxed; a fixed-name variant is used instead
    ),
    Provider.VIMEO: ProviderInfo(
        provider=Provider.VIMEO,
        capabilities=frozenset({Capability.OEMBED}),
        oembed_url=VIMEO_OEMBED_URL,
    ),
    Provider.ODYSEE: ProviderInfo(
        provider=Provider.ODYSEE,
        capabilities=frozenset({Capability.STRUCTURED_SCRAPE}),
    ),
}
