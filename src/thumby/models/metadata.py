"""
ResolvedMetadata dataclass - everything needed to render a video card.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace


def is_remote(location: str) -> bool:
    """Check whether a thumbnail location is a remote URL rather than a storage path."""
    return location.startswith(("http://", "https://"))


@dataclass(frozen=True)
class ResolvedMetadata:
    """Metadata resolved for one video reference.

    Built fresh per render pass, either by parsing a stored cache block or by
    fetching from the provider, and discarded after rendering.

    Attributes:
        url: Original reference URL
        thumbnail: Remote image URL or storage-relative path
        title: Video title
        author: Channel / uploader name
        author_url: Link to the author's page
        found: Enough fields were populated to render a card
        network_error: Retrieval failed because no response arrived
        from_cache: Parsed from a stored block that passed full validation
        image_localized: thumbnail points at a locally saved image
    """

    url: str
    thumbnail: str = ""
    title: str = ""
    author: str = ""
    author_url: str = ""
    found: bool = False
    network_error: bool = False
    from_cache: bool = False
    image_localized: bool = False

    def __post_init__(self) -> None:
        if self.found and self.network_error:
            raise ValueError("metadata cannot be both found and a network error")
        if self.image_localized and is_remote(self.thumbnail):
            raise ValueError("localized thumbnail must be a storage path")

    @classmethod
    def not_found(cls, url: str) -> ResolvedMetadata:
        """Valid response (or unknown provider), but no video."""
        return cls(url=url)

    @classmethod
    def offline(cls, url: str) -> ResolvedMetadata:
        """No response arrived from the provider."""
        return cls(url=url, network_error=True)

    @property
    def has_local_thumbnail(self) -> bool:
        return bool(self.thumbnail) and not is_remote(self.thumbnail)

    def with_local_thumbnail(self, path: str) -> ResolvedMetadata:
        """Return a copy pointing at a saved image."""
        return replace(self, thumbnail=path, image_localized=True)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
