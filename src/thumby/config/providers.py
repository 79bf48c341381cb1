"""
Video provider definitions - the closed set of hosts thumby understands.

Each entry pairs a literal substring that selects the provider with a regex
whose capture groups hold the video ID. Order matters: the first entry whose
substring occurs in a URL decides the provider, and every entry of that
provider is then tried with the last successful match winning.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class Provider(Enum):
    """Supported video hosts."""

    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    ODYSEE = "odysee"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Provider.YOUTUBE: "YouTube",
    Provider.VIMEO: "Vimeo",
    Provider.ODYSEE: "Odysee",
    Provider.UNKNOWN: "Unknown",
}

# Odysee has no short ID; channel and video claims are joined with this
ID_SEPARATOR = "_"


@dataclass(frozen=True)
class ProviderPattern:
    """One URL shape of a provider.

    Attributes:
        provider: Provider this shape belongs to.
        match: Literal substring that identifies the shape.
        pattern: Compiled regex; all capture groups form the video ID.
    """

    provider: Provider
    match: str
    pattern: re.Pattern[str]

    def extract(self, url: str) -> str | None:
        """Return the video ID captured from url, or None."""
        found = self.pattern.search(url)
        if not found or not all(found.groups()):
            return None
        return ID_SEPARATOR.join(found.groups())


PROVIDER_PATTERNS: tuple[ProviderPattern, ...] = (
    # Canonical watch link: https://www.youtube.com/watch?v=hCc0OsyMbQk
    ProviderPattern(Provider.YOUTUBE, "youtube.com/watch?", re.compile(r"[?&]v=([-\w]+)")),
    # Short link: https://youtu.be/hCc0OsyMbQk?t=320
    ProviderPattern(Provider.YOUTUBE, "youtu.be/", re.compile(r"youtu\.be/([-\w]+)")),
    ProviderPattern(Provider.YOUTUBE, "youtube.com/shorts/", re.compile(r"shorts/([-\w]+)")),
    ProviderPattern(Provider.YOUTUBE, "youtube.com/live/", re.compile(r"live/([-\w]+)")),
    # Numeric ID, or a vanity token resolved through oEmbed
    ProviderPattern(Provider.VIMEO, "vimeo.com/", re.compile(r"vimeo\.com/(?:video/)?([-\w]+)")),
    ProviderPattern(
        Provider.ODYSEE,
        "odysee.com/",
        re.compile(r"odysee\.com/(@[^/?#]+)/([^/?#]+)"),
    ),
)


def list_supported_providers() -> list[str]:
    """List all supported provider names."""
    seen: list[str] = []
    for entry in PROVIDER_PATTERNS:
        name = entry.provider.display_name
        if name not in seen:
            seen.append(name)
    return seen


def get_provider_count() -> int:
    """Return the number of supported providers."""
    return len(list_supported_providers())
