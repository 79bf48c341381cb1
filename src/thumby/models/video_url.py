"""
VideoURL Pydantic model for URL classification.
"""

from __future__ import annotations

import hashlib
import re

from pydantic import BaseModel, Field, field_validator, model_validator

from thumby.config.providers import PROVIDER_PATTERNS, Provider

_NUMERIC_RE = re.compile(r"^\d+$")
_SAFE_KEY_RE = re.compile(r"^[\w@.-]+$")


class VideoURL(BaseModel):
    """Classified video URL.

    Classification is pure: a Vimeo vanity link keeps an empty video_id and
    records its token in provider_data["vanity"] for parsing.utils.classify_url
    to resolve over the network.
    """

    url: str = Field(..., description="Original URL (whitespace stripped)")
    video_id: str = Field("", description="Canonical video ID, empty if unknown")
    provider: Provider = Field(Provider.UNKNOWN, description="Detected provider")
    provider_data: dict = Field(
        default_factory=dict,
        description="Extra extracted fields (vanity token, playlist, etc.)",
    )

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, v: str) -> str:
        """Normalize URL - strip surrounding whitespace."""
        return (v or "").strip()

    @model_validator(mode="after")
    def extract_video_id(self) -> VideoURL:
        """Extract provider and video_id from URL after validation."""
        if self.video_id or self.provider is not Provider.UNKNOWN:
            # Already classified (model_copy / explicit construction)
            return self

        provider = next(
            (e.provider for e in PROVIDER_PATTERNS if e.match in self.url),
            Provider.UNKNOWN,
        )
        video_id = ""
        for entry in PROVIDER_PATTERNS:
            if entry.provider is not provider:
                continue
            extracted = entry.extract(self.url)
            if extracted:
                video_id = extracted

        self.provider = provider
        if provider is Provider.VIMEO and video_id and not _NUMERIC_RE.match(video_id):
            self.provider_data = {**self.provider_data, "vanity": video_id}
            video_id = ""
        self.video_id = video_id
        return self

    @classmethod
    def parse(cls, url: str) -> VideoURL:
        """Classify a URL without any network access.

        Args:
            url: Raw URL as written by the user

        Returns:
            VideoURL; provider is UNKNOWN and video_id empty when no
            provider matches. Never raises for unrecognized shapes.
        """
        return cls(url=url)

    @property
    def is_known_provider(self) -> bool:
        """Check if URL is from a supported provider."""
        return self.provider is not Provider.UNKNOWN

    @property
    def vanity(self) -> str | None:
        """Unresolved Vimeo vanity token, if any."""
        return self.provider_data.get("vanity")

    @property
    def cache_key(self) -> str:
        """Get a filesystem-safe key for files derived from this video."""
        if len(self.video_id) <= 80 and _SAFE_KEY_RE.match(self.video_id):
            return self.video_id
        return hashlib.sha256(self.video_id.encode()).hexdigest()[:16]

    def __str__(self) -> str:
        if self.is_known_provider:
            return f"{self.provider.display_name}:{self.video_id}"
        return self.url

    def __repr__(self) -> str:
        return (
            f"VideoURL(url={self.url!r}, video_id={self.video_id!r}, "
            f"provider={self.provider.value!r})"
        )
