"""Tests for tiered metadata retrieval."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from thumby.config.defaults import (
    NOOP_AUTHOR_URL,
    VIMEO_OEMBED_URL,
    YOUTUBE_API_CHANNELS_URL,
    YOUTUBE_API_VIDEOS_URL,
    YOUTUBE_OEMBED_URL,
)
from thumby.models.video_url import VideoURL
from thumby.operations.fetch_metadata import fetch_metadata

YT = VideoURL.parse("https://www.youtube.com/watch?v=hCc0OsyMbQk")


class TestYouTube:
    """Tests for the YouTube tiers."""

    @pytest.mark.asyncio
    async def test_oembed_scenario(self, fake_http, client, make_config):
        """Test the canonical oEmbed scenario end to end."""
        fake_http.add(
            YOUTUBE_OEMBED_URL,
            httpx.Response(200, json={"title": "X", "author_name": "Y", "author_url": "Z"}),
        )

        result = await fetch_metadata(YT, make_config(), client)

        assert result.found
        assert not result.network_error
        assert result.thumbnail == "https://i.ytimg.com/vi/hCc0OsyMbQk/mqdefault.jpg"
        assert (result.title, result.author, result.author_url) == ("X", "Y", "Z")
        assert result.url == YT.url

    @pytest.mark.asyncio
    async def test_oembed_refused_without_key_is_not_found(
        self, fake_http, client, make_config
    ):
        """Test a refused oEmbed without an API key ends as not found."""
        fake_http.add(YOUTUBE_OEMBED_URL, httpx.Response(401))

        result = await fetch_metadata(YT, make_config(), client)

        assert not result.found
        assert not result.network_error
        assert fake_http.calls_to(YOUTUBE_API_VIDEOS_URL) == []

    @pytest.mark.asyncio
    async def test_falls_back_to_data_api(self, fake_http, client, make_config):
        """Test a refused oEmbed uses the data API when a key is configured."""
        fake_http.add(YOUTUBE_OEMBED_URL, httpx.Response(401))
        fake_http.add(
            YOUTUBE_API_VIDEOS_URL,
            httpx.Response(
                200,
                json={"items": [{"snippet": {"title": "T", "channelTitle": "C", "channelId": "UC1"}}]},
            ),
        )
        fake_http.add(YOUTUBE_API_CHANNELS_URL, httpx.Response(500))

        result = await fetch_metadata(YT, make_config(youtube_api_key="KEY"), client)

        assert result.found
        assert result.title == "T"
        assert result.author_url == NOOP_AUTHOR_URL

    @pytest.mark.asyncio
    async def test_data_api_not_found(self, fake_http, client, make_config):
        """Test a data API without the video yields not found."""
        fake_http.add(YOUTUBE_OEMBED_URL, httpx.Response(404))
        fake_http.add(YOUTUBE_API_VIDEOS_URL, httpx.Response(200, json={"items": []}))

        result = await fetch_metadata(YT, make_config(youtube_api_key="KEY"), client)

        assert not result.found
        assert not result.network_error

    @pytest.mark.asyncio
    async def test_oembed_offline_returns_immediately(self, fake_http, client, make_config):
        """Test a dead connection stops the walk with network_error."""
        fake_http.add(YOUTUBE_OEMBED_URL, httpx.ConnectError("offline"))

        result = await fetch_metadata(YT, make_config(youtube_api_key="KEY"), client)

        assert result.network_error
        assert not result.found
        assert fake_http.calls_to(YOUTUBE_API_VIDEOS_URL) == []

    @pytest.mark.asyncio
    async def test_data_api_offline(self, fake_http, client, make_config):
        """Test a dead connection on the backup tier is a network error."""
        fake_http.add(YOUTUBE_OEMBED_URL, httpx.Response(403))
        fake_http.add(YOUTUBE_API_VIDEOS_URL, httpx.ConnectError("offline"))

        result = await fetch_metadata(YT, make_config(youtube_api_key="KEY"), client)

        assert result.network_error


class TestOtherProviders:
    """Tests for Vimeo, Odysee and unknown URLs."""

    @pytest.mark.asyncio
    async def test_vimeo(self, fake_http, client, make_config):
        """Test Vimeo resolves through oEmbed."""
        fake_http.add(
            VIMEO_OEMBED_URL,
            httpx.Response(
                200,
                json={
                    "title": "T",
                    "author_name": "A",
                    "author_url": "https://vimeo.com/a",
                    "thumbnail_url": "https://i.vimeocdn.com/t.jpg",
                },
            ),
        )
        video = VideoURL.parse("https://vimeo.com/76979871")

        result = await fetch_metadata(video, make_config(), client)

        assert result.found
        assert result.thumbnail == "https://i.vimeocdn.com/t.jpg"

    @pytest.mark.asyncio
    async def test_odysee_scrape(self, fake_http, client, make_config):
        """Test Odysee uses the page scrape and no oEmbed call."""
        fake_http.add(
            "https://odysee.com/",
            httpx.Response(
                200,
                text=(
                    '<script type="application/ld+json">'
                    '{"name": "V", "author": "A", "thumbnailUrl": "https://t.jpg"}'
                    "</script>"
                ),
            ),
        )
        video = VideoURL.parse("https://odysee.com/@chan:1/video:2")

        result = await fetch_metadata(video, make_config(), client)

        assert result.found
        assert result.author_url == "https://odysee.com/@chan:1"
        assert len(fake_http.requests) == 1

    @pytest.mark.asyncio
    async def test_unknown_provider(self, fake_http, client, make_config):
        """Test unknown URLs are not found without any request."""
        video = VideoURL.parse("https://example.com/video")

        result = await fetch_metadata(video, make_config(), client)

        assert not result.found
        assert not result.network_error
        assert fake_http.requests == []

    @pytest.mark.asyncio
    async def test_unresolved_vanity(self, fake_http, client, make_config):
        """Test a Vimeo URL without an ID is not found."""
        video = VideoURL.parse("https://vimeo.com/staffpicks")

        result = await fetch_metadata(video, make_config(), client)

        assert not result.found
        assert fake_http.requests == []

    @pytest.mark.asyncio
    async def test_tiers_follow_capabilities(self, client, make_config):
        """Test the scrape tier is never used for YouTube."""
        with patch(
            "thumby.providers.youtube.client.YouTubeProvider.fetch_oembed",
            new_callable=AsyncMock,
        ) as mock_oembed:
            mock_oembed.return_value.found = False
            result = await fetch_metadata(YT, make_config(), client)

        mock_oembed.assert_awaited_once()
        assert not result.found
