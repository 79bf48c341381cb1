"""
thumby.providers.youtube - YouTube metadata provider.
"""

from thumby.providers.youtube.client import YouTubeProvider, thumbnail_url

__all__ = ["YouTubeProvider", "thumbnail_url"]
