"""
thumby.providers.vimeo - Vimeo metadata provider.
"""

from thumby.providers.vimeo.client import VimeoProvider

__all__ = ["VimeoProvider"]
