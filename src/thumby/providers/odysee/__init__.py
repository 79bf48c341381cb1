"""
thumby.providers.odysee - Odysee metadata provider.
"""

from thumby.providers.odysee.client import OdyseeProvider, extract_video_object

__all__ = ["OdyseeProvider", "extract_video_object"]
