"""
Utility functions for thumby.
"""

from thumby.utils.formatting import format_clock, single_line
from thumby.utils.logging import log_timed

__all__ = [
    "format_clock",
    "single_line",
    "log_timed",
]
