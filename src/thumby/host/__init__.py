"""
Host collaborator contracts and the Markdown filesystem host.
"""

from thumby.host.base import (
    BlockContext,
    CardRenderer,
    Clipboard,
    Editor,
    Notifier,
    Storage,
)
from thumby.host.markdown import (
    LoggingNotifier,
    MarkdownCardRenderer,
    MarkdownDocument,
    StdinClipboard,
)

__all__ = [
    "BlockContext",
    "CardRenderer",
    "Clipboard",
    "Editor",
    "Notifier",
    "Storage",
    "MarkdownDocument",
    "MarkdownCardRenderer",
    "LoggingNotifier",
    "StdinClipboard",
]
