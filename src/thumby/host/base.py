"""
Host collaborator contracts.

thumby never renders, edits documents, or touches files on its own. The host
(a note editor, or the Markdown adapter in host/markdown.py) supplies these
collaborators to the operations.

Paths handed to Storage are storage-relative strings using "/" separators,
the same values that end up in the Thumbnail line of a cache block.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class BlockContext:
    """Where a video block lives.

    Attributes:
        source_path: Storage-relative path of the document
        line_start: First line of the block body (0-based)
        line_end: Last line of the block body (inclusive)
    """

    source_path: str
    line_start: int
    line_end: int


@runtime_checkable
class CardRenderer(Protocol):
    """Emits visual nodes into a render target."""

    def image(self, src: str) -> None: ...

    def link(self, text: str, href: str) -> None: ...

    def text(self, text: str, role: str) -> None:
        """Plain text node; role is "title", "playlist" or "timestamp"."""
        ...

    def warning(self, message: str) -> None: ...


@runtime_checkable
class Editor(Protocol):
    """In-place text replacement keyed by line range."""

    def replace_range(self, line_start: int, line_end: int, text: str) -> None: ...


@runtime_checkable
class Storage(Protocol):
    """Binary file storage."""

    def exists(self, path: str) -> bool: ...

    def write_binary(self, path: str, data: bytes) -> str:
        """Write data and return the written path.

        Raises:
            StorageError: If the write fails.
        """
        ...

    def available_attachment_path(self, filename: str, source_path: str) -> str:
        """Return a non-conflicting attachment path near source_path.

        Implementations may append a " <n>" suffix to the stem when the name
        is taken.
        """
        ...


@runtime_checkable
class Clipboard(Protocol):
    def read_text(self) -> str: ...


@runtime_checkable
class Notifier(Protocol):
    def notify(self, message: str, duration_ms: int) -> None: ...
