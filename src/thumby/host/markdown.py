"""
Filesystem host: Markdown notes with ```vid blocks.

Implements the host collaborators for plain Markdown files so blocks can be
resolved from the command line.
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import TextIO

from thumby.config.defaults import BLOCK_LANGUAGE
from thumby.host.base import BlockContext

logger = logging.getLogger(__name__)

# Fence run plus the rest of the line as the info string
_FENCE_RE = re.compile(r"^[ \t]*(`{3,}|~{3,})[ \t]*(.*?)[ \t]*$")


def _match_fence(line: str) -> tuple[str, str] | None:
    match = _FENCE_RE.match(line)
    if not match:
        return None
    fence, info = match.groups()
    # A backtick fence's info string may not contain backticks
    if fence[0] == "`" and "`" in info:
        return None
    return fence, info


class MarkdownDocument:
    """A Markdown file whose video blocks can be read and rewritten.

    Edits are buffered by replace_range and applied on save(), bottom-up, so
    line ranges handed out by blocks() stay valid while several blocks are
    resolved concurrently.

    The text is split on "\\n" only and lines keep their "\\r", so saving
    reproduces every untouched byte of the file.

    Args:
        text: Document text
        source_path: Storage-relative path of the document
        path: File to write on save(); None for in-memory documents
    """

    def __init__(self, text: str, source_path: str, path: Path | None = None):
        self.path = path
        self.source_path = source_path
        self._raw_lines = text.split("\n")
        self._edits: dict[int, tuple[int, str]] = {}

    @classmethod
    def load(cls, path: Path, source_path: str | None = None) -> MarkdownDocument:
        """Read a document from disk without newline translation."""
        with open(path, encoding="utf-8", newline="") as f:
            text = f.read()
        return cls(text, source_path=source_path or path.name, path=path)

    @property
    def lines(self) -> list[str]:
        """Document lines without their line endings."""
        return [line.removesuffix("\r") for line in self._raw_lines]

    def blocks(self) -> list[tuple[str, BlockContext]]:
        """Find all closed video blocks.

        Returns:
            (body text, context) per block, in document order. The context
            covers the body lines only, not the fences.
        """
        lines = self.lines
        found: list[tuple[str, BlockContext]] = []
        opening: tuple[int, str, bool] | None = None

        for index, line in enumerate(lines):
            fence_match = _match_fence(line)
            if fence_match is None:
                continue
            fence, info = fence_match
            if opening is None:
                language = info.split()[0] if info else ""
                opening = (index, fence, language == BLOCK_LANGUAGE)
                continue

            start, open_fence, is_video = opening
            # A closing fence has no info string and is at least as long
            if info or fence[0] != open_fence[0] or len(fence) < len(open_fence):
                continue
            if is_video:
                body = "\n".join(lines[start + 1 : index])
                found.append(
                    (body, BlockContext(self.source_path, start + 1, index - 1))
                )
            opening = None

        return found

    def replace_range(self, line_start: int, line_end: int, text: str) -> None:
        """Buffer a replacement of lines line_start..line_end (inclusive)."""
        self._edits[line_start] = (line_end, text)

    @property
    def dirty(self) -> bool:
        return bool(self._edits)

    def render(self) -> str:
        """Return the document text with buffered edits applied.

        Replacement lines take the line ending of the fence above them.
        """
        lines = list(self._raw_lines)
        for line_start in sorted(self._edits, reverse=True):
            line_end, text = self._edits[line_start]
            above = lines[line_start - 1] if line_start > 0 else ""
            ending = "\r" if above.endswith("\r") else ""
            lines[line_start : line_end + 1] = [
                line.removesuffix("\r") + ending for line in text.split("\n")
            ]
        return "\n".join(lines)

    def save(self) -> bool:
        """Write buffered edits to disk.

        Returns:
            True if the file was written
        """
        if not self._edits or self.path is None:
            return False
        text = self.render()
        self.path.write_text(text, encoding="utf-8", newline="")
        logger.info(f"Updated {len(self._edits)} block(s) in {self.path}")
        self._raw_lines = text.split("\n")
        self._edits.clear()
        return True


class MarkdownCardRenderer:
    """Renders card nodes as Markdown lines."""

    def __init__(self):
        self.lines: list[str] = []

    def image(self, src: str) -> None:
        self.lines.append(f"![]({src})")

    def link(self, text: str, href: str) -> None:
        self.lines.append(f"[{text}]({href})")

    def text(self, text: str, role: str) -> None:
        if role == "title":
            self.lines.append(f"**{text}**")
        elif role == "timestamp":
            self.lines.append(f"`{text}`")
        else:
            self.lines.append(f"_{text}_")

    def warning(self, message: str) -> None:
        self.lines.append(f"> [!WARNING] {message}")

    def render(self) -> str:
        return "\n".join(self.lines)


class LoggingNotifier:
    """Notifier that logs messages and echoes them to a stream."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stderr
        self.messages: list[str] = []

    def notify(self, message: str, duration_ms: int) -> None:
        logger.info(f"Notice: {message}")
        self.messages.append(message)
        print(message, file=self.stream)


class StdinClipboard:
    """Clipboard that reads piped text once."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stdin

    def read_text(self) -> str:
        return self.stream.read()
