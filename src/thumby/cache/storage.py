"""
Local filesystem storage for saved thumbnails.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from thumby.exceptions import StorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Storage rooted at a vault directory.

    Every path is storage-relative with "/" separators; the root itself is
    never exposed, so cache blocks stay valid when the vault moves.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root).expanduser().resolve()

    def _resolve(self, path: str) -> Path:
        resolved = (self.root / PurePosixPath(path)).resolve()
        if not resolved.is_relative_to(self.root):
            raise StorageError(f"Path escapes storage root: {path}")
        return resolved

    def relative(self, path: Path) -> str:
        """Convert an absolute path under the root to a storage path."""
        return path.resolve().relative_to(self.root).as_posix()

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).exists()
        except StorageError:
            return False

    def write_binary(self, path: str, data: bytes) -> str:
        """Write data to path, creating parent directories.

        Raises:
            StorageError: If the write fails
        """
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return path

    def available_attachment_path(self, filename: str, source_path: str) -> str:
        """Return a free path for filename in the folder of source_path.

        A taken name gets " 1", " 2", ... appended to its stem.
        """
        folder = PurePosixPath(source_path).parent
        name = PurePosixPath(filename)
        candidate = folder / name
        counter = 1
        while self.exists(str(candidate)):
            candidate = folder / f"{name.stem} {counter}{name.suffix}"
            counter += 1
        return str(candidate)
