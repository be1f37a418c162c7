"""Reads files into a single transport-ready payload."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from .config import DEFAULT_CODE_EXTENSIONS
from .errors import FilesystemError, NotAFileError, NotFoundError
from .logging import get_logger
from .models import GrabPayload
from .walker import TreeWalker, is_hidden, iter_files

FOLDER_SEPARATOR = "\n===\n"


class FileCollector:
    """Collects file contents all-or-nothing.

    Every path is validated and read before a payload is produced; the first
    missing path, directory or unreadable file aborts the whole batch.
    """

    def __init__(
        self,
        *,
        extensions: Sequence[str] = DEFAULT_CODE_EXTENSIONS,
        walker: TreeWalker | None = None,
    ) -> None:
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.walker = walker or TreeWalker()
        self.logger = get_logger("collector")

    def collect(self, paths: Iterable[str | Path]) -> GrabPayload:
        entries: List[Tuple[str, str]] = []
        for raw_path in paths:
            path = Path(raw_path)
            if not path.exists():
                raise NotFoundError(f"File not found: {raw_path}")
            if path.is_dir():
                raise NotAFileError(f"{raw_path} is a directory, not a file")
            entries.append((str(raw_path), _read_text(path)))
        return GrabPayload(entries=tuple(entries))

    def collect_directory(self, root: str | Path) -> GrabPayload:
        """Collect every code file below ``root`` in walk order."""
        root_path = Path(root)
        if not root_path.is_dir():
            raise NotFoundError(f"Directory not found: {root}")
        paths = [
            entry.path
            for entry in iter_files(self.walker.walk(root_path))
            if Path(entry.name).suffix.lower() in self.extensions and Path(entry.path).is_file()
        ]
        if not paths:
            raise NotFoundError(f"No code files found in {root}")
        for path in paths:
            self.logger.debug("Found code file: %s", path)
        return self.collect(paths)

    def collect_directories(self, roots: Iterable[str | Path]) -> str:
        """Collect several directories and join their payloads."""
        texts = [self.collect_directory(root).text for root in roots]
        if not texts:
            raise NotFoundError("No directories were given")
        return FOLDER_SEPARATOR.join(texts)


def find_file(root: str | Path, filename: str) -> Path:
    """Return the first file named ``filename`` below ``root``."""
    root_path = Path(root)
    try:
        for path in _iter_visible(root_path):
            if path.name == filename and path.is_file():
                return path
    except OSError as exc:
        raise FilesystemError(f"Unable to search {root}: {exc}") from exc
    raise NotFoundError(f"{filename} not found")


def _iter_visible(directory: Path) -> Iterable[Path]:
    for child in directory.iterdir():
        if is_hidden(child.name):
            continue
        if child.is_symlink() and child.is_dir():
            continue
        if child.is_dir():
            yield from _iter_visible(child)
        else:
            yield child


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise FilesystemError(f"Error reading file {path}: {exc}") from exc


__all__ = ["FOLDER_SEPARATOR", "FileCollector", "find_file"]
