"""Directory walking utilities that feed the renderers and collectors."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, List

from .errors import FilesystemError
from .models import SourceEntry


def is_hidden(name: str) -> bool:
    return name.startswith(".")


class TreeWalker:
    """Builds an ordered SourceEntry hierarchy for a directory.

    Entries keep the order reported by the operating system's directory
    listing; nothing is sorted. Hidden entries (leading ``.``) are dropped
    before recursion so their subtrees are never read. Symlinks are listed
    as leaf entries and never descended into.
    """

    def walk(self, root: str | Path) -> List[SourceEntry]:
        """Return the visible children of ``root`` with their subtrees."""
        return self._walk_dir(Path(root), depth=0)

    def _walk_dir(self, directory: Path, depth: int) -> List[SourceEntry]:
        try:
            with os.scandir(directory) as iterator:
                listing = [entry for entry in iterator if not is_hidden(entry.name)]
        except OSError as exc:
            raise FilesystemError(f"Unable to read directory {directory}: {exc}") from exc

        entries: List[SourceEntry] = []
        for item in listing:
            path = directory / item.name
            try:
                is_dir = item.is_dir(follow_symlinks=False)
            except OSError as exc:
                raise FilesystemError(f"Unable to stat {path}: {exc}") from exc
            children: tuple[SourceEntry, ...] = ()
            if is_dir:
                children = tuple(self._walk_dir(path, depth + 1))
            entries.append(
                SourceEntry(
                    path=str(path),
                    name=item.name,
                    is_dir=is_dir,
                    depth=depth,
                    children=children,
                )
            )
        return entries


def iter_files(entries: Iterable[SourceEntry]) -> Iterator[SourceEntry]:
    """Yield file entries depth-first in walk order."""
    for entry in entries:
        if entry.is_dir:
            yield from iter_files(entry.children)
        else:
            yield entry


__all__ = ["TreeWalker", "is_hidden", "iter_files"]
