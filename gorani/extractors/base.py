"""Base classes for symbol extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable

from ..errors import ParseError
from ..logging import get_logger
from ..models import FileSummary, SourceEntry
from ..walker import iter_files

GO_SUFFIX = ".go"


class SymbolExtractor(ABC):
    """Contract for extractors that turn a source file into a FileSummary."""

    name = "base"

    def supports(self, path: str | Path) -> bool:
        """Return True when this extractor understands the file."""
        return str(path).endswith(GO_SUFFIX)

    @abstractmethod
    def extract(self, path: str | Path) -> FileSummary:
        """Extract the package name and symbols declared in ``path``."""

    def extract_tree(self, entries: Iterable[SourceEntry]) -> Dict[str, FileSummary]:
        """Extract every supported file under ``entries``, keyed by path.

        Files that fail to parse are kept as annotated summaries so one
        malformed file never blocks the rest of the walk.
        """
        logger = get_logger(f"extractors.{self.name}")
        summaries: Dict[str, FileSummary] = {}
        for entry in iter_files(entries):
            if not self.supports(entry.path):
                continue
            try:
                summaries[entry.path] = self.extract(entry.path)
            except ParseError as exc:
                logger.warning("Skipping %s: %s", entry.path, exc.message)
                summaries[entry.path] = FileSummary(path=entry.path, error=exc.message)
        return summaries


__all__ = ["GO_SUFFIX", "SymbolExtractor"]
