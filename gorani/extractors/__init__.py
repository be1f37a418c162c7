"""Symbol extractor implementations."""

from __future__ import annotations

from .base import SymbolExtractor
from .lexical import LexicalExtractor
from .tree_sitter import TreeSitterExtractor

__all__ = ["LexicalExtractor", "SymbolExtractor", "TreeSitterExtractor"]
