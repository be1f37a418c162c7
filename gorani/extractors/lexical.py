"""Regex-based function extraction for quick tree summaries."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import FilesystemError
from ..models import FileSummary, Parameter, Symbol, SymbolKind, is_exported
from .base import SymbolExtractor

_FUNC_PATTERN = re.compile(
    r"^\s*func\s+(?:\((?P<receiver>\w+\s+\*?\w+)\)\s+)?(?P<name>\w+)\s*"
    r"\((?P<params>[^)]*)\)\s*(?P<returns>[^{]*)"
)
_PACKAGE_PATTERN = re.compile(r"^\s*package\s+(\w+)")
_COMMENT_PREFIX = "//"


class LexicalExtractor(SymbolExtractor):
    """Scans Go sources line by line for function declarations.

    This extractor never fails on malformed code: anything that looks like a
    ``func`` line is reported, exported or not. A ``//`` comment on the
    previous non-blank line becomes the function's doc text.
    """

    name = "lexical"

    def __init__(self, *, exported_only: bool = False) -> None:
        self.exported_only = exported_only

    def extract(self, path: str | Path) -> FileSummary:
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise FilesystemError(f"Unable to read {path}: {exc}") from exc

        package: Optional[str] = None
        symbols: List[Symbol] = []
        last_comment: Optional[str] = None

        for line in text.splitlines():
            stripped = line.strip()
            if not stripped:
                continue
            if stripped.startswith(_COMMENT_PREFIX):
                last_comment = stripped[len(_COMMENT_PREFIX):].strip()
                continue

            match = _FUNC_PATTERN.match(line)
            if match is None:
                if package is None:
                    package_match = _PACKAGE_PATTERN.match(line)
                    if package_match:
                        package = package_match.group(1)
                last_comment = None
                continue

            name = match.group("name")
            doc, last_comment = last_comment, None
            if self.exported_only and not is_exported(name):
                continue
            symbols.append(
                Symbol(
                    kind=SymbolKind.FUNCTION,
                    name=name,
                    receiver=match.group("receiver"),
                    parameters=_split_params(match.group("params")),
                    return_types=_split_returns(match.group("returns")),
                    doc=doc or None,
                )
            )

        return FileSummary(path=str(path), package=package, symbols=symbols)


def _split_params(raw: str) -> Tuple[Parameter, ...]:
    params: List[Parameter] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        pieces = part.split(None, 1)
        if len(pieces) == 2:
            params.append(Parameter(name=pieces[0], type=pieces[1].strip()))
        else:
            params.append(Parameter(type=part))
    return tuple(params)


def _split_returns(raw: str) -> Tuple[str, ...]:
    clause = raw.strip()
    return (clause,) if clause else ()


__all__ = ["LexicalExtractor"]
