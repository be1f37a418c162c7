"""Renders walked trees and extracted symbols into text."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from ..models import FileSummary, SourceEntry, Symbol, SymbolKind
from .styles import RenderStyle, StyleClass, paint

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_INDENT = "│   "
SPACE_INDENT = "    "


class TreeRenderer:
    """Merges a SourceEntry hierarchy with file summaries.

    Plain output is byte-stable for a given walk, so it can be diffed or used
    as a cache key. Decorated output is the plain output with ANSI classes
    wrapped around each token.
    """

    def render(
        self,
        entries: Sequence[SourceEntry],
        summaries: Mapping[str, FileSummary] | None = None,
        style: RenderStyle = RenderStyle.PLAIN,
    ) -> str:
        lines: List[str] = []
        self._render_entries(entries, summaries or {}, style, "", lines)
        return "".join(f"{line}\n" for line in lines)

    def _render_entries(
        self,
        entries: Sequence[SourceEntry],
        summaries: Mapping[str, FileSummary],
        style: RenderStyle,
        indent: str,
        lines: List[str],
    ) -> None:
        for index, entry in enumerate(entries):
            is_last = index == len(entries) - 1
            connector = paint(indent + (LAST_BRANCH if is_last else BRANCH), StyleClass.CONNECTOR, style)
            child_indent = indent + (SPACE_INDENT if is_last else PIPE_INDENT)
            if entry.is_dir:
                lines.append(connector + paint(entry.name, StyleClass.DIRECTORY, style))
                self._render_entries(entry.children, summaries, style, child_indent, lines)
                continue

            lines.append(connector + paint(entry.name, StyleClass.FILE, style))
            summary = summaries.get(entry.path)
            if summary is not None:
                self._render_summary_lines(summary, style, child_indent, lines)

    def _render_summary_lines(
        self,
        summary: FileSummary,
        style: RenderStyle,
        indent: str,
        lines: List[str],
    ) -> None:
        items = [_format_symbol(symbol, style) for symbol in summary.symbols]
        if summary.error:
            items.append(paint(f"! parse error: {summary.error}", StyleClass.ERROR, style))
        for index, item in enumerate(items):
            is_last = index == len(items) - 1
            connector = paint(indent + (LAST_BRANCH if is_last else BRANCH), StyleClass.CONNECTOR, style)
            lines.append(connector + item)

    def render_summary(self, summaries: Mapping[str, FileSummary]) -> str:
        """Return the per-file symbol listing used for full-program summaries."""
        blocks: List[str] = []
        for summary in summaries.values():
            lines = [f"File: {summary.path}"]
            if summary.error:
                lines.append(f"  Error: {summary.error}")
                blocks.append("\n".join(lines) + "\n")
                continue
            lines.append(f"Package: {summary.package or ''}".rstrip())
            for symbol in summary.symbols:
                lines.append(f"  {_summary_label(symbol)}: {_qualified_signature(symbol)}")
                if symbol.doc:
                    lines.append(f"    // {symbol.doc}")
            blocks.append("\n".join(lines) + "\n")
        return "\n".join(blocks)

    def render_public(self, summaries: Mapping[str, FileSummary]) -> str:
        """Return ``- Name: doc`` lines for exported functions."""
        described: Dict[str, str] = {}
        for summary in summaries.values():
            for symbol in summary.symbols:
                if symbol.kind is SymbolKind.FUNCTION and symbol.exported:
                    described[symbol.name] = symbol.doc or ""
        return "".join(f"- {name}: {doc}".rstrip() + "\n" for name, doc in described.items())


def _format_symbol(symbol: Symbol, style: RenderStyle) -> str:
    if symbol.kind is not SymbolKind.FUNCTION:
        return paint(symbol.name, StyleClass.EXPORTED_FUNCTION, style) + paint(
            f" {symbol.kind.value}", StyleClass.RETURN_TYPE, style
        )
    name_class = StyleClass.EXPORTED_FUNCTION if symbol.exported else StyleClass.FUNCTION
    params = ", ".join(paint(str(param), StyleClass.PARAMETER, style) for param in symbol.parameters)
    text = f"{paint(symbol.name, name_class, style)}({params})"
    if symbol.return_types:
        text += paint(" -> " + ", ".join(symbol.return_types), StyleClass.RETURN_TYPE, style)
    return text


def _summary_label(symbol: Symbol) -> str:
    return symbol.kind.value.capitalize()


def _qualified_signature(symbol: Symbol) -> str:
    if symbol.kind is not SymbolKind.FUNCTION:
        return symbol.name
    if symbol.receiver:
        return f"({symbol.receiver}) {symbol.signature()}"
    return symbol.signature()


__all__ = ["TreeRenderer", "BRANCH", "LAST_BRANCH", "PIPE_INDENT", "SPACE_INDENT"]
