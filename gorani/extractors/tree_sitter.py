"""Tree-sitter powered Go symbol extractor."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from ..errors import FilesystemError, ParseError
from ..models import FileSummary, Parameter, Symbol, SymbolKind, is_exported
from .base import SymbolExtractor

_LANGUAGE = "go"

_TYPE_KINDS = {
    "struct_type": SymbolKind.STRUCT,
    "interface_type": SymbolKind.INTERFACE,
}


class TreeSitterExtractor(SymbolExtractor):
    """Parses Go files into declarations and keeps the exported ones.

    This is the authoritative extractor: functions, methods, structs and
    interfaces are read from the syntax tree. A file whose tree contains
    syntax errors raises ParseError instead of yielding partial symbols.
    """

    name = "tree_sitter"

    def __init__(self, parser: Parser | None = None) -> None:
        self._parser = parser

    def extract(self, path: str | Path) -> FileSummary:
        try:
            source_bytes = Path(path).read_bytes()
        except OSError as exc:
            raise FilesystemError(f"Unable to read {path}: {exc}") from exc

        tree = self._get_parser().parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            raise ParseError(str(path), _describe_error(root))

        package: Optional[str] = None
        symbols: List[Symbol] = []
        previous: Optional[Node] = None
        for child in root.named_children:
            doc = _doc_comment(previous, child, source_bytes)
            previous = child
            if child.type == "package_clause":
                package = _package_name(child, source_bytes)
            elif child.type in {"function_declaration", "method_declaration"}:
                symbol = self._function_symbol(child, source_bytes, doc)
                if symbol is not None:
                    symbols.append(symbol)
            elif child.type == "type_declaration":
                symbols.extend(self._type_symbols(child, source_bytes, doc))

        return FileSummary(path=str(path), package=package, symbols=symbols)

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = get_parser(_LANGUAGE)
        return self._parser

    def _function_symbol(
        self, node: Node, source_bytes: bytes, doc: Optional[str]
    ) -> Optional[Symbol]:
        name_node = node.child_by_field_name("name")
        name = _node_text(name_node, source_bytes) if name_node else ""
        if not is_exported(name):
            return None

        receiver = None
        receiver_node = node.child_by_field_name("receiver")
        if receiver_node is not None:
            receiver = _node_text(receiver_node, source_bytes).strip("()").strip() or None

        parameters_node = node.child_by_field_name("parameters")
        parameters = _parameters(parameters_node, source_bytes) if parameters_node else ()
        result_node = node.child_by_field_name("result")
        return Symbol(
            kind=SymbolKind.FUNCTION,
            name=name,
            receiver=receiver,
            parameters=parameters,
            return_types=_results(result_node, source_bytes),
            doc=doc,
        )

    def _type_symbols(
        self, node: Node, source_bytes: bytes, doc: Optional[str]
    ) -> Iterator[Symbol]:
        # A grouped `type ( ... )` gives each spec its own preceding comment.
        grouped = any(child.type == "(" for child in node.children)
        previous: Optional[Node] = None
        for spec in node.named_children:
            spec_doc = _doc_comment(previous, spec, source_bytes) if grouped else doc
            previous = spec
            if spec.type != "type_spec":
                continue
            name_node = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name_node is None or type_node is None:
                continue
            kind = _TYPE_KINDS.get(type_node.type)
            name = _node_text(name_node, source_bytes)
            if kind is None or not is_exported(name):
                continue
            yield Symbol(kind=kind, name=name, doc=spec_doc)


def _node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def _package_name(node: Node, source_bytes: bytes) -> Optional[str]:
    for child in node.named_children:
        if child.type == "package_identifier":
            return _node_text(child, source_bytes)
    return None


def _doc_comment(previous: Optional[Node], node: Node, source_bytes: bytes) -> Optional[str]:
    if previous is None or previous.type != "comment":
        return None
    if previous.end_point[0] != node.start_point[0] - 1:
        return None
    text = _node_text(previous, source_bytes).strip()
    if not text.startswith("//"):
        return None
    return text[2:].strip() or None


def _parameters(node: Node, source_bytes: bytes) -> Tuple[Parameter, ...]:
    params: List[Parameter] = []
    for child in node.named_children:
        if child.type not in {"parameter_declaration", "variadic_parameter_declaration"}:
            continue
        type_node = child.child_by_field_name("type")
        if type_node is None:
            continue
        type_text = _node_text(type_node, source_bytes)
        if child.type == "variadic_parameter_declaration":
            type_text = f"...{type_text}"
        names = child.children_by_field_name("name")
        if not names:
            params.append(Parameter(type=type_text))
            continue
        for name_node in names:
            params.append(Parameter(name=_node_text(name_node, source_bytes), type=type_text))
    return tuple(params)


def _results(node: Optional[Node], source_bytes: bytes) -> Tuple[str, ...]:
    if node is None:
        return ()
    if node.type != "parameter_list":
        return (_node_text(node, source_bytes),)
    results: List[str] = []
    for child in node.named_children:
        type_node = child.child_by_field_name("type")
        if type_node is None:
            continue
        names = child.children_by_field_name("name")
        results.extend([_node_text(type_node, source_bytes)] * max(1, len(names)))
    return tuple(results)


def _describe_error(root: Node) -> str:
    for node in _walk(root):
        if node.type == "ERROR" or node.is_missing:
            line, column = node.start_point[0] + 1, node.start_point[1] + 1
            return f"syntax error at line {line}, column {column}"
    return "syntax error"


def _walk(node: Node) -> Iterable[Node]:
    yield node
    for child in node.children:
        yield from _walk(child)


__all__ = ["TreeSitterExtractor"]
