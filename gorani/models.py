"""Core data models shared across gorani components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

PAYLOAD_HEADER = ">>> "
PAYLOAD_SEPARATOR = "\n---\n"


@dataclass(frozen=True)
class SourceEntry:
    """One filesystem node visited during a tree walk."""

    path: str
    name: str
    is_dir: bool
    depth: int = 0
    children: Tuple["SourceEntry", ...] = ()


class SymbolKind(Enum):
    FUNCTION = "function"
    STRUCT = "struct"
    INTERFACE = "interface"


@dataclass(frozen=True)
class Parameter:
    """A single parameter; anonymous parameters carry only a type."""

    type: str
    name: Optional[str] = None

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} {self.type}".strip()
        return self.type


@dataclass(frozen=True)
class Symbol:
    """An exported declaration found in a source file."""

    kind: SymbolKind
    name: str
    receiver: Optional[str] = None
    parameters: Tuple[Parameter, ...] = ()
    return_types: Tuple[str, ...] = ()
    doc: Optional[str] = None

    @property
    def exported(self) -> bool:
        return is_exported(self.name)

    def signature(self) -> str:
        """Return `name(params) -> returns` for functions, `Name kind` for types."""
        if self.kind is not SymbolKind.FUNCTION:
            return f"{self.name} {self.kind.value}"
        params = ", ".join(str(param) for param in self.parameters)
        text = f"{self.name}({params})"
        if self.return_types:
            text += " -> " + ", ".join(self.return_types)
        return text


@dataclass
class FileSummary:
    """Package name and ordered symbols extracted from one file."""

    path: str
    package: Optional[str] = None
    symbols: List[Symbol] = field(default_factory=list)
    error: Optional[str] = None


@dataclass(frozen=True)
class GrabPayload:
    """Ordered `(path, content)` pairs ready for the clipboard or a staging file."""

    entries: Tuple[Tuple[str, str], ...]

    @property
    def paths(self) -> List[str]:
        return [path for path, _ in self.entries]

    @property
    def text(self) -> str:
        blocks = [f"{PAYLOAD_HEADER}{path}\n{content}\n" for path, content in self.entries]
        return PAYLOAD_SEPARATOR.join(blocks)


def is_exported(name: str) -> bool:
    """Return True when the first character is an ASCII uppercase letter."""
    return bool(name) and "A" <= name[0] <= "Z"


__all__ = [
    "FileSummary",
    "GrabPayload",
    "Parameter",
    "SourceEntry",
    "Symbol",
    "SymbolKind",
    "is_exported",
]
