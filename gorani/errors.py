"""Error taxonomy shared by gorani components."""

from __future__ import annotations


class GoraniError(RuntimeError):
    """Base class for errors surfaced to the command layer."""


class FilesystemError(GoraniError):
    """Raised when a path or directory cannot be read."""


class ParseError(GoraniError):
    """Raised when a source file cannot be parsed by the syntactic extractor."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class ResponseSchemaError(GoraniError):
    """Raised when a reasoning-service reply does not match the expected shape."""


class NotFoundError(GoraniError):
    """Raised when a requested path does not exist."""


class NotAFileError(GoraniError):
    """Raised when a directory is given where a file was expected."""


class PolicyViolation(GoraniError):
    """Raised when the volume guard refuses an operation."""

    def __init__(self, reason: str, path: str | None = None) -> None:
        message = f"{reason}: {path}" if path else reason
        super().__init__(message)
        self.reason = reason
        self.path = path


class ReasoningServiceError(GoraniError):
    """Raised when the reasoning service call fails."""


class ClipboardError(GoraniError):
    """Raised when the system clipboard cannot be written."""


__all__ = [
    "ClipboardError",
    "FilesystemError",
    "GoraniError",
    "NotAFileError",
    "NotFoundError",
    "ParseError",
    "PolicyViolation",
    "ReasoningServiceError",
    "ResponseSchemaError",
]
