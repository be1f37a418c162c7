"""Request composition and response parsing for the reasoning service."""

from __future__ import annotations

from .builder import ContextRequest, PromptBuilder
from .constants import ResponseVariant
from .response import CodeBundle, ContextResponse, FileSelection, parse_response

__all__ = [
    "CodeBundle",
    "ContextRequest",
    "ContextResponse",
    "FileSelection",
    "PromptBuilder",
    "ResponseVariant",
    "parse_response",
]
