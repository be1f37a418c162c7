"""Shared constants for reasoning-service prompts."""

from __future__ import annotations

from enum import Enum


class ResponseVariant(str, Enum):
    FILE_SELECTION = "file_selection"
    CODE_BUNDLE = "code_bundle"


TEMPLATE_NAMES: dict[ResponseVariant, str] = {
    ResponseVariant.FILE_SELECTION: "file_selection.j2",
    ResponseVariant.CODE_BUNDLE: "implement.j2",
}

SCHEMA_NAMES: dict[ResponseVariant, str] = {
    ResponseVariant.FILE_SELECTION: "file_selection",
    ResponseVariant.CODE_BUNDLE: "code_response",
}

SCHEMA_DESCRIPTIONS: dict[ResponseVariant, str] = {
    ResponseVariant.FILE_SELECTION: "Response containing only a list of file names",
    ResponseVariant.CODE_BUNDLE: "Response containing a filename and scripts",
}


__all__ = ["ResponseVariant", "SCHEMA_DESCRIPTIONS", "SCHEMA_NAMES", "TEMPLATE_NAMES"]
