"""System clipboard transport."""

from __future__ import annotations

import pyperclip

from .errors import ClipboardError


def copy(text: str) -> None:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(f"Failed to copy to clipboard: {exc}") from exc


__all__ = ["copy"]
